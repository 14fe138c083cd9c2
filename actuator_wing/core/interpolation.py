"""
Ordered-table search and piecewise-linear interpolation.

Provides:
- Bounds classification of a query against a sorted abscissa
- Bisection search for one-shot queries
- Hinted forward search for monotonically increasing query sequences
- Scalar, monotonic and unordered linear interpolation over one or many columns

Out-of-range queries are clamped to the boundary sample (flat extrapolation).
"""

from enum import Enum
from typing import NamedTuple, Optional

import numpy as np


#: Abscissa spacing below which the interpolation snaps to the upper sample
EPS = 1.0e-8


class InvalidTableLengths(ValueError):
    """Paired table sequences (or query/output buffers) differ in length."""


class UnreachableSearchState(RuntimeError):
    """A search result carries a classification that no search can produce."""


class Limits(Enum):
    """Classification of a query against the table range."""

    LOWLIM = -2
    UPLIM = -1
    VALID = 0


class SearchIndex(NamedTuple):
    """Result of a table search: lower bracketing index and classification."""

    idx: int
    lim: Limits


def _check_lengths(x, y):
    if len(x) != len(y):
        raise InvalidTableLengths(
            f"table abscissa and ordinate must have same length: {len(x)} vs {len(y)}"
        )


def check_bounds(x, value) -> SearchIndex:
    """
    Classify a query value against an ordered table.

    Parameters:
    -----------
    x : sequence of float
        Ordered abscissa
    value : float
        Query value

    Returns:
    --------
    SearchIndex
        (0, LOWLIM) for tables with fewer than 2 points, NaN queries or
        queries below x[0],
        (len-1, UPLIM) for queries above x[-1], (0, VALID) otherwise
    """
    sz = len(x)

    # NaN fails every comparison and is classified below range
    if sz < 2 or not value >= x[0]:
        return SearchIndex(0, Limits.LOWLIM)
    if value > x[sz - 1]:
        return SearchIndex(sz - 1, Limits.UPLIM)

    return SearchIndex(0, Limits.VALID)


def bisection_search(x, value) -> SearchIndex:
    """
    Locate the bracketing interval of a query by bisection.

    For a VALID query the returned index j satisfies x[j] <= value <= x[j+1].
    Out-of-range queries return the clamped boundary index.
    """
    idx = check_bounds(x, value)
    if idx.lim is not Limits.VALID:
        return idx

    il = 0
    ir = len(x)
    xl = x[0]

    while (ir - il) > 1:
        mid = (il + ir) >> 1
        xmid = x[mid]

        if (value - xmid) * (value - xl) <= 0.0:
            ir = mid
        else:
            il = mid

    return SearchIndex(il, Limits.VALID)


def find_index(x, value, hint: int = 1) -> SearchIndex:
    """
    Hinted forward search for monotonically increasing queries.

    Scans from ``hint`` for the first entry not less than ``value`` and returns
    the preceding index. Pass ``hint=1`` on the first call and the previous
    result's ``idx + 1`` afterwards to get a single linear pass over the table.

    Parameters:
    -----------
    x : sequence of float
        Ordered abscissa
    value : float
        Query value
    hint : int
        Index at which the scan starts

    Returns:
    --------
    SearchIndex
        Lower bracketing index and classification
    """
    idx = check_bounds(x, value)
    if idx.lim is not Limits.VALID:
        return idx

    sz = len(x)
    start = min(max(hint, 1), sz - 1)
    # A hint past the bracket (out-of-order query) restarts from the front
    if value < x[start - 1]:
        start = 1

    for i in range(start, sz):
        if value <= x[i]:
            return SearchIndex(i - 1, Limits.VALID)

    return SearchIndex(sz - 2, Limits.VALID)


def _interpolate(x, y, value, idx: SearchIndex):
    """Evaluate the table at ``value`` given its search result."""
    if idx.lim in (Limits.LOWLIM, Limits.UPLIM):
        if len(y) == 0:
            raise InvalidTableLengths("cannot interpolate an empty table")
        return y[idx.idx]

    if idx.lim is Limits.VALID:
        j = idx.idx
        denom = x[j + 1] - x[j]
        facR = (value - x[j]) / denom if denom > EPS else 1.0
        facL = 1.0 - facR
        return facL * y[j] + facR * y[j + 1]

    raise UnreachableSearchState(f"undefined search classification: {idx.lim!r}")


def linear(x, y, value):
    """
    Interpolate a table at a single query value.

    Parameters:
    -----------
    x : array_like, shape (n,)
        Ordered abscissa
    y : array_like, shape (n,) or (n, m)
        Ordinate; a 2-D table is interpolated column-wise
    value : float
        Query value

    Returns:
    --------
    float or np.ndarray, shape (m,)
        Interpolated value, clamped to the boundary sample outside the table
    """
    _check_lengths(x, y)
    y = np.asarray(y, dtype=float)
    return _interpolate(x, y, value, bisection_search(x, value))


def linear_monotonic(x, y, xout, yout: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Interpolate a table at an increasing sequence of query values.

    Uses the hinted search so a full pass over the table is linear in
    ``len(x) + len(xout)``. Input tables are never modified.

    Parameters:
    -----------
    x : array_like, shape (n,)
        Ordered abscissa
    y : array_like, shape (n,) or (n, m)
        Ordinate
    xout : array_like, shape (k,)
        Increasing query values
    yout : np.ndarray, optional
        Output buffer with first dimension k; allocated when omitted

    Returns:
    --------
    np.ndarray
        Interpolated values, shape (k,) or (k, m)
    """
    _check_lengths(x, y)
    y = np.asarray(y, dtype=float)
    xout = np.asarray(xout, dtype=float)

    if yout is None:
        yout = np.empty((len(xout),) + y.shape[1:])
    elif len(yout) != len(xout):
        raise InvalidTableLengths(
            f"query and output must have same length: {len(xout)} vs {len(yout)}"
        )

    hint = 1
    for i, value in enumerate(xout):
        idx = find_index(x, value, hint)
        yout[i] = _interpolate(x, y, value, idx)
        hint = idx.idx + 1

    return yout


def linear_many(x, y, xout) -> np.ndarray:
    """Interpolate at arbitrarily ordered queries, one bisection per query."""
    _check_lengths(x, y)
    y = np.asarray(y, dtype=float)
    xout = np.asarray(xout, dtype=float)

    yout = np.empty(xout.shape + y.shape[1:])
    for i, value in np.ndenumerate(xout):
        yout[i] = _interpolate(x, y, value, bisection_search(x, value))

    return yout
