"""
Actuator-point storage for a single wing.

- ActuatorGrid: per-point positions, sampled velocities, forces, smoothing
  radii and orientations shared with the fluid solver
- WingData: wing geometry, motion parameters, per-step outputs and totals
- ComponentView: aliasing slices of the first ``num_pts`` points
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import numpy as np

from .interpolation import InvalidTableLengths, linear_monotonic
from .motion import MotionType

if TYPE_CHECKING:
    from .fllc import FLLCData


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Normalize vectors along the last axis; near-zero vectors map to zero."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v, axis=-1, keepdims=True)
    return np.where(norm > eps, v / np.where(norm > eps, norm, 1.0), 0.0)


def blade_frame(start, end, blade_x):
    """
    Build the orthonormal wing frame.

    blade_y runs along the span, blade_z = blade_x x blade_y, and blade_x is
    re-orthogonalized as blade_y x blade_z so a reference chord direction that
    is not exactly perpendicular to the span still yields an orthonormal frame.

    Returns:
    --------
    blade_x, blade_y, blade_z : np.ndarray, shape (3,)
    """
    wspan = np.asarray(end, dtype=float) - np.asarray(start, dtype=float)

    bx = unit(blade_x)
    by = unit(wspan)
    bz = unit(np.cross(bx, by))
    bx = unit(np.cross(by, bz))

    return bx, by, bz


@dataclass
class ActuatorGrid:
    """
    Per-point arrays of one wing, all ordered from ``start`` to ``end``.

    ``vel_pos`` and ``vel`` may hold more entries than ``pos`` when the fluid
    solver samples extra points; the first ``num_pts`` entries belong to the
    force points.
    """

    pos: np.ndarray
    vel_pos: np.ndarray
    vel: np.ndarray
    force: np.ndarray
    epsilon: np.ndarray
    orientation: np.ndarray

    @classmethod
    def allocate(cls, num_pts: int, num_vel_pts: Optional[int] = None) -> 'ActuatorGrid':
        """Zero-initialized grid for ``num_pts`` force points."""
        num_vel_pts = num_pts if num_vel_pts is None else num_vel_pts
        if num_vel_pts < num_pts:
            raise ValueError(
                f"Need at least {num_pts} velocity points, got {num_vel_pts}"
            )
        return cls(
            pos=np.zeros((num_pts, 3)),
            vel_pos=np.zeros((num_vel_pts, 3)),
            vel=np.zeros((num_vel_pts, 3)),
            force=np.zeros((num_pts, 3)),
            epsilon=np.zeros((num_pts, 3)),
            orientation=np.tile(np.eye(3), (num_pts, 1, 1)),
        )

    @property
    def num_pts(self) -> int:
        return len(self.pos)


@dataclass
class ComponentView:
    """
    Views (not copies) of the wing state used by the lifting-line correction.

    Writing through a view updates the owning grid or wing arrays.
    """

    pos: np.ndarray
    vel_pos: np.ndarray
    vel: np.ndarray
    force: np.ndarray
    epsilon: np.ndarray
    orientation: np.ndarray
    chord: np.ndarray
    vel_rel: np.ndarray


@dataclass
class WingData:
    """
    Wing configuration and per-step state.

    Angles are stored in radians except ``pitch`` (degrees, as configured)
    and the recorded ``aoa`` (degrees).
    """

    num_pts: int
    start: np.ndarray
    end: np.ndarray
    blade_x: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))

    span_locs: Optional[np.ndarray] = None
    chord_span_locs: Optional[np.ndarray] = None
    chord_inp: np.ndarray = field(default_factory=lambda: np.ones(1))
    eps_inp: np.ndarray = field(default_factory=lambda: np.zeros(3))
    epsilon_chord: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Pitch: static angle (deg) or schedule pitch_table(time_table) in radians
    pitch: float = 0.0
    time_table: np.ndarray = field(default_factory=lambda: np.zeros(0))
    pitch_table: np.ndarray = field(default_factory=lambda: np.zeros(0))

    motion_type: MotionType = MotionType.NONE
    s_period: float = 0.0
    s_vector: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation_center: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Derived per-point geometry
    dx: np.ndarray = field(default_factory=lambda: np.zeros(0))
    chord: np.ndarray = field(default_factory=lambda: np.zeros(0))

    # Per-step state and outputs
    vel_tr: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vel_rel: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    aoa: np.ndarray = field(default_factory=lambda: np.zeros(0))
    cl: np.ndarray = field(default_factory=lambda: np.zeros(0))
    cd: np.ndarray = field(default_factory=lambda: np.zeros(0))
    lift: float = 0.0
    drag: float = 0.0

    fllc: Optional['FLLCData'] = None
    component_view: Optional[ComponentView] = None

    @property
    def has_pitch_schedule(self) -> bool:
        return len(self.pitch_table) > 0


def init_data_structures(wdata: WingData, grid: ActuatorGrid):
    """
    Lay out the actuator points and derived per-point geometry.

    Points are placed at ``start + span_locs * (end - start)``; each point
    carries the spanwise length halfway to its neighbours. Chord is
    interpolated from ``(chord_span_locs, chord_inp)`` and the smoothing radius
    is the larger of the fixed ``eps_inp`` and ``epsilon_chord * chord``.

    Parameters:
    -----------
    wdata : WingData
        Wing metadata (derived fields are filled in place)
    grid : ActuatorGrid
        Grid sized for ``wdata.num_pts`` points (filled in place)
    """
    npts = wdata.num_pts
    if npts < 2:
        raise ValueError(f"A wing needs at least 2 actuator points, got {npts}")
    if grid.num_pts != npts:
        raise ValueError(f"Grid has {grid.num_pts} points, wing expects {npts}")

    wdata.start = np.asarray(wdata.start, dtype=float)
    wdata.end = np.asarray(wdata.end, dtype=float)
    wdata.blade_x = np.asarray(wdata.blade_x, dtype=float)
    wdata.s_vector = np.asarray(wdata.s_vector, dtype=float)
    wdata.rotation_center = np.asarray(wdata.rotation_center, dtype=float)
    wdata.time_table = np.asarray(wdata.time_table, dtype=float)
    wdata.pitch_table = np.asarray(wdata.pitch_table, dtype=float)
    if len(wdata.time_table) != len(wdata.pitch_table):
        raise InvalidTableLengths(
            f"time_table and pitch_table must have same length: "
            f"{len(wdata.time_table)} vs {len(wdata.pitch_table)}"
        )
    wspan = wdata.end - wdata.start
    wlen = np.linalg.norm(wspan)
    if wlen < 1e-12:
        raise ValueError("Wing start and end points coincide")

    if np.linalg.norm(np.cross(wdata.blade_x, wspan)) < 1e-12 * wlen:
        raise ValueError("Reference blade_x direction is parallel to the span")

    if wdata.span_locs is None:
        wdata.span_locs = np.linspace(0.0, 1.0, npts)
    span_locs = np.asarray(wdata.span_locs, dtype=float)
    if len(span_locs) != npts:
        raise ValueError(
            f"span_locs has {len(span_locs)} entries, expected {npts}"
        )
    if np.any(np.diff(span_locs) < 0.0):
        raise ValueError("span_locs must be increasing")
    # The lifting-line correction differentiates along the span
    if wdata.fllc is not None and np.any(np.diff(span_locs) <= 0.0):
        raise ValueError("span_locs must be strictly increasing when FLLC is enabled")
    wdata.span_locs = span_locs

    grid.pos[:] = wdata.start + span_locs[:, None] * wspan

    dx = np.empty(npts)
    dx[0] = 0.5 * wlen * (span_locs[1] - span_locs[0])
    dx[-1] = 0.5 * wlen * (span_locs[-1] - span_locs[-2])
    dx[1:-1] = 0.5 * wlen * (span_locs[2:] - span_locs[:-2])
    wdata.dx = dx

    chord_inp = np.atleast_1d(np.asarray(wdata.chord_inp, dtype=float))
    if wdata.chord_span_locs is None:
        if len(chord_inp) == 1:
            wdata.chord = np.full(npts, chord_inp[0])
        else:
            wdata.chord = linear_monotonic(
                np.linspace(0.0, 1.0, len(chord_inp)), chord_inp, span_locs
            )
    else:
        wdata.chord = linear_monotonic(wdata.chord_span_locs, chord_inp, span_locs)

    if np.any(wdata.chord <= 0.0):
        raise ValueError("Chord must be positive at every actuator point")

    wdata.eps_inp = np.asarray(wdata.eps_inp, dtype=float)
    wdata.epsilon_chord = np.asarray(wdata.epsilon_chord, dtype=float)
    if wdata.fllc is not None and wdata.epsilon_chord[0] <= 0.0:
        raise ValueError(
            f"FLLC needs a positive epsilon_chord[0], got {wdata.epsilon_chord[0]}"
        )
    grid.epsilon[:] = np.maximum(
        wdata.eps_inp[None, :],
        wdata.epsilon_chord[None, :] * wdata.chord[:, None],
    )

    bx, by, bz = blade_frame(wdata.start, wdata.end, wdata.blade_x)
    grid.orientation[:] = np.vstack([bx, by, bz])

    grid.vel_pos[:npts] = grid.pos
    grid.force[:] = 0.0

    wdata.vel_tr = np.zeros(3)
    wdata.vel_rel = np.zeros((npts, 3))
    wdata.aoa = np.zeros(npts)
    wdata.cl = np.zeros(npts)
    wdata.cd = np.zeros(npts)


def make_component_view(wdata: WingData, grid: ActuatorGrid) -> ComponentView:
    """Slice the first ``num_pts`` points of every per-point array."""
    npts = wdata.num_pts
    return ComponentView(
        pos=grid.pos[:npts],
        vel_pos=grid.vel_pos[:npts],
        vel=grid.vel[:npts],
        force=grid.force[:npts],
        epsilon=grid.epsilon[:npts],
        orientation=grid.orientation[:npts],
        chord=wdata.chord[:npts],
        vel_rel=wdata.vel_rel[:npts],
    )
