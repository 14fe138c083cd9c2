"""
Filtered lifting-line correction (FLLC).

Actuator lines smeared with a Gaussian kernel wider than the optimal core
size over-predict the loads near tips and roots. The correction adds to the
sampled velocity the difference between the velocity induced by the trailing
vortex sheet filtered at the optimal width and at the LES width:

    du(z_i) = sum_j -dG_j / (4 pi (z_i - z_j))
              * [exp(-(z_i - z_j)^2 / eps_les_i^2) - exp(-(z_i - z_j)^2 / eps_opt_i^2)]

where G is the sectional circulation recovered from the previous step's lift.
The correction is under-relaxed against its previous value so that, step
after step, it converges as a fixed-point iteration together with the loads.

Each wing's correction goes through a one-way state machine:

    UNINITIALIZED --(current_time > start_time)--> INITIALIZED

DISABLED wings never carry an FLLCData instance.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from .grid import ComponentView, unit

logger = logging.getLogger(__name__)


class FLLCState(Enum):
    """Lifecycle of the lifting-line correction of one wing."""

    DISABLED = "disabled"
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


@dataclass
class FLLCData:
    """
    Lifting-line correction parameters and work arrays.

    Attributes
    ----------
    start_time : float
        The correction initializes on the first step with current time
        strictly greater than this value (s)
    relaxation : float
        Under-relaxation factor in (0, 1] applied to each new correction
    optimal_epsilon_chord : float
        Optimal Gaussian width in chord lengths
    state : FLLCState
        Current lifecycle state
    """

    start_time: float = 0.0
    relaxation: float = 0.1
    optimal_epsilon_chord: float = 0.25
    state: FLLCState = FLLCState.UNINITIALIZED

    r: np.ndarray = field(default_factory=lambda: np.zeros(0))
    dr: np.ndarray = field(default_factory=lambda: np.zeros(0))
    eps_opt: np.ndarray = field(default_factory=lambda: np.zeros(0))
    eps_les: np.ndarray = field(default_factory=lambda: np.zeros(0))
    circulation: np.ndarray = field(default_factory=lambda: np.zeros(0))
    correction: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self):
        if not 0.0 < self.relaxation <= 1.0:
            raise ValueError(f"FLLC relaxation must be in (0, 1], got {self.relaxation}")
        if self.optimal_epsilon_chord <= 0.0:
            raise ValueError(
                f"FLLC optimal_epsilon_chord must be positive, got {self.optimal_epsilon_chord}"
            )

    @property
    def initialized(self) -> bool:
        return self.state is FLLCState.INITIALIZED

    def ready(self, current_time: float) -> bool:
        """Whether the one-time initialization is due at ``current_time``."""
        return self.state is FLLCState.UNINITIALIZED and current_time > self.start_time


def fllc_parse(options: Optional[Dict[str, Any]]) -> Optional[FLLCData]:
    """
    Build correction data from a configuration mapping.

    Returns None when the mapping is missing or ``enabled`` is false.
    """
    if not options or not options.get('enabled', True):
        return None

    return FLLCData(
        start_time=float(options.get('start_time', 0.0)),
        relaxation=float(options.get('relaxation', 0.1)),
        optimal_epsilon_chord=float(options.get('optimal_epsilon_chord', 0.25)),
    )


def _segment_lengths(r: np.ndarray) -> np.ndarray:
    dr = np.empty_like(r)
    dr[0] = 0.5 * (r[1] - r[0])
    dr[-1] = 0.5 * (r[-1] - r[-2])
    dr[1:-1] = 0.5 * (r[2:] - r[:-2])
    return dr


def fllc_init(data: FLLCData, view: ComponentView, eps_chord: float):
    """
    Initialize the correction from the live wing view.

    Parameters
    ----------
    data : FLLCData
        Correction data in the UNINITIALIZED state
    view : ComponentView
        Aliasing view of the wing points
    eps_chord : float
        LES smoothing width in chord lengths, representative of the wing
    """
    if data.state is not FLLCState.UNINITIALIZED:
        raise RuntimeError(f"FLLC cannot be initialized from state {data.state.value}")
    if eps_chord <= 0.0:
        raise ValueError(f"FLLC needs a positive epsilon_chord, got {eps_chord}")

    npts = len(view.pos)
    if npts < 2:
        raise ValueError("FLLC needs at least 2 actuator points")

    blade_y = view.orientation[:, 1, :]
    data.r = np.einsum('ij,ij->i', view.pos - view.pos[0], blade_y)
    data.dr = _segment_lengths(data.r)
    data.eps_opt = data.optimal_epsilon_chord * view.chord
    data.eps_les = eps_chord * view.chord
    data.circulation = np.zeros(npts)
    data.correction = np.zeros(npts)
    data.state = FLLCState.INITIALIZED

    logger.info(
        "FLLC initialized: %d points, eps_les/c=%.3f, eps_opt/c=%.3f, relaxation=%.2f",
        npts, eps_chord, data.optimal_epsilon_chord, data.relaxation,
    )


def fllc_correction(view: ComponentView, data: FLLCData):
    """
    Add the lifting-line correction to the sampled velocities of ``view``.

    Uses the forces and relative wind of the previous step. Does nothing
    until the correction is initialized.
    """
    if not data.initialized:
        return

    blade_x = view.orientation[:, 0, :]
    blade_y = view.orientation[:, 1, :]
    blade_z = view.orientation[:, 2, :]

    rel = view.vel_rel[:, 0:1] * blade_x + view.vel_rel[:, 2:3] * blade_z
    umag = np.linalg.norm(rel, axis=1)
    drag_dir = unit(rel)
    lift_dir = unit(np.cross(drag_dir, blade_y))

    lift = -np.einsum('ij,ij->i', view.force, lift_dir)
    denom = umag * data.dr
    data.circulation = np.divide(
        lift, denom, out=np.zeros_like(lift), where=np.abs(denom) > 1e-12
    )

    dG = np.gradient(data.circulation, data.r) * data.dr

    dz = data.r[:, None] - data.r[None, :]
    dz2 = dz**2
    off_diag = dz != 0.0
    safe_dz = np.where(off_diag, dz, 1.0)
    kernel = np.where(
        off_diag,
        (np.exp(-dz2 / data.eps_les[:, None]**2) - np.exp(-dz2 / data.eps_opt[:, None]**2))
        / (4.0 * np.pi * safe_dz),
        0.0,
    )
    du = -(kernel @ dG)

    f = data.relaxation
    data.correction = (1.0 - f) * data.correction + f * du

    view.vel[:] += data.correction[:, None] * lift_dir
