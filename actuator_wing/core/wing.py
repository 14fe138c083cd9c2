"""
Actuator wings and the per-step operation sequence.

A wing is identified by its kind (how sectional coefficients are obtained)
and its source kind (how forces are projected onto the fluid). Each valid
(kind, source) pair is registered once; any other pair is rejected when the
wing is created.

Per step, for every wing and in this order:
1. update_positions  - sampling points follow the force points at t^n
2. update_velocities - fluid velocity sampling, then the lifting-line correction
3. compute_forces    - motion to t^{n+1}, force assembly, correction trigger
4. process_outputs   - diagnostics on output steps
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..aero.airfoil import AirfoilLookup, ThinAirfoil
from .fllc import FLLCState, fllc_correction, fllc_init
from .forces import assemble_forces
from .grid import ActuatorGrid, WingData, blade_frame, init_data_structures, make_component_view
from .motion import MotionType, new_wing_position_velocity, refresh_wing_position, rotation_increment
from .outputs import WingOutputs
from .sim import SimTime, VelocitySampler

logger = logging.getLogger(__name__)


class WingKind(Enum):
    """Sectional aerodynamics of a wing."""

    FIXED_WING = "fixed_wing"
    FLAT_PLATE = "flat_plate"


class SourceKind(Enum):
    """Force projection of a wing onto the fluid."""

    LINE = "line"


_WING_OPS: Dict[Tuple[WingKind, SourceKind], Callable] = {}


def register_wing_ops(kind: WingKind, source: SourceKind):
    """Register the airfoil-lookup builder of a (kind, source) combination."""
    def decorator(func):
        _WING_OPS[(kind, source)] = func
        return func
    return decorator


def resolve_wing_ops(kind, source) -> Callable:
    """Return the builder for ``(kind, source)`` or fail for unhandled pairs."""
    key = (WingKind(kind), SourceKind(source))
    try:
        return _WING_OPS[key]
    except KeyError:
        raise NotImplementedError(
            f"No actuator operations for wing kind '{key[0].value}' "
            f"with source '{key[1].value}'"
        ) from None


@register_wing_ops(WingKind.FIXED_WING, SourceKind.LINE)
def _fixed_wing_line(airfoil: Optional[AirfoilLookup]) -> AirfoilLookup:
    if airfoil is None:
        raise ValueError("A fixed wing requires an airfoil table")
    return airfoil


@register_wing_ops(WingKind.FLAT_PLATE, SourceKind.LINE)
def _flat_plate_line(airfoil: Optional[AirfoilLookup]) -> AirfoilLookup:
    if airfoil is not None:
        logger.warning("Flat-plate wings use thin-airfoil theory; ignoring %r", airfoil)
    return ThinAirfoil()


class ActuatorWing:
    """
    A lifting line of actuator points.

    Parameters
    ----------
    name : str
        Wing label
    wdata : WingData
        Wing configuration; derived geometry is computed on construction
    time : SimTime
        Simulation clock shared with the rest of the run
    kind : WingKind or str
        Sectional aerodynamics
    airfoil : AirfoilLookup, optional
        Polar for fixed wings
    source : SourceKind or str
        Force projection
    output_frequency : int
        Diagnostic recording interval in steps
    num_vel_pts : int, optional
        Number of velocity-sampling points when the fluid solver samples more
        points than the wing has force points
    """

    def __init__(
        self,
        name: str,
        wdata: WingData,
        time: SimTime,
        kind=WingKind.FIXED_WING,
        airfoil: Optional[AirfoilLookup] = None,
        source=SourceKind.LINE,
        output_frequency: int = 10,
        num_vel_pts: Optional[int] = None,
    ):
        self.name = name
        self.kind = WingKind(kind)
        self.source = SourceKind(source)
        self.aflookup = resolve_wing_ops(self.kind, self.source)(airfoil)

        self.time = time
        self.wdata = wdata
        self.wdata.motion_type = MotionType(self.wdata.motion_type)
        self.grid = ActuatorGrid.allocate(wdata.num_pts, num_vel_pts)
        init_data_structures(self.wdata, self.grid)

        self.outputs = WingOutputs(name, output_frequency)

        logger.info(
            "Created %s wing '%s': %d points, span %.4g, motion '%s', FLLC %s",
            self.kind.value, name, wdata.num_pts,
            np.linalg.norm(wdata.end - wdata.start),
            wdata.motion_type.value, self.fllc_state.value,
        )

    @property
    def fllc_state(self) -> FLLCState:
        if self.wdata.fllc is None:
            return FLLCState.DISABLED
        return self.wdata.fllc.state

    @property
    def force(self) -> np.ndarray:
        """Force on the fluid at each actuator point."""
        return self.grid.force

    def update_positions(self):
        """Sample velocities where the force points currently are (t^n)."""
        refresh_wing_position(self.grid.vel_pos, self.grid.pos, self.wdata.num_pts)

    def update_velocities(self, sampler: Optional[VelocitySampler] = None):
        """
        Refresh the sampled fluid velocity and apply the lifting-line correction.

        Parameters
        ----------
        sampler : VelocitySampler, optional
            Fluid velocity provider; when omitted ``grid.vel`` is assumed to
            have been filled by the fluid solver
        """
        if sampler is not None:
            self.grid.vel[:] = sampler.sample(self.grid.vel_pos, self.time.current_time)

        fllc = self.wdata.fllc
        if fllc is not None and fllc.initialized:
            fllc_correction(self.wdata.component_view, fllc)

    def _advance_motion(self):
        wdata = self.wdata
        tn = self.time.current_time
        tnp1 = self.time.new_time

        if wdata.motion_type is MotionType.ROTATION and wdata.s_period > 0.0:
            # The wing frame turns with the points
            rot = rotation_increment(wdata.s_vector, wdata.s_period, tn, tnp1)
            center = wdata.rotation_center
            wdata.start = center + rot.rotate_vector(wdata.start - center)
            wdata.end = center + rot.rotate_vector(wdata.end - center)
            wdata.blade_x = rot.rotate_vector(wdata.blade_x)
            self.grid.orientation[:] = np.vstack(
                blade_frame(wdata.start, wdata.end, wdata.blade_x)
            )

        wdata.vel_tr = new_wing_position_velocity(
            self.grid.pos, wdata.num_pts, tn, tnp1,
            wdata.motion_type, wdata.s_period, wdata.s_vector,
            center=wdata.rotation_center,
        )

    def compute_forces(self):
        """
        Move the wing to t^{n+1} and compute the forces on the fluid.

        Forces use the velocities sampled at t^n and the wing velocity over
        the step. On the first step past the correction start time the
        lifting-line correction is initialized from a live view of the wing.

        Returns
        -------
        lift, drag : float
            Total lift and drag
        """
        self._advance_motion()

        lift, drag = assemble_forces(
            self.wdata, self.grid, self.aflookup, self.time.current_time
        )

        fllc = self.wdata.fllc
        if fllc is not None and fllc.ready(self.time.current_time):
            self.wdata.component_view = make_component_view(self.wdata, self.grid)
            fllc_init(fllc, self.wdata.component_view, self.wdata.epsilon_chord[0])

        return lift, drag

    def process_outputs(self) -> bool:
        """
        Record diagnostics if this is an output step.

        The step being completed ends at ``new_time`` and carries index
        ``time_index + 1``, the index the clock reports once advanced.
        """
        return self.outputs.record(self.time.new_time, self.time.time_index + 1, self.wdata)

    def __repr__(self):
        return (f"ActuatorWing(name='{self.name}', kind='{self.kind.value}', "
                f"num_pts={self.wdata.num_pts})")


class ActuatorSystem:
    """
    All actuator wings of a run, sharing one simulation clock.

    Wings never share state; each is stepped through the full operation
    sequence before the clock advances.
    """

    def __init__(self, time: SimTime):
        self.time = time
        self.wings: List[ActuatorWing] = []

    def add_wing(self, wing: ActuatorWing) -> ActuatorWing:
        if wing.time is not self.time:
            raise ValueError(f"Wing '{wing.name}' uses a different simulation clock")
        if any(w.name == wing.name for w in self.wings):
            raise ValueError(f"Duplicate wing name: '{wing.name}'")
        self.wings.append(wing)
        return wing

    def __getitem__(self, name: str) -> ActuatorWing:
        for wing in self.wings:
            if wing.name == name:
                return wing
        raise KeyError(name)

    def step(self, sampler: Optional[VelocitySampler] = None, dt: Optional[float] = None) -> Dict[str, Tuple[float, float]]:
        """
        Run one actuator step for every wing and advance the clock.

        Returns
        -------
        dict
            Wing name -> (lift, drag)
        """
        totals = {}
        for wing in self.wings:
            wing.update_positions()
            wing.update_velocities(sampler)
            totals[wing.name] = wing.compute_forces()
            wing.process_outputs()

        self.time.advance(dt)
        return totals

    def run(self, sampler: VelocitySampler, num_steps: int, dt: Optional[float] = None):
        """Step ``num_steps`` times; returns the totals of the last step."""
        totals = {}
        for _ in range(num_steps):
            totals = self.step(sampler, dt)
        return totals
