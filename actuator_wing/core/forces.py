"""
Sectional force assembly for actuator wings.

Each actuator point is treated as an independent 2D section (lifting-line
model): the relative wind is projected on the chordwise/normal plane, the
angle of attack selects lift and drag coefficients from the airfoil polar,
and the resulting aerodynamic force is applied to the fluid with opposite
sign. All points are evaluated together as array operations; the lift and
drag totals are reductions over the point axis.
"""

import logging

import numpy as np

from .grid import ActuatorGrid, WingData, blade_frame, unit
from .interpolation import linear

logger = logging.getLogger(__name__)


def pitch_offset(wdata: WingData, current_time: float) -> float:
    """
    Pitch added to the geometric angle of attack (radians).

    Interpolated from the pitch schedule when one is configured, otherwise
    the static pitch angle converted from degrees.
    """
    if wdata.has_pitch_schedule:
        current_pitch = float(linear(wdata.time_table, wdata.pitch_table, current_time))
        logger.debug("Scheduled pitch at t=%.6g: %.6g rad", current_time, current_pitch)
        return current_pitch

    return np.radians(wdata.pitch)


def assemble_forces(wdata: WingData, grid: ActuatorGrid, aflookup, current_time: float):
    """
    Compute the force each actuator point exerts on the fluid.

    Uses the sampled velocities in ``grid.vel`` and the wing velocity
    ``wdata.vel_tr``. Writes ``grid.force`` and the per-point outputs
    (relative wind, angle of attack in degrees, Cl, Cd) in place and stores
    the lift and drag totals on ``wdata``.

    Parameters:
    -----------
    wdata : WingData
        Wing metadata and outputs
    grid : ActuatorGrid
        Actuator points
    aflookup : AirfoilLookup
        Maps angle of attack (radians, array) to (cl, cd)
    current_time : float
        Simulation time used for the pitch schedule (s)

    Returns:
    --------
    lift, drag : float
        Total lift and drag over all points
    """
    npts = wdata.num_pts

    blade_x, blade_y, blade_z = blade_frame(wdata.start, wdata.end, wdata.blade_x)

    # Wind relative to the moving wing, without its spanwise component
    rel = grid.vel[:npts] - wdata.vel_tr
    wind_x = rel @ blade_x
    wind_z = rel @ blade_z

    windvector = np.zeros((npts, 3))
    windvector[:, 0] = wind_x
    windvector[:, 2] = wind_z
    vmag = np.hypot(wind_x, wind_z)

    aoa = np.arctan2(wind_z, wind_x) + pitch_offset(wdata, current_time)

    cl, cd = aflookup(aoa)
    cl = np.broadcast_to(np.asarray(cl, dtype=float), (npts,))
    cd = np.broadcast_to(np.asarray(cd, dtype=float), (npts,))

    qval = 0.5 * vmag**2 * wdata.chord[:npts] * wdata.dx[:npts]
    lift = qval * cl
    drag = qval * cd

    drag_dir = unit(wind_x[:, None] * blade_x + wind_z[:, None] * blade_z)
    lift_dir = unit(np.cross(drag_dir, blade_y))

    # Reaction of the aerodynamic force on the fluid
    force = -(lift_dir * lift[:, None] + drag_dir * drag[:, None])
    if not np.all(np.isfinite(force)):
        logger.warning("Non-finite actuator forces detected on wing with %d points", npts)

    grid.force[:npts] = force

    wdata.vel_rel[:npts] = windvector
    wdata.aoa[:npts] = np.degrees(aoa)
    wdata.cl[:npts] = cl
    wdata.cd[:npts] = cd

    wdata.lift = float(np.sum(lift))
    wdata.drag = float(np.sum(drag))

    return wdata.lift, wdata.drag
