"""
Prescribed kinematics of actuator wings.

Implements:
- Refresh of the velocity-sampling points from the force points
- Advance of the force points from t^n to t^{n+1} for each motion type:
  none, linear translation, sinusoidal translation, rotation about an axis
"""

from enum import Enum

import numpy as np

from .quaternion import Quaternion


class MotionType(Enum):
    """Prescribed motion of a wing."""

    NONE = "none"
    LINEAR = "linear"
    SINE = "sine"
    ROTATION = "rotation"


def refresh_wing_position(vel_pos: np.ndarray, pos: np.ndarray, npts: int):
    """
    Put the velocity-sampling points at the current force-point positions.

    Only the first ``npts`` sampling points are overwritten.

    Parameters:
    -----------
    vel_pos : np.ndarray, shape (m, 3), m >= npts
        Velocity-sampling positions (modified in place)
    pos : np.ndarray, shape (npts, 3)
        Force-point positions at t^n
    npts : int
        Number of actuator points of the wing
    """
    vel_pos[:npts] = pos[:npts]


def _sine_displacement(svec: np.ndarray, period: float, t: float) -> np.ndarray:
    return svec * np.sin(2.0 * np.pi * t / period)


def rotation_increment(axis, period: float, tn: float, tnp1: float) -> Quaternion:
    """Rotation about ``axis`` over [tn, tnp1] at one revolution per ``period``."""
    return Quaternion.from_axis_angle(axis, 2.0 * np.pi * (tnp1 - tn) / period)


def new_wing_position_velocity(
    points: np.ndarray,
    npts: int,
    tn: float,
    tnp1: float,
    motion,
    period: float,
    svec,
    center=None,
) -> np.ndarray:
    """
    Move the force points from t^n to t^{n+1} and return the wing velocity.

    Parameters:
    -----------
    points : np.ndarray, shape (npts, 3)
        Force-point positions at t^n, updated in place to t^{n+1}
    npts : int
        Number of actuator points
    tn, tnp1 : float
        Start and end time of the step (s)
    motion : MotionType or str
        Motion type
    period : float
        Oscillation or revolution period (s), used by sine and rotation
    svec : array_like, shape (3,)
        Translation rate (linear), displacement amplitude (sine) or rotation
        axis (rotation)
    center : array_like, shape (3,), optional
        Point on the rotation axis (rotation only), origin by default

    Returns:
    --------
    vel_tr : np.ndarray, shape (3,) or (npts, 3)
        Velocity of the wing over the step. Uniform translations return a
        single vector; rotation returns one velocity per point.
    """
    motion = MotionType(motion)
    svec = np.asarray(svec, dtype=float)
    dt = tnp1 - tn

    if motion is MotionType.NONE:
        return np.zeros(3)

    if motion is MotionType.LINEAR:
        vel_tr = svec.copy()
        points[:npts] += vel_tr * dt
        return vel_tr

    if period <= 0.0:
        raise ValueError(f"Motion '{motion.value}' requires a positive period, got {period}")

    if motion is MotionType.SINE:
        delta = (_sine_displacement(svec, period, tnp1)
                 - _sine_displacement(svec, period, tn))
        points[:npts] += delta
        return delta / dt if dt > 0.0 else np.zeros(3)

    # Rotation about svec through center, one revolution per period
    center = np.zeros(3) if center is None else np.asarray(center, dtype=float)
    rot = rotation_increment(svec, period, tn, tnp1)

    old = points[:npts].copy()
    points[:npts] = center + rot.rotate_vector(old - center)
    if dt > 0.0:
        return (points[:npts] - old) / dt
    return np.zeros((npts, 3))
