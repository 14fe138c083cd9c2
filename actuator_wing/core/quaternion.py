"""
Unit quaternions for rigid-body rotation of actuator points.

Convention: q = [q0, q1, q2, q3] = [scalar, vector]
            q = q0 + q1*i + q2*j + q3*k
Rotations are active: rotate_vector turns a vector about the quaternion axis
by the right-hand rule.
"""

import numpy as np

from archimedes import struct, field


@struct(frozen=False)
class Quaternion:
    """
    Quaternion class for rotating actuator points about an axis.

    Convention: q = [q0, q1, q2, q3] where q0 is scalar part.
    """

    q: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))

    @property
    def scalar(self) -> float:
        """Get scalar part (q0)."""
        return self.q[0]

    @property
    def vector(self) -> np.ndarray:
        """Get vector part [q1, q2, q3]."""
        return self.q[1:4]

    def rotate_vector(self, v: np.ndarray) -> np.ndarray:
        """
        Rotate vectors by this quaternion.

        Parameters:
        -----------
        v : np.ndarray, shape (3,) or (n, 3)
            Vectors to rotate

        Returns:
        --------
        v_rot : np.ndarray
            Rotated vectors, same shape as ``v``
        """
        v = np.asarray(v, dtype=float)
        u = self.vector
        # v' = v + 2 q0 (u x v) + 2 u x (u x v)
        uv = np.cross(u, v)
        return v + 2.0 * self.scalar * uv + 2.0 * np.cross(u, uv)

    @staticmethod
    def from_axis_angle(axis: np.ndarray, angle: float) -> 'Quaternion':
        """
        Create quaternion for a rotation of ``angle`` (radians) about ``axis``.

        A zero axis gives the identity rotation.
        """
        axis = np.asarray(axis, dtype=float)
        norm = np.linalg.norm(axis)
        if norm < 1e-10:
            return Quaternion()

        half = 0.5 * angle
        return Quaternion(np.hstack([np.cos(half), np.sin(half) * axis / norm]))

    def __repr__(self) -> str:
        """String representation."""
        return f"Quaternion({self.q})"
