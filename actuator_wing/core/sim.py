"""
Simulation-wide collaborators consumed by actuator wings.

- SimTime: the simulation clock shared by every wing of a run
- VelocitySampler: interface of the fluid solver that supplies velocities
- UniformInflow: constant-velocity sampler for standalone runs and tests
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class SimTime:
    """
    Simulation clock.

    Holds the current time (t^n), the new time (t^{n+1}) and the step index.
    Wings keep a reference to a single clock; the clock must be constructed
    before any wing and advanced only by the time-stepping driver.

    Attributes
    ----------
    current_time : float
        Time at the start of the step (s)
    new_time : float
        Time at the end of the step (s)
    time_index : int
        Number of completed steps
    """

    def __init__(self, start_time: float = 0.0, dt: float = 0.0):
        self.current_time = start_time
        self.new_time = start_time + dt
        self.time_index = 0

    @property
    def delta_t(self) -> float:
        """Step size t^{n+1} - t^n (s)."""
        return self.new_time - self.current_time

    def advance(self, dt: Optional[float] = None):
        """
        Move to the next step.

        Parameters
        ----------
        dt : float, optional
            Size of the next step; defaults to the previous step size
        """
        if dt is None:
            dt = self.delta_t
        if dt < 0.0:
            raise ValueError(f"Time step must be non-negative, got {dt}")

        self.current_time = self.new_time
        self.new_time = self.current_time + dt
        self.time_index += 1

    def __repr__(self):
        return (f"SimTime(current_time={self.current_time}, "
                f"new_time={self.new_time}, time_index={self.time_index})")


class VelocitySampler(ABC):
    """Fluid velocity provider evaluated at actuator sampling points."""

    @abstractmethod
    def sample(self, points: np.ndarray, time: float) -> np.ndarray:
        """
        Sample the fluid velocity.

        Parameters
        ----------
        points : np.ndarray, shape (n, 3)
            Sampling positions
        time : float
            Simulation time of the sample

        Returns
        -------
        np.ndarray, shape (n, 3)
            Fluid velocity at each point
        """
        pass


class UniformInflow(VelocitySampler):
    """Spatially and temporally uniform velocity field."""

    def __init__(self, velocity):
        self.velocity = np.asarray(velocity, dtype=float)

    def sample(self, points: np.ndarray, time: float) -> np.ndarray:
        return np.broadcast_to(self.velocity, np.shape(points)).copy()

    def __repr__(self):
        return f"UniformInflow(velocity={self.velocity})"
