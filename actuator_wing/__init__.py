"""
Actuator-line wing forces.

Computes the force a wing or blade, represented as a line of actuator
points, exerts on the surrounding fluid from tabulated airfoil polars, with
prescribed motion and an optional filtered lifting-line correction.
"""

from .core import (
    ActuatorSystem,
    ActuatorWing,
    SimTime,
    UniformInflow,
    WingData,
    WingKind,
    linear,
    linear_monotonic
)
from .aero import AirfoilTable, ThinAirfoil
from .io import load_actuator_config

__version__ = "0.1.0"

__all__ = [
    'ActuatorSystem',
    'ActuatorWing',
    'SimTime',
    'UniformInflow',
    'WingData',
    'WingKind',
    'linear',
    'linear_monotonic',
    'AirfoilTable',
    'ThinAirfoil',
    'load_actuator_config'
]
