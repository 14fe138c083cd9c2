"""
Core actuator-line components.

This module provides table interpolation, wing kinematics, the actuator
point grid, force assembly and the filtered lifting-line correction.
"""

from .interpolation import (
    Limits,
    SearchIndex,
    InvalidTableLengths,
    UnreachableSearchState,
    check_bounds,
    bisection_search,
    find_index,
    linear,
    linear_monotonic,
    linear_many
)
from .sim import SimTime, VelocitySampler, UniformInflow
from .motion import MotionType, refresh_wing_position, new_wing_position_velocity
from .grid import ActuatorGrid, ComponentView, WingData, init_data_structures, make_component_view
from .fllc import FLLCData, FLLCState, fllc_init, fllc_correction, fllc_parse
from .forces import assemble_forces
from .outputs import WingOutputs
from .wing import ActuatorWing, ActuatorSystem, WingKind, SourceKind

__all__ = [
    'Limits',
    'SearchIndex',
    'InvalidTableLengths',
    'UnreachableSearchState',
    'check_bounds',
    'bisection_search',
    'find_index',
    'linear',
    'linear_monotonic',
    'linear_many',
    'SimTime',
    'VelocitySampler',
    'UniformInflow',
    'MotionType',
    'refresh_wing_position',
    'new_wing_position_velocity',
    'ActuatorGrid',
    'ComponentView',
    'WingData',
    'init_data_structures',
    'make_component_view',
    'FLLCData',
    'FLLCState',
    'fllc_init',
    'fllc_correction',
    'fllc_parse',
    'assemble_forces',
    'WingOutputs',
    'ActuatorWing',
    'ActuatorSystem',
    'WingKind',
    'SourceKind'
]
