"""
Sectional aerodynamics for actuator wings.

This module provides airfoil polar lookups.
"""

from .airfoil import AirfoilLookup, AirfoilTable, ThinAirfoil, airfoil_from_dict

__all__ = ['AirfoilLookup', 'AirfoilTable', 'ThinAirfoil', 'airfoil_from_dict']
