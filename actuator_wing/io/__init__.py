"""
Configuration input for actuator wings.
"""

from .config import (
    ActuatorConfig,
    WingConfig,
    load_actuator_config,
    save_actuator_config,
    create_example_config
)

__all__ = [
    'ActuatorConfig',
    'WingConfig',
    'load_actuator_config',
    'save_actuator_config',
    'create_example_config'
]
