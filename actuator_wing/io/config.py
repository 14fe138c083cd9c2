"""
Actuator Wing Configuration System

Provides YAML-based configuration loading for actuator wings, their airfoil
polars, motion, pitch control and lifting-line correction, plus the
simulation clock and inflow used by standalone runs.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from ..aero.airfoil import AirfoilTable, airfoil_from_dict
from ..core.fllc import fllc_parse
from ..core.grid import WingData
from ..core.motion import MotionType
from ..core.sim import SimTime, UniformInflow
from ..core.wing import ActuatorSystem, ActuatorWing, SourceKind, WingKind

logger = logging.getLogger(__name__)


def _vector(value, name: str) -> np.ndarray:
    vec = np.asarray(value, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"'{name}' must be a 3-component vector, got {value!r}")
    return vec


class WingConfig:
    """
    Configuration of one actuator wing.

    Attributes
    ----------
    name : str
        Wing label
    kind : WingKind
        Sectional aerodynamics ('fixed_wing' or 'flat_plate')
    num_points : int
        Number of actuator points
    motion_type : MotionType
        Prescribed motion
    fllc : dict or None
        Lifting-line correction options
    output_frequency : int
        Diagnostic recording interval in steps
    """

    def __init__(self, config_dict: Dict[str, Any], base_dir: Optional[Path] = None):
        """
        Initialize wing configuration from dictionary.

        Parameters
        ----------
        config_dict : dict
            Wing mapping (typically one entry of the YAML 'wings' list)
        base_dir : Path, optional
            Directory against which relative airfoil file paths are resolved
        """
        self.raw_config = config_dict
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._parse_config()

    def _parse_config(self):
        """Parse and validate the configuration dictionary."""
        wing = self.raw_config

        self.name = wing.get('name', 'wing')
        self.kind = WingKind(wing.get('type', 'fixed_wing'))
        self.source = SourceKind(wing.get('source', 'line'))

        self.num_points = int(wing.get('num_points', 11))
        if self.num_points < 2:
            raise ValueError(f"Wing '{self.name}' needs at least 2 points, got {self.num_points}")

        if 'start' not in wing or 'end' not in wing:
            raise ValueError(f"Wing '{self.name}' must define 'start' and 'end'")
        self.start = _vector(wing['start'], 'start')
        self.end = _vector(wing['end'], 'end')
        self.blade_x = _vector(wing.get('blade_x', [1.0, 0.0, 0.0]), 'blade_x')

        self.span_locs = wing.get('span_locs')

        # Chord: scalar, or a spanwise table
        chord = wing.get('chord', 1.0)
        self.chord = np.atleast_1d(np.asarray(chord, dtype=float))
        self.chord_span_locs = wing.get('chord_span_locs')

        self.epsilon = _vector(wing.get('epsilon', [0.0, 0.0, 0.0]), 'epsilon')
        self.epsilon_chord = _vector(wing.get('epsilon_chord', [0.0, 0.0, 0.0]), 'epsilon_chord')

        self.pitch = float(wing.get('pitch', 0.0))
        self.time_table = np.asarray(wing.get('time_table', []), dtype=float)
        self.pitch_table = np.asarray(wing.get('pitch_table', []), dtype=float)

        self.motion_type = MotionType(wing.get('motion_type', 'none'))
        self.s_period = float(wing.get('s_period', 0.0))
        self.s_vector = _vector(wing.get('s_vector', [0.0, 0.0, 0.0]), 's_vector')
        self.rotation_center = _vector(wing.get('rotation_center', [0.0, 0.0, 0.0]), 'rotation_center')
        if self.motion_type in (MotionType.SINE, MotionType.ROTATION) and self.s_period <= 0.0:
            raise ValueError(
                f"Wing '{self.name}': motion '{self.motion_type.value}' requires a positive s_period"
            )

        self.airfoil_file = wing.get('airfoil_file')
        self.airfoil = wing.get('airfoil')

        self.fllc = wing.get('fllc')
        if self.fllc and self.fllc.get('enabled', True) and self.epsilon_chord[0] <= 0.0:
            raise ValueError(
                f"Wing '{self.name}': FLLC requires a positive epsilon_chord[0]"
            )

        self.output_frequency = int(wing.get('output_frequency', 10))

    def create_airfoil(self):
        """
        Create the airfoil polar from configuration.

        Returns
        -------
        AirfoilTable or None
            None when neither an airfoil file nor an inline table is given
        """
        if self.airfoil_file is not None:
            path = Path(self.airfoil_file)
            if not path.is_absolute():
                path = self.base_dir / path
            return AirfoilTable.from_csv(path)

        if self.airfoil is not None:
            return airfoil_from_dict(self.airfoil, name=f"{self.name}_airfoil")

        return None

    def create_wing_data(self) -> WingData:
        """Create wing metadata from configuration."""
        return WingData(
            num_pts=self.num_points,
            start=self.start.copy(),
            end=self.end.copy(),
            blade_x=self.blade_x.copy(),
            span_locs=None if self.span_locs is None else np.asarray(self.span_locs, dtype=float),
            chord_span_locs=(None if self.chord_span_locs is None
                             else np.asarray(self.chord_span_locs, dtype=float)),
            chord_inp=self.chord.copy(),
            eps_inp=self.epsilon.copy(),
            epsilon_chord=self.epsilon_chord.copy(),
            pitch=self.pitch,
            time_table=self.time_table.copy(),
            pitch_table=self.pitch_table.copy(),
            motion_type=self.motion_type,
            s_period=self.s_period,
            s_vector=self.s_vector.copy(),
            rotation_center=self.rotation_center.copy(),
            fllc=fllc_parse(self.fllc),
        )

    def create_wing(self, time: SimTime) -> ActuatorWing:
        """
        Create the actuator wing.

        Parameters
        ----------
        time : SimTime
            Simulation clock the wing will follow

        Returns
        -------
        ActuatorWing
            Configured wing
        """
        return ActuatorWing(
            self.name,
            self.create_wing_data(),
            time,
            kind=self.kind,
            airfoil=self.create_airfoil(),
            source=self.source,
            output_frequency=self.output_frequency,
        )

    def __repr__(self):
        return (f"WingConfig(name='{self.name}', type='{self.kind.value}', "
                f"num_points={self.num_points}, motion='{self.motion_type.value}')")


class ActuatorConfig:
    """
    Configuration of a standalone actuator run.

    Holds the simulation clock settings, the uniform inflow and the list of
    wings. A single ``wing`` mapping is accepted in place of a ``wings`` list.
    """

    def __init__(self, config_dict: Dict[str, Any], base_dir: Optional[Path] = None):
        self.raw_config = config_dict
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._parse_config()

    def _parse_config(self):
        """Parse configuration dictionary."""
        simulation = self.raw_config.get('simulation', {})
        self.start_time = float(simulation.get('start_time', 0.0))
        self.dt = float(simulation.get('dt', 0.01))
        self.num_steps = int(simulation.get('num_steps', 1))
        self.inflow = _vector(simulation.get('inflow', [1.0, 0.0, 0.0]), 'inflow')

        wings = self.raw_config.get('wings')
        if wings is None:
            wing = self.raw_config.get('wing')
            wings = [wing] if wing is not None else []
        if not wings:
            raise ValueError("Configuration defines no wings")

        self.wings: List[WingConfig] = [WingConfig(w, self.base_dir) for w in wings]

    def create_time(self) -> SimTime:
        return SimTime(self.start_time, self.dt)

    def create_sampler(self) -> UniformInflow:
        return UniformInflow(self.inflow)

    def create_system(self, time: Optional[SimTime] = None) -> ActuatorSystem:
        """
        Create every configured wing on one clock.

        Returns
        -------
        ActuatorSystem
            System holding the configured wings
        """
        system = ActuatorSystem(time if time is not None else self.create_time())
        for wing_config in self.wings:
            system.add_wing(wing_config.create_wing(system.time))
        return system

    def __repr__(self):
        return (f"ActuatorConfig(wings={[w.name for w in self.wings]}, "
                f"dt={self.dt}, num_steps={self.num_steps})")


def load_actuator_config(yaml_file: str) -> ActuatorConfig:
    """
    Load actuator configuration from YAML file.

    Relative airfoil file paths are resolved against the YAML file directory.

    Examples
    --------
    >>> config = load_actuator_config('cases/flat_plate.yaml')
    >>> system = config.create_system()
    >>> system.run(config.create_sampler(), config.num_steps)
    """
    with open(yaml_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    logger.info("Loaded actuator configuration from %s", yaml_file)
    return ActuatorConfig(config_dict or {}, base_dir=Path(yaml_file).resolve().parent)


def save_actuator_config(config: ActuatorConfig, yaml_file: str):
    """Save actuator configuration to YAML file."""
    with open(yaml_file, 'w') as f:
        yaml.dump(config.raw_config, f, default_flow_style=False, sort_keys=False)

    logger.info("Configuration saved to: %s", yaml_file)


def create_example_config() -> Dict[str, Any]:
    """
    Create example actuator configuration dictionary.

    Returns
    -------
    dict
        A rectangular wing with an inline polar, pitch schedule and FLLC
    """
    config = {
        'simulation': {
            'start_time': 0.0,
            'dt': 0.01,
            'num_steps': 20,
            'inflow': [10.0, 0.0, 0.0],  # m/s
        },
        'wings': [
            {
                'name': 'wing1',
                'type': 'fixed_wing',
                'num_points': 21,
                'start': [0.0, -5.0, 0.0],  # m
                'end': [0.0, 5.0, 0.0],
                'blade_x': [1.0, 0.0, 0.0],
                'chord': 1.0,  # m
                'epsilon': [0.0, 0.0, 0.0],
                'epsilon_chord': [1.0, 1.0, 1.0],
                'pitch': 4.0,  # deg
                'motion_type': 'none',
                'airfoil': {
                    'alpha': [-10.0, -5.0, 0.0, 5.0, 10.0, 15.0],  # deg
                    'cl': [-1.0, -0.5, 0.0, 0.55, 1.05, 1.2],
                    'cd': [0.02, 0.012, 0.008, 0.012, 0.02, 0.05],
                },
                'fllc': {
                    'enabled': True,
                    'start_time': 0.05,
                    'relaxation': 0.1,
                    'optimal_epsilon_chord': 0.25,
                },
                'output_frequency': 5,
            }
        ],
    }

    return config
