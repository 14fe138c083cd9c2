"""
Actuator Wing Configuration Demonstration

Shows how to:
- Load a wing configuration from YAML
- Step the actuator wings through a uniform inflow
- Inspect lift, drag and sectional outputs
- Save and reload configurations
"""

import logging
import sys
import os

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from actuator_wing.io.config import (
    load_actuator_config, save_actuator_config, create_example_config, ActuatorConfig
)
from actuator_wing.logging_config import setup_logging


def main():
    """Run configuration demonstration."""
    setup_logging(logging.INFO)

    print("=" * 70)
    print("Actuator Wing Configuration Demonstration")
    print("=" * 70)
    print()

    # 1. Load configuration from YAML file
    print("1. Loading wing configuration from YAML...")
    config_path = os.path.join(os.path.dirname(__file__), '..', 'config', 'pitching_wing.yaml')

    try:
        config = load_actuator_config(config_path)
    except FileNotFoundError:
        print("   Warning: Config file not found, creating example config...")
        config = ActuatorConfig(create_example_config())

    for wing_config in config.wings:
        print(f"   {wing_config}")
    print()

    # 2. Create wings
    print("2. Creating actuator wings...")
    system = config.create_system()
    sampler = config.create_sampler()
    for wing in system.wings:
        print(f"   {wing}: FLLC {wing.fllc_state.value}")
    print()

    # 3. Run
    print(f"3. Running {config.num_steps} steps (dt = {config.dt} s)...")
    totals = system.run(sampler, config.num_steps)
    for name, (lift, drag) in totals.items():
        print(f"   {name:10s} lift = {lift:9.3f}  drag = {drag:8.4f}  "
              f"FLLC {system[name].fllc_state.value}")
    print()

    # 4. Diagnostics
    print("4. Recorded diagnostics...")
    for wing in system.wings:
        df = wing.outputs.totals_dataframe()
        print(f"   {wing.name}:")
        print(df.to_string(index=False))
        print()

    wing = system.wings[0]
    sections = wing.outputs.to_dataframe()
    last = sections[sections['time_index'] == sections['time_index'].max()]
    print(f"   Final sectional loads of '{wing.name}':")
    print(last[['point', 'aoa', 'cl', 'cd']].to_string(index=False))
    print()

    # 5. Save configuration
    output_path = os.path.join(os.path.dirname(__file__), 'output', 'saved_config.yaml')
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    save_actuator_config(config, output_path)
    print(f"5. Configuration saved to {output_path}")
    print("=" * 70)


if __name__ == "__main__":
    main()
