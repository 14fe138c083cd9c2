"""
Unit tests for the filtered lifting-line correction.

Tests:
- Option parsing and parameter validation
- One-time initialization after the start time
- Correction magnitude, direction and relaxation
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import actuator_wing.core.wing as wing_module
from actuator_wing.aero.airfoil import AirfoilTable
from actuator_wing.core.fllc import (
    FLLCData, FLLCState, fllc_correction, fllc_init, fllc_parse
)
from actuator_wing.core.grid import WingData
from actuator_wing.core.sim import SimTime, UniformInflow
from actuator_wing.core.wing import ActuatorSystem, ActuatorWing


INFLOW = UniformInflow([10.0, 0.0, 0.0])


def make_wing(time, start_time=0.025, chord=(1.0,), epsilon_chord=1.0, relaxation=0.1):
    polar = AirfoilTable([-20.0, 20.0], [1.0, 1.0], [0.0, 0.0])
    wdata = WingData(
        num_pts=11,
        start=[0.0, -5.0, 0.0],
        end=[0.0, 5.0, 0.0],
        chord_inp=np.array(chord),
        epsilon_chord=np.full(3, epsilon_chord),
        fllc=FLLCData(start_time=start_time, relaxation=relaxation),
    )
    return ActuatorWing('fllc_wing', wdata, time, airfoil=polar)


def step(wing, time):
    wing.update_positions()
    wing.update_velocities(INFLOW)
    wing.compute_forces()
    wing.process_outputs()
    time.advance()


class TestFLLCParse:

    def test_missing_or_disabled(self):
        assert fllc_parse(None) is None
        assert fllc_parse({}) is None
        assert fllc_parse({'enabled': False, 'start_time': 1.0}) is None

    def test_values(self):
        data = fllc_parse({'enabled': True, 'start_time': 0.5, 'relaxation': 0.3,
                           'optimal_epsilon_chord': 0.2})
        assert data.start_time == 0.5
        assert data.relaxation == 0.3
        assert data.optimal_epsilon_chord == 0.2
        assert data.state is FLLCState.UNINITIALIZED

    def test_defaults(self):
        data = fllc_parse({'start_time': 0.0})
        assert data.relaxation == 0.1
        assert data.optimal_epsilon_chord == 0.25

    @pytest.mark.parametrize("relaxation", [0.0, -0.1, 1.5])
    def test_invalid_relaxation(self, relaxation):
        with pytest.raises(ValueError):
            FLLCData(relaxation=relaxation)

    def test_invalid_optimal_epsilon(self):
        with pytest.raises(ValueError):
            FLLCData(optimal_epsilon_chord=0.0)

    def test_ready_is_strictly_after_start(self):
        data = FLLCData(start_time=1.0)
        assert not data.ready(1.0)
        assert data.ready(1.0 + 1e-9)


class TestFLLCInitialization:
    """Test the one-way state machine."""

    def test_disabled_wing(self):
        time = SimTime(0.0, 0.01)
        wdata = WingData(num_pts=3, start=[0.0, 0.0, 0.0], end=[0.0, 1.0, 0.0])
        wing = ActuatorWing('plain', wdata, time, kind='flat_plate')
        for _ in range(3):
            step(wing, time)
        assert wing.fllc_state is FLLCState.DISABLED
        assert wing.wdata.component_view is None

    def test_initializes_once_after_start_time(self, monkeypatch):
        calls = []
        original = wing_module.fllc_init

        def counting_init(data, view, eps_chord):
            calls.append(time.current_time)
            original(data, view, eps_chord)

        monkeypatch.setattr(wing_module, 'fllc_init', counting_init)

        time = SimTime(0.0, 0.01)
        wing = make_wing(time)

        for _ in range(3):
            step(wing, time)
        assert wing.fllc_state is FLLCState.UNINITIALIZED

        for _ in range(7):
            step(wing, time)

        assert wing.fllc_state is FLLCState.INITIALIZED
        assert len(calls) == 1
        assert calls[0] > 0.025

    def test_initialized_after_force_assembly(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0)

        wing.update_positions()
        wing.update_velocities(INFLOW)
        assert wing.fllc_state is FLLCState.UNINITIALIZED

        time.advance()
        wing.update_positions()
        wing.update_velocities(INFLOW)
        assert wing.fllc_state is FLLCState.UNINITIALIZED
        wing.compute_forces()
        assert wing.fllc_state is FLLCState.INITIALIZED

    def test_view_aliases_wing(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0)
        for _ in range(2):
            step(wing, time)

        view = wing.wdata.component_view
        assert np.shares_memory(view.force, wing.grid.force)
        assert np.shares_memory(view.vel, wing.grid.vel)
        assert np.shares_memory(view.vel_rel, wing.wdata.vel_rel)

    def test_geometry(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0)
        for _ in range(2):
            step(wing, time)

        data = wing.wdata.fllc
        np.testing.assert_allclose(data.r, np.linspace(0.0, 10.0, 11))
        np.testing.assert_allclose(data.dr, wing.wdata.dx)
        np.testing.assert_allclose(data.eps_les, 1.0)
        np.testing.assert_allclose(data.eps_opt, 0.25)

    def test_reinitialization_rejected(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0)
        for _ in range(2):
            step(wing, time)

        with pytest.raises(RuntimeError):
            fllc_init(wing.wdata.fllc, wing.wdata.component_view, 1.0)

    def test_positive_epsilon_required(self):
        time = SimTime(0.0, 0.01)
        with pytest.raises(ValueError, match="epsilon_chord"):
            make_wing(time, start_time=0.02, epsilon_chord=0.0)

    def test_repeated_span_locations_rejected(self):
        wdata = WingData(
            num_pts=5,
            start=[0.0, -1.0, 0.0],
            end=[0.0, 1.0, 0.0],
            span_locs=np.array([0.0, 0.25, 0.5, 0.5, 1.0]),
            chord_inp=np.array([2.0, 1.0]),
            epsilon_chord=np.ones(3),
            fllc=FLLCData(start_time=0.0),
        )
        with pytest.raises(ValueError, match="strictly increasing"):
            ActuatorWing('w', wdata, SimTime(0.0, 0.01), kind='flat_plate')


class TestFLLCCorrection:
    """Test the velocity correction applied after initialization."""

    def test_uniform_circulation_has_no_correction(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0)
        for _ in range(5):
            step(wing, time)

        np.testing.assert_allclose(wing.wdata.fllc.correction, 0.0, atol=1e-12)
        np.testing.assert_allclose(wing.grid.vel, [[10.0, 0.0, 0.0]] * 11, atol=1e-12)

    def test_matching_widths_have_no_correction(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0, chord=(2.0, 1.0), epsilon_chord=0.25)
        for _ in range(5):
            step(wing, time)

        np.testing.assert_allclose(wing.wdata.fllc.correction, 0.0, atol=1e-12)

    def test_tapered_wing_corrected_along_lift(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=0.0, chord=(2.0, 1.0))
        for _ in range(3):
            step(wing, time)

        correction = wing.wdata.fllc.correction
        assert np.any(np.abs(correction) > 1e-8)
        assert np.all(np.isfinite(correction))

        # Lift acts along +z for this wing; the correction only changes w
        np.testing.assert_allclose(wing.grid.vel[:, 0], 10.0)
        np.testing.assert_allclose(wing.grid.vel[:, 1], 0.0)
        np.testing.assert_allclose(wing.grid.vel[:, 2], correction)

    def test_relaxation(self):
        time = SimTime(0.0, 0.01)
        f = 0.3
        wing = make_wing(time, start_time=0.0, chord=(2.0, 1.0), relaxation=f)
        for _ in range(2):
            step(wing, time)

        data = wing.wdata.fllc
        view = wing.wdata.component_view

        fllc_correction(view, data)
        first = data.correction.copy()
        fllc_correction(view, data)
        second = data.correction

        mask = np.abs(first) > 1e-10
        assert np.any(mask)
        np.testing.assert_allclose(second[mask] / first[mask], 2.0 - f)

    def test_uninitialized_is_noop(self):
        time = SimTime(0.0, 0.01)
        wing = make_wing(time, start_time=10.0)
        wing.grid.vel[:] = 1.0
        fllc_correction(wing.wdata.component_view, wing.wdata.fllc)
        np.testing.assert_array_equal(wing.grid.vel, 1.0)

    def test_system_with_correction(self):
        time = SimTime(0.0, 0.01)
        system = ActuatorSystem(time)
        system.add_wing(make_wing(time, start_time=0.02, chord=(2.0, 1.0)))
        totals = system.run(INFLOW, 10)

        lift, drag = totals['fllc_wing']
        assert np.isfinite(lift)
        assert lift > 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
