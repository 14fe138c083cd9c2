"""
Unit tests for actuator point layout and derived geometry.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from actuator_wing.core.grid import (
    ActuatorGrid, WingData, blade_frame, init_data_structures, make_component_view, unit
)
from actuator_wing.core.fllc import FLLCData
from actuator_wing.core.interpolation import InvalidTableLengths


def make_wing(**kwargs):
    params = dict(num_pts=5, start=[0.0, 0.0, 0.0], end=[0.0, 4.0, 0.0])
    params.update(kwargs)
    wdata = WingData(**params)
    grid = ActuatorGrid.allocate(wdata.num_pts)
    init_data_structures(wdata, grid)
    return wdata, grid


class TestBladeFrame:

    def test_axis_aligned(self):
        bx, by, bz = blade_frame([0.0, 0.0, 0.0], [0.0, 2.0, 0.0], [1.0, 0.0, 0.0])
        np.testing.assert_allclose(bx, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(by, [0.0, 1.0, 0.0])
        np.testing.assert_allclose(bz, [0.0, 0.0, 1.0])

    def test_orthogonalizes_reference(self):
        bx, by, bz = blade_frame([0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 0.3, 0.0])
        frame = np.vstack([bx, by, bz])
        np.testing.assert_allclose(frame @ frame.T, np.eye(3), atol=1e-12)
        np.testing.assert_allclose(bx, [1.0, 0.0, 0.0], atol=1e-12)

    def test_unit_of_zero(self):
        np.testing.assert_array_equal(unit(np.zeros(3)), np.zeros(3))


class TestInitDataStructures:
    """Test point layout, spanwise lengths, chord and smoothing radius."""

    def test_positions(self):
        _, grid = make_wing()
        np.testing.assert_allclose(grid.pos[:, 1], [0.0, 1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(grid.vel_pos, grid.pos)

    def test_segment_lengths_sum_to_span(self):
        wdata, _ = make_wing()
        np.testing.assert_allclose(wdata.dx, [0.5, 1.0, 1.0, 1.0, 0.5])
        assert np.sum(wdata.dx) == pytest.approx(4.0)

    def test_custom_span_locations(self):
        wdata, grid = make_wing(num_pts=3, span_locs=[0.0, 0.25, 1.0])
        np.testing.assert_allclose(grid.pos[:, 1], [0.0, 1.0, 4.0])
        np.testing.assert_allclose(wdata.dx, [0.5, 2.0, 1.5])

    def test_constant_chord(self):
        wdata, _ = make_wing(chord_inp=[0.8])
        np.testing.assert_allclose(wdata.chord, 0.8)

    def test_tapered_chord(self):
        wdata, _ = make_wing(chord_inp=[2.0, 1.0])
        np.testing.assert_allclose(wdata.chord, [2.0, 1.75, 1.5, 1.25, 1.0])

    def test_chord_table(self):
        wdata, _ = make_wing(chord_span_locs=[0.0, 0.5, 1.0], chord_inp=[1.0, 2.0, 1.0])
        np.testing.assert_allclose(wdata.chord, [1.0, 1.5, 2.0, 1.5, 1.0])

    def test_epsilon_is_max_of_fixed_and_chord_scaled(self):
        wdata, grid = make_wing(chord_inp=[2.0, 1.0], eps_inp=[0.5, 0.5, 0.5],
                                epsilon_chord=[1.0, 0.2, 0.2])
        np.testing.assert_allclose(grid.epsilon[:, 0], wdata.chord)
        np.testing.assert_allclose(grid.epsilon[:, 1], 0.5)
        np.testing.assert_allclose(grid.epsilon[:, 2], 0.5)

    def test_orientation(self):
        _, grid = make_wing()
        for mat in grid.orientation:
            np.testing.assert_allclose(mat, np.eye(3))

    def test_outputs_allocated(self):
        wdata, grid = make_wing()
        assert wdata.vel_rel.shape == (5, 3)
        assert wdata.aoa.shape == (5,)
        np.testing.assert_array_equal(grid.force, 0.0)

    def test_extra_velocity_points(self):
        wdata = WingData(num_pts=3, start=[0.0, 0.0, 0.0], end=[0.0, 1.0, 0.0])
        grid = ActuatorGrid.allocate(3, num_vel_pts=6)
        init_data_structures(wdata, grid)
        assert grid.vel_pos.shape == (6, 3)
        np.testing.assert_array_equal(grid.vel_pos[:3], grid.pos)

    def test_too_few_velocity_points(self):
        with pytest.raises(ValueError):
            ActuatorGrid.allocate(4, num_vel_pts=2)

    def test_pitch_table_mismatch(self):
        with pytest.raises(InvalidTableLengths):
            make_wing(time_table=[0.0, 1.0], pitch_table=[0.0])

    def test_coincident_ends(self):
        with pytest.raises(ValueError, match="coincide"):
            make_wing(end=[0.0, 0.0, 0.0])

    def test_blade_x_parallel_to_span(self):
        with pytest.raises(ValueError, match="parallel"):
            make_wing(blade_x=[0.0, 2.0, 0.0])

    def test_nonpositive_chord(self):
        with pytest.raises(ValueError, match="Chord"):
            make_wing(chord_inp=[1.0, -0.5])

    def test_decreasing_span_locations(self):
        with pytest.raises(ValueError):
            make_wing(num_pts=3, span_locs=[0.0, 0.6, 0.4])

    def test_repeated_span_locations_without_correction(self):
        wdata, grid = make_wing(span_locs=[0.0, 0.25, 0.5, 0.5, 1.0])
        assert grid.pos[2, 1] == grid.pos[3, 1]

    def test_repeated_span_locations_with_correction(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            make_wing(span_locs=[0.0, 0.25, 0.5, 0.5, 1.0], epsilon_chord=[1.0, 1.0, 1.0],
                      fllc=FLLCData())

    def test_correction_requires_epsilon_chord(self):
        with pytest.raises(ValueError, match="epsilon_chord"):
            make_wing(fllc=FLLCData(start_time=0.02))


class TestComponentView:

    def test_view_aliases_storage(self):
        wdata, grid = make_wing()
        view = make_component_view(wdata, grid)

        view.vel[:] = 3.0
        view.force[0] = [1.0, 2.0, 3.0]

        np.testing.assert_array_equal(grid.vel, 3.0)
        np.testing.assert_array_equal(grid.force[0], [1.0, 2.0, 3.0])
        assert np.shares_memory(view.vel_rel, wdata.vel_rel)
        assert np.shares_memory(view.chord, wdata.chord)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
