"""
Unit tests for airfoil polar lookups.

Tests:
- Tabulated polar interpolation and clamping
- CSV loading with header metadata
- Thin-airfoil flat plate
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from actuator_wing.aero.airfoil import AirfoilTable, ThinAirfoil, airfoil_from_dict
from actuator_wing.core.interpolation import InvalidTableLengths


@pytest.fixture
def polar():
    return AirfoilTable([-10.0, 0.0, 10.0], [-1.0, 0.0, 1.0], [0.02, 0.01, 0.02],
                        cm=[0.01, 0.0, -0.01], name='test')


class TestAirfoilTable:
    """Test tabulated polar."""

    def test_degrees_converted(self, polar):
        np.testing.assert_allclose(polar.aoa, np.radians([-10.0, 0.0, 10.0]))

    def test_scalar_lookup(self, polar):
        cl, cd = polar(np.radians(5.0))
        assert cl == pytest.approx(0.5)
        assert cd == pytest.approx(0.015)

    def test_array_lookup(self, polar):
        cl, cd = polar(np.radians([-5.0, 0.0, 5.0]))
        np.testing.assert_allclose(cl, [-0.5, 0.0, 0.5])
        np.testing.assert_allclose(cd, [0.015, 0.01, 0.015])

    def test_beyond_range_clamps(self, polar):
        cl, cd = polar(np.radians(30.0))
        assert cl == pytest.approx(1.0)
        assert cd == pytest.approx(0.02)
        cl, _ = polar(np.radians(-30.0))
        assert cl == pytest.approx(-1.0)

    def test_moment(self, polar):
        assert polar.moment(np.radians(-5.0)) == pytest.approx(0.005)

    def test_moment_missing(self):
        table = AirfoilTable([0.0, 1.0], [0.0, 0.1], [0.01, 0.01])
        with pytest.raises(ValueError):
            table.moment(0.0)

    def test_radian_input(self):
        table = AirfoilTable([-0.2, 0.2], [-1.0, 1.0], [0.0, 0.0], aoa_in_degrees=False)
        assert table.aoa_range == pytest.approx((-0.2, 0.2))
        assert table(0.1)[0] == pytest.approx(0.5)

    def test_length_mismatch(self):
        with pytest.raises(InvalidTableLengths):
            AirfoilTable([0.0, 1.0, 2.0], [0.0, 0.1], [0.0, 0.0, 0.0])

    def test_from_dict(self):
        table = airfoil_from_dict({'alpha': [0.0, 10.0], 'cl': [0.0, 1.1], 'cd': [0.01, 0.03]},
                                  name='inline')
        assert table.name == 'inline'
        assert table(np.radians(10.0))[0] == pytest.approx(1.1)


class TestAirfoilCSV:
    """Test polar loading from CSV files."""

    def test_load_with_metadata(self, tmp_path):
        csv_file = tmp_path / "naca0012.csv"
        csv_file.write_text(
            "# Airfoil: NACA 0012\n"
            "# Reynolds: 1e6\n"
            "Alpha, CL, CD\n"
            "10.0, 1.1, 0.02\n"
            "-10.0, -1.1, 0.02\n"
            "0.0, 0.0, 0.006\n"
        )

        table = AirfoilTable.from_csv(csv_file)

        assert table.name == 'NACA 0012'
        assert table.cm is None
        np.testing.assert_allclose(table.aoa, np.radians([-10.0, 0.0, 10.0]))
        cl, cd = table(np.radians(5.0))
        assert cl == pytest.approx(0.55)
        assert cd == pytest.approx(0.013)

    def test_name_defaults_to_stem(self, tmp_path):
        csv_file = tmp_path / "plate.csv"
        csv_file.write_text("alpha,cl,cd,cm\n0,0,0.01,0\n5,0.5,0.02,-0.01\n")

        table = AirfoilTable.from_csv(csv_file)

        assert table.name == 'plate'
        assert table.cm is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            AirfoilTable.from_csv(tmp_path / "missing.csv")

    def test_missing_columns(self, tmp_path):
        csv_file = tmp_path / "bad.csv"
        csv_file.write_text("alpha,cl\n0,0\n5,0.5\n")
        with pytest.raises(ValueError, match="missing columns"):
            AirfoilTable.from_csv(csv_file)


class TestThinAirfoil:
    """Test flat-plate polar."""

    def test_lift_slope(self):
        cl, cd = ThinAirfoil()(0.1)
        assert cl == pytest.approx(2.0 * np.pi * 0.1)
        assert cd == 0.0

    def test_array(self):
        cl, cd = ThinAirfoil()(np.array([0.0, 0.05]))
        np.testing.assert_allclose(cl, [0.0, 0.1 * np.pi])
        np.testing.assert_array_equal(cd, [0.0, 0.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
