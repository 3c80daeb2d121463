"""
Unit tests for UniformBinning.

Tests grid construction:
- Step recovery and uniform spacing checks
- Bound pairs collapsing to one bin
- Bin centers in RLU
- Immutability
"""

import numpy as np
import pytest
from qbinning.config import SamplingConfig
from qbinning.core.binning import UniformBinning
from qbinning.core.crystal import Crystal
from qbinning.errors import DimensionMismatch, NonUniformSpacing, SingularDirectionFrame


DIRECTIONS = np.array([[1.0, -1.0, 0.0],
                       [1.0, 1.0, 0.0],
                       [0.0, 0.0, 1.0]])


@pytest.fixture
def crystal():
    return Crystal.from_parameters(4.0, 4.0, 6.0, 90.0, 90.0, 120.0)


class TestUniformBinningSteps:
    """Test step recovery from axis values."""

    def test_recovered_steps(self, crystal):
        binning = UniformBinning.from_axes(
            crystal, DIRECTIONS,
            us=np.linspace(0, 1, 11),
            vs=np.linspace(-0.3, 0.3, 4),
            ws=[-0.1, 0.1],
            es=np.linspace(0, 5, 21)
        )

        assert np.allclose(binning.steps, [0.1, 0.2, 0.2, 0.25])

    @pytest.mark.parametrize("step, count", [(0.05, 3), (0.3, 7), (1.5, 12)])
    def test_uniform_list(self, crystal, step, count):
        us = 0.2 + step * np.arange(count)
        binning = UniformBinning.from_axes(crystal, np.eye(3), us, [0, 1], [0, 1], [0, 1])

        assert np.isclose(binning.steps[0], step)
        assert binning.shape[0] == count

    def test_non_uniform_spacing(self, crystal):
        with pytest.raises(NonUniformSpacing):
            UniformBinning.from_axes(crystal, np.eye(3), [0.0, 0.1, 0.3], [0, 1], [0, 1], [0, 1])

    def test_non_uniform_energy(self, crystal):
        with pytest.raises(NonUniformSpacing):
            UniformBinning.from_axes(crystal, np.eye(3), [0, 1], [0, 1], [0, 1], [0.0, 1.0, 1.5, 2.0])

    def test_custom_tolerance(self, crystal):
        binning = UniformBinning.from_axes(
            crystal, np.eye(3), [0.0, 0.1, 0.2001], [0, 1], [0, 1], [0, 1],
            config=SamplingConfig(spacing_atol=1e-3)
        )

        assert np.isclose(binning.steps[0], 0.1)

    def test_descending_axis(self, crystal):
        binning = UniformBinning.from_axes(crystal, np.eye(3), [1.0, 0.5, 0.0], [0, 1], [0, 1], [0, 1])

        assert np.isclose(binning.steps[0], -0.5)
        assert np.allclose(binning.binspec.bounds[0], [-0.25, 0.25])

    def test_single_value_axis(self, crystal):
        with pytest.raises(DimensionMismatch):
            UniformBinning.from_axes(crystal, np.eye(3), [0.5], [0, 1], [0, 1], [0, 1])


class TestUniformBinningCenters:
    """Test bin center construction."""

    def test_bound_pair_collapses(self, crystal):
        """A two-element axis gives one bin at the midpoint."""
        binning = UniformBinning.from_axes(crystal, np.eye(3), [-0.5, 1.5], [0, 1], [2, 4], [0, 1])

        assert binning.shape == (1, 1, 1)
        assert np.allclose(binning.bincenters[0, 0, 0], [0.5, 0.5, 3.0])
        assert np.allclose(binning.steps[:3], [2.0, 1.0, 2.0])

    def test_centers_through_directions(self, crystal):
        us = [0.0, 0.5, 1.0]
        vs = [-0.1, 0.1]
        ws = [0.0, 0.25, 0.5, 0.75]
        binning = UniformBinning.from_axes(crystal, DIRECTIONS, us, vs, ws, [0, 1])

        assert binning.bincenters.shape == (3, 1, 4, 3)
        for i, u in enumerate(us):
            for k, w in enumerate(ws):
                expected = DIRECTIONS @ np.array([u, 0.0, w])
                assert np.allclose(binning.bincenters[i, 0, k], expected)

    def test_energy_centers(self, crystal):
        es = np.linspace(0.5, 4.5, 5)
        binning = UniformBinning.from_axes(crystal, np.eye(3), [0, 1], [0, 1], [0, 1], es)

        assert np.allclose(binning.energy_centers, es)
        assert np.isclose(binning.binspec.energy_width, 1.0)

    def test_binspec_matches_steps(self, crystal):
        binning = UniformBinning.from_axes(
            crystal, DIRECTIONS, [0.0, 0.1, 0.2], [0.0, 0.2], [0.0, 0.4], [0, 1]
        )

        assert np.allclose(binning.binspec.bounds, [[-0.05, 0.05], [-0.1, 0.1], [-0.2, 0.2]])
        assert np.allclose(binning.directions, DIRECTIONS)
        assert binning.crystal is crystal

    def test_base_corner(self, crystal):
        binning = UniformBinning.from_axes(
            crystal, DIRECTIONS, [0.0, 0.1, 0.2], [0.0, 0.2], [0.0, 0.4], [0, 1]
        )

        expected = binning.bincenters[0, 0, 0] - 0.5 * DIRECTIONS @ np.array([0.1, 0.2, 0.4])
        assert np.allclose(binning.base, expected)

    def test_num_bins_and_repr(self, crystal):
        binning = UniformBinning.from_axes(
            crystal, np.eye(3), np.linspace(0, 1, 5), [0, 1], np.linspace(0, 1, 3), [0, 1]
        )

        assert binning.num_bins == 15
        assert repr(binning).startswith("UniformBinning(shape=(5, 1, 3)")


class TestUniformBinningValidation:
    """Test construction errors and immutability."""

    def test_singular_directions(self, crystal):
        directions = np.array([[1.0, 1.0, 0.0],
                               [1.0, 1.0, 0.0],
                               [0.0, 0.0, 1.0]])
        with pytest.raises(SingularDirectionFrame):
            UniformBinning.from_axes(crystal, directions, [0, 1], [0, 1], [0, 1], [0, 1])

    def test_read_only(self, crystal):
        binning = UniformBinning.from_axes(crystal, np.eye(3), [0, 1], [0, 1], [0, 1], [0, 1])

        with pytest.raises(ValueError):
            binning.bincenters[0, 0, 0, 0] = 1.0
        with pytest.raises(ValueError):
            binning.steps[0] = 1.0
        with pytest.raises(ValueError):
            binning.energy_centers[0] = 1.0

    def test_to_dict(self, crystal):
        binning = UniformBinning.from_axes(crystal, np.eye(3), [0, 1], [0, 1], [0, 1], [0, 1])
        data = binning.to_dict()

        assert data['steps'] == [1.0, 1.0, 1.0, 1.0]
        assert np.allclose(data['bincenters'], [[[[0.5, 0.5, 0.5]]]])
