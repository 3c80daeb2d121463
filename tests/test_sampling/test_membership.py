"""
Unit tests for the bin membership filter.
"""

import numpy as np
import pytest
from qbinning.config import SamplingConfig
from qbinning.core.binning import BinSpec
from qbinning.core.crystal import Crystal
from qbinning.errors import DimensionMismatch
from qbinning.sampling import find_points_in_bin, points_in_bin


SHEAR_XY = np.array([[1.0, 1.0, 0.0],
                     [0.0, 1.0, 0.0],
                     [0.0, 0.0, 1.0]])


class TestFindPointsInBin:
    """Test index selection."""

    def test_boundary_inclusive(self):
        """The corner (1, 1, 1) is inside, (2, 0, 0) is outside."""
        points = [(0, 0, 0), (1, 1, 1), (2, 0, 0)]
        indices = find_points_in_bin(np.zeros(3), np.eye(3), [(-1, 1), (-1, 1), (-1, 1)], points)

        assert list(indices) == [0, 1]

    def test_order_and_duplicates(self):
        points = np.array([[5.0, 5.0, 5.0],
                           [0.1, 0.0, 0.0],
                           [0.1, 0.0, 0.0],
                           [-0.2, 0.3, 0.0]])
        indices = find_points_in_bin(np.zeros(3), np.eye(3), [(-0.5, 0.5)] * 3, points)

        assert list(indices) == [1, 2, 3]

    def test_sheared_frame(self):
        """A point inside the bounding box but outside the parallelepiped is rejected."""
        bounds = [(0, 1), (0, 1), (0, 1)]
        points = np.array([[1.0, 0.5, 0.5],   # u = 0.5, inside
                           [0.2, 0.5, 0.5],   # u = -0.3, outside
                           [1.8, 0.9, 0.1]])  # u = 0.9, inside
        indices = find_points_in_bin(np.zeros(3), SHEAR_XY, bounds, points)

        assert list(indices) == [0, 2]

    def test_shifted_center(self):
        center = np.array([2.0, -1.0, 0.5])
        bounds = [(-0.1, 0.1)] * 3
        points = np.array([center + [0.05, 0.0, -0.05],
                           center + [0.0, 0.2, 0.0],
                           [0.0, 0.0, 0.0]])
        indices = find_points_in_bin(center, np.eye(3), bounds, points)

        assert list(indices) == [0]

    def test_asymmetric_bounds(self):
        bounds = [(0.0, 1.0), (-1.0, 0.0), (-0.5, 0.5)]
        points = np.array([[0.5, -0.5, 0.0],
                           [-0.5, -0.5, 0.0],
                           [0.5, 0.5, 0.0]])
        indices = find_points_in_bin(np.zeros(3), np.eye(3), bounds, points)

        assert list(indices) == [0]

    def test_grid_input_is_flattened(self):
        grid = np.zeros((2, 2, 2, 3))
        grid[1, 1, 1] = [10.0, 0.0, 0.0]
        indices = find_points_in_bin(np.zeros(3), np.eye(3), [(-1, 1)] * 3, grid)

        assert list(indices) == [0, 1, 2, 3, 4, 5, 6]

    def test_rounding_on_faces(self):
        """Points a rounding error past a face are inside; clearly outside points are not."""
        bounds = [(-0.5, 0.5)] * 3
        points = np.array([[0.5000000000000001, 0.0, 0.0],
                           [0.0, -0.5000000000000001, 0.5],
                           [0.5 + 1e-6, 0.0, 0.0]])
        indices = find_points_in_bin(np.zeros(3), np.eye(3), bounds, points)

        assert list(indices) == [0, 1]

    def test_face_tolerance_from_config(self):
        bounds = [(-0.5, 0.5)] * 3
        points = np.array([[0.5 + 1e-6, 0.0, 0.0]])
        config = SamplingConfig(boundary_rtol=1e-5)

        assert list(find_points_in_bin(np.zeros(3), np.eye(3), bounds, points, config=config)) == [0]

    def test_single_point(self):
        indices = find_points_in_bin(np.zeros(3), np.eye(3), [(-1, 1)] * 3, [0.5, 0.5, 0.5])

        assert list(indices) == [0]

    def test_bad_points(self):
        with pytest.raises(DimensionMismatch):
            find_points_in_bin(np.zeros(3), np.eye(3), [(-1, 1)] * 3, np.zeros((4, 2)))


class TestPointsInBin:
    """Test point selection from a BinSpec."""

    def test_returns_points(self):
        crystal = Crystal.from_parameters(4.0, 4.0, 4.0)
        spec = BinSpec.from_widths(crystal, SHEAR_XY, [1.0, 1.0, 1.0])
        points = np.array([[0.0, 0.0, 0.0],
                           [0.9, 0.45, 0.0],
                           [0.9, 0.0, 0.0]])

        inside = points_in_bin(spec, np.zeros(3), points)

        assert inside.shape == (2, 3)
        assert np.allclose(inside, points[:2])
