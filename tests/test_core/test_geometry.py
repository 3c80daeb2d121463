"""
Unit tests for parallelepiped corners and bounding boxes.
"""

import itertools

import numpy as np
import pytest
from qbinning.core.geometry import as_bounds, corners_of_parallelepiped, extrema_of_box
from qbinning.errors import DimensionMismatch


SHEAR_XY = np.array([[1.0, 1.0, 0.0],
                     [0.0, 1.0, 0.0],
                     [0.0, 0.0, 1.0]])


class TestCorners:
    """Test corner enumeration."""

    def test_eight_corners(self):
        corners = corners_of_parallelepiped(SHEAR_XY, [(0, 1), (0, 1), (0, 1)])

        assert corners.shape == (8, 3)
        assert len({tuple(c) for c in corners}) == 8

    def test_identity_frame_corners(self):
        """With an identity frame the corners are all (lo|hi) combinations."""
        bounds = [(-1.0, 1.0), (-2.0, 2.0), (0.0, 3.0)]
        corners = corners_of_parallelepiped(np.eye(3), bounds)

        expected = {tuple(c) for c in itertools.product(*bounds)}
        assert {tuple(c) for c in corners} == expected

    def test_offset(self):
        bounds = [(-1, 1)] * 3
        offset = np.array([10.0, -5.0, 2.0])

        shifted = corners_of_parallelepiped(SHEAR_XY, bounds, offset=offset)
        plain = corners_of_parallelepiped(SHEAR_XY, bounds)

        assert np.allclose(shifted, plain + offset)

    def test_bad_bounds(self):
        with pytest.raises(DimensionMismatch):
            as_bounds([(0, 1), (0, 1)])


class TestExtrema:
    """Test axis-aligned bounding boxes."""

    def test_sheared_box(self):
        """x = u + v, y = v, z = w for the unit cube."""
        extrema = extrema_of_box(SHEAR_XY, [(0, 1), (0, 1), (0, 1)])

        assert np.allclose(extrema, [[0, 2], [0, 1], [0, 1]])

    def test_bounds_interior_points(self):
        """Every point of the parallelepiped lies in the bounding box."""
        rng = np.random.default_rng(3)
        directions = rng.normal(size=(3, 3))
        bounds = np.array([(-0.5, 0.5), (-0.2, 0.4), (-1.0, 1.0)])

        extrema = extrema_of_box(directions, bounds)
        local = rng.uniform(bounds[:, 0], bounds[:, 1], size=(500, 3))
        points = local @ directions.T

        assert np.all(points >= extrema[:, 0] - 1e-12)
        assert np.all(points <= extrema[:, 1] + 1e-12)

    def test_extrema_attained_by_corners(self):
        directions = np.array([[2.0, -1.0, 0.5],
                               [0.0, 1.0, 0.0],
                               [0.3, 0.0, 1.0]])
        bounds = [(-1, 1), (0, 2), (-0.5, 0.5)]

        corners = corners_of_parallelepiped(directions, bounds)
        extrema = extrema_of_box(directions, bounds)

        assert np.allclose(extrema[:, 0], corners.min(axis=0))
        assert np.allclose(extrema[:, 1], corners.max(axis=0))
