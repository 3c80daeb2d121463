"""
Corners and bounding boxes of parallelepiped bins.

A bin is the axis-aligned box given by its bounds in local coordinates.
Mapped through a non-orthogonal frame it becomes a parallelepiped, whose
axis-aligned bounding box is needed whenever a grid is laid out in
Cartesian (lab) space.
"""

import itertools
from typing import Optional, Sequence, Tuple

import numpy as np

from ..errors import DimensionMismatch


def as_bounds(bounds: Sequence[Tuple[float, float]]) -> np.ndarray:
    """
    Coerce bounds into a float array of shape (3, 2).

    Raises
    ------
    DimensionMismatch
        If there are not exactly three (lo, hi) pairs
    """
    arr = np.asarray(bounds, dtype=float)
    if arr.shape != (3, 2):
        raise DimensionMismatch(f"Bounds must be three (lo, hi) pairs, got shape {arr.shape}")
    return arr


def corners_of_parallelepiped(directions: np.ndarray,
                              bounds: Sequence[Tuple[float, float]],
                              offset: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Enumerate the corners of a parallelepiped.

    Parameters
    ----------
    directions : np.ndarray, shape (3, 3)
        Columns are the edge directions
    bounds : sequence of three (lo, hi) pairs
        Extent along each direction
    offset : np.ndarray, shape (3,), optional
        Translation added to every corner

    Returns
    -------
    corners : np.ndarray, shape (8, 3)
        offset + directions @ (b1[i], b2[j], b3[k]) for all i, j, k in {lo, hi}
    """
    bounds = as_bounds(bounds)
    local = np.array(list(itertools.product(*bounds)))
    corners = local @ np.asarray(directions, dtype=float).T
    if offset is not None:
        corners = corners + np.asarray(offset, dtype=float)
    return corners


def extrema_of_box(directions: np.ndarray,
                   bounds: Sequence[Tuple[float, float]]) -> np.ndarray:
    """
    Axis-aligned bounding box of a parallelepiped.

    Returns
    -------
    extrema : np.ndarray, shape (3, 2)
        (min, max) of the corner coordinates along each Cartesian axis
    """
    corners = corners_of_parallelepiped(directions, bounds)
    return np.column_stack([corners.min(axis=0), corners.max(axis=0)])
