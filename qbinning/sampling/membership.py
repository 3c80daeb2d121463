"""
Membership of points in a bin.

In local coordinates a bin is exactly the axis-aligned box given by its
bounds, so membership reduces to three interval checks once center and
points are expressed in the bin frame.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from ..config import SamplingConfig, resolve_config
from ..core.binning import BinSpec
from ..core.frames import as_vectors, to_local
from ..core.geometry import as_bounds


def find_points_in_bin(bincenter: np.ndarray,
                       directions: np.ndarray,
                       bounds: Sequence[Tuple[float, float]],
                       points: np.ndarray,
                       config: Optional[SamplingConfig] = None) -> np.ndarray:
    """
    Indices of the points lying inside a bin.

    Parameters
    ----------
    bincenter : np.ndarray, shape (3,)
        Bin center in RLU
    directions : np.ndarray, shape (3, 3)
        Direction frame of the bin
    bounds : sequence of three (lo, hi) pairs
        Bin extent along each local axis, relative to the center
    points : array_like, shape (3,) or (..., 3)
        Candidate points in RLU. Stacks with more than one leading axis are
        flattened in C order.
    config : SamplingConfig, optional
        Supplies the face tolerance (default: SamplingConfig())

    Returns
    -------
    indices : np.ndarray of int
        Positions of the points inside the bin, in input order

    Notes
    -----
    Bounds are closed: a point on a face, edge or corner is inside. Faces
    are widened by boundary_rtol * width + boundary_atol so that points
    placed on a face by a change of frame are not lost to rounding.
    Duplicated points are reported once per occurrence.

    Examples
    --------
    >>> find_points_in_bin([0, 0, 0], np.eye(3), [(-1, 1)] * 3,
    ...                    [[0, 0, 0], [1, 1, 1], [2, 0, 0]])
    array([0, 1])
    """
    config = resolve_config(config)
    bounds = as_bounds(bounds)
    points = as_vectors(points).reshape(-1, 3)

    tol = config.boundary_rtol * (bounds[:, 1] - bounds[:, 0]) + config.boundary_atol
    local = to_local(directions, points) - to_local(directions, bincenter)
    inside = np.all((bounds[:, 0] - tol <= local) & (local <= bounds[:, 1] + tol), axis=1)
    return np.flatnonzero(inside)


def points_in_bin(binspec: BinSpec, bincenter: np.ndarray,
                  points: np.ndarray) -> np.ndarray:
    """
    Keep only the points inside a bin.

    Returns
    -------
    inside : np.ndarray, shape (M, 3)
        The points of the flattened input that fall in the bin
    """
    points = as_vectors(points).reshape(-1, 3)
    indices = find_points_in_bin(bincenter, binspec.directions, binspec.bounds, points,
                                 config=binspec.config)
    return points[indices]
