"""
Coordinate frames for bins.

Three coordinate systems appear throughout the package:

RLU (reciprocal lattice units)
    q = h b1 + k b2 + l b3, stored as (h, k, l).
Absolute (lab) space
    Cartesian inverse-length coordinates, k_abs = B @ q with B the
    reciprocal vectors of the crystal as columns.
Local bin coordinates
    Coordinates along the (possibly non-orthogonal) axes of a bin. With D
    the direction frame (columns are the bin axes in RLU):
        q = center + D @ x
        x = D^{-1} @ (q - center)

Every transform accepts a single vector (3,) or a stack (..., 3) and keeps
the leading shape.
"""

from typing import Optional

import numpy as np

from ..config import SamplingConfig
from ..errors import DimensionMismatch, SingularDirectionFrame


def as_vectors(x: np.ndarray) -> np.ndarray:
    """
    Coerce input into a float array whose last axis has length 3.

    Raises
    ------
    DimensionMismatch
        If the last axis is not of length 3
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 0 or arr.shape[-1] != 3:
        raise DimensionMismatch(f"Expected shape (3,) or (..., 3); got {arr.shape}")
    return arr


def validate_direction_frame(directions: np.ndarray,
                             singular_tol: Optional[float] = None) -> np.ndarray:
    """
    Check a direction frame and return a read-only copy.

    Parameters
    ----------
    directions : np.ndarray, shape (3, 3)
        Columns are the local bin axes in RLU
    singular_tol : float, optional
        Largest accepted condition number (default: SamplingConfig().singular_tol)

    Returns
    -------
    directions : np.ndarray, shape (3, 3)
        Float copy with the writeable flag cleared

    Raises
    ------
    DimensionMismatch
        If the matrix is not 3x3
    SingularDirectionFrame
        If the matrix is not invertible
    """
    frame = np.array(directions, dtype=float)
    if frame.shape != (3, 3):
        raise DimensionMismatch(f"Direction frame must have shape (3, 3), got {frame.shape}")

    if singular_tol is None:
        singular_tol = SamplingConfig().singular_tol

    cond = np.linalg.cond(frame)
    if not np.isfinite(cond) or cond > singular_tol:
        raise SingularDirectionFrame(
            f"Direction frame is not invertible (condition number {cond:.3g})"
        )

    frame.flags.writeable = False
    return frame


def absolute_frame(recipvecs: np.ndarray, directions: np.ndarray) -> np.ndarray:
    """
    Express the bin axes in absolute units.

    Returns
    -------
    frame : np.ndarray, shape (3, 3)
        B @ D; columns are the bin axes in absolute space
    """
    return np.asarray(recipvecs, dtype=float) @ np.asarray(directions, dtype=float)


def rlu_to_absolute(recipvecs: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Convert RLU vectors to absolute space: k = B @ q."""
    return as_vectors(q) @ np.asarray(recipvecs, dtype=float).T


def absolute_to_rlu(recipvecs: np.ndarray, k: np.ndarray) -> np.ndarray:
    """Convert absolute vectors to RLU: q = B^{-1} @ k."""
    return as_vectors(k) @ np.linalg.inv(np.asarray(recipvecs, dtype=float)).T


def to_local(directions: np.ndarray, q: np.ndarray,
             center: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Convert RLU vectors to local bin coordinates.

    Parameters
    ----------
    directions : np.ndarray, shape (3, 3)
        Direction frame
    q : np.ndarray, shape (3,) or (..., 3)
        Points in RLU
    center : np.ndarray, shape (3,), optional
        Bin center in RLU. When omitted the origin is used.

    Returns
    -------
    x : np.ndarray
        Same shape as q, x = D^{-1} @ (q - center)
    """
    q = as_vectors(q)
    if center is not None:
        q = q - as_vectors(center)
    return q @ np.linalg.inv(np.asarray(directions, dtype=float)).T


def from_local(directions: np.ndarray, x: np.ndarray,
               center: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Convert local bin coordinates to RLU.

    Returns
    -------
    q : np.ndarray
        Same shape as x, q = center + D @ x
    """
    q = as_vectors(x) @ np.asarray(directions, dtype=float).T
    if center is not None:
        q = q + as_vectors(center)
    return q
