"""
Minimal concrete crystals.

This module provides a Crystal built from real-space lattice vectors, from
lattice parameters (a, b, c, α, β, γ) or directly from reciprocal vectors.
"""

import numpy as np

from .base import AbstractCrystal
from ...errors import DimensionMismatch


def lattice_vectors_from_parameters(a: float, b: float, c: float,
                                    alpha: float = 90.0,
                                    beta: float = 90.0,
                                    gamma: float = 90.0) -> np.ndarray:
    """
    Build real-space lattice vectors from lattice parameters.

    Parameters
    ----------
    a, b, c : float
        Cell lengths in Angstrom
    alpha, beta, gamma : float
        Cell angles in degrees (alpha between b and c, beta between a and c,
        gamma between a and b)

    Returns
    -------
    latvecs : np.ndarray, shape (3, 3)
        Columns are a1, a2, a3. a1 lies along x and a2 in the xy plane.
    """
    if min(a, b, c) <= 0:
        raise ValueError("Cell lengths must be positive")

    alpha, beta, gamma = np.radians([alpha, beta, gamma])
    cos_a, cos_b, cos_g = np.cos(alpha), np.cos(beta), np.cos(gamma)
    sin_g = np.sin(gamma)

    cy = (cos_a - cos_b * cos_g) / sin_g
    cz_sq = 1.0 - cos_b**2 - cy**2
    if cz_sq <= 0:
        raise ValueError("Cell angles do not describe a valid parallelepiped")

    a1 = a * np.array([1.0, 0.0, 0.0])
    a2 = b * np.array([cos_g, sin_g, 0.0])
    a3 = c * np.array([cos_b, cy, np.sqrt(cz_sq)])
    return np.column_stack([a1, a2, a3])


class Crystal(AbstractCrystal):
    """
    Crystal defined by its real-space lattice vectors.

    Only the lattice is stored; the reciprocal vectors follow from
        B = 2π (A^{-1})^T
    where the columns of A are the lattice vectors a1, a2, a3.

    Parameters
    ----------
    latvecs : np.ndarray, shape (3, 3)
        Columns are the lattice vectors in Angstrom

    Examples
    --------
    >>> crystal = Crystal.from_parameters(4.0, 4.0, 6.0, 90, 90, 120)
    >>> crystal.recipvecs.shape
    (3, 3)
    """

    def __init__(self, latvecs: np.ndarray):
        latvecs = np.array(latvecs, dtype=float)
        if latvecs.shape != (3, 3):
            raise DimensionMismatch(f"Lattice vectors must have shape (3, 3), got {latvecs.shape}")
        if np.isclose(np.linalg.det(latvecs), 0.0):
            raise ValueError("Lattice vectors are linearly dependent")

        latvecs.flags.writeable = False
        self.latvecs = latvecs

    @classmethod
    def from_parameters(cls, a: float, b: float, c: float,
                        alpha: float = 90.0, beta: float = 90.0,
                        gamma: float = 90.0) -> 'Crystal':
        """Create a crystal from lattice parameters (lengths in Angstrom, angles in degrees)."""
        return cls(lattice_vectors_from_parameters(a, b, c, alpha, beta, gamma))

    @classmethod
    def from_reciprocal_vectors(cls, recipvecs: np.ndarray) -> 'Crystal':
        """Create a crystal whose reciprocal vectors (columns) are given directly."""
        recipvecs = np.asarray(recipvecs, dtype=float)
        if recipvecs.shape != (3, 3):
            raise DimensionMismatch(f"Reciprocal vectors must have shape (3, 3), got {recipvecs.shape}")
        return cls(2 * np.pi * np.linalg.inv(recipvecs).T)

    def get_reciprocal_vectors(self) -> np.ndarray:
        return 2 * np.pi * np.linalg.inv(self.latvecs).T

    def get_lattice_parameters(self) -> np.ndarray:
        """
        Lattice parameters of the cell.

        Returns
        -------
        params : np.ndarray, shape (6,)
            [a, b, c, alpha, beta, gamma], angles in degrees
        """
        a1, a2, a3 = self.latvecs.T
        lengths = np.linalg.norm(self.latvecs, axis=0)

        def angle(u, v):
            return np.degrees(np.arccos(np.clip(np.dot(u, v) / (np.linalg.norm(u) * np.linalg.norm(v)), -1, 1)))

        return np.array([*lengths, angle(a2, a3), angle(a1, a3), angle(a1, a2)])

    def __repr__(self) -> str:
        a, b, c, alpha, beta, gamma = self.get_lattice_parameters()
        return (f"Crystal(a={a:.3f}, b={b:.3f}, c={c:.3f}, "
                f"α={alpha:.1f}, β={beta:.1f}, γ={gamma:.1f})")

