"""
Abstract interface for the crystal seen by the binning code.

Bins only need the reciprocal lattice of a crystal: a 3x3 matrix whose
columns are the reciprocal basis vectors expressed in absolute units
(inverse Angstrom per reciprocal lattice unit). Atomic positions, symmetry
and everything else a full crystal model carries are NOT part of this
interface.
"""

import numpy as np
from abc import ABC, abstractmethod

from .. import frames
from ...errors import DimensionMismatch


class AbstractCrystal(ABC):
    """
    Abstract base class for crystals.

    Subclasses only have to provide the reciprocal lattice vectors.
    Conversions between reciprocal lattice units (RLU) and absolute
    coordinates are derived from them.

    Conventions
    -----------
    With B the matrix of reciprocal vectors (as columns):
        k_abs = B @ q_rlu
        q_rlu = B^{-1} @ k_abs
    """

    @abstractmethod
    def get_reciprocal_vectors(self) -> np.ndarray:
        """
        Get reciprocal lattice vectors.

        Returns
        -------
        recipvecs : np.ndarray, shape (3, 3)
            Columns are b1, b2, b3 in absolute units.

        Notes
        -----
        Defined by: a_i · b_j = 2π δ_ij
        """
        pass

    @property
    def recipvecs(self) -> np.ndarray:
        """Reciprocal vectors as a read-only (3, 3) array."""
        recipvecs = np.array(self.get_reciprocal_vectors(), dtype=float)
        if recipvecs.shape != (3, 3):
            raise DimensionMismatch(f"Reciprocal vectors must have shape (3, 3), got {recipvecs.shape}")
        recipvecs.flags.writeable = False
        return recipvecs

    def get_reciprocal_cell_volume(self) -> float:
        """Volume of the reciprocal cell, |det B|, in absolute units cubed."""
        return abs(np.linalg.det(self.recipvecs))

    def rlu_to_absolute(self, q: np.ndarray) -> np.ndarray:
        """
        Convert RLU coordinates to absolute coordinates.

        Parameters
        ----------
        q : np.ndarray, shape (3,) or (..., 3)
            Momentum in reciprocal lattice units

        Returns
        -------
        k : np.ndarray
            Same shape as q, in absolute units
        """
        return frames.rlu_to_absolute(self.recipvecs, q)

    def absolute_to_rlu(self, k: np.ndarray) -> np.ndarray:
        """
        Convert absolute coordinates to RLU coordinates.

        Parameters
        ----------
        k : np.ndarray, shape (3,) or (..., 3)
            Momentum in absolute units

        Returns
        -------
        q : np.ndarray
            Same shape as k, in reciprocal lattice units
        """
        return frames.absolute_to_rlu(self.recipvecs, k)

    def __repr__(self) -> str:
        """String representation of the crystal."""
        name = self.__class__.__name__
        lengths = np.linalg.norm(self.recipvecs, axis=0)
        return f"{name}(|b|=({lengths[0]:.3f}, {lengths[1]:.3f}, {lengths[2]:.3f}))"
