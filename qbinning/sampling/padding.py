"""
Padding policies for lab-aligned sampling grids.

A lab-aligned grid is laid over the axis-aligned bounding box of a bin in
absolute space. A padding policy decides how much that box is enlarged
before the grid is built:

NoPadding
    The bare bounding box.
FixedMargin
    A constant margin added on every side.
GaussianMargin
    The box grown by a number of standard deviations along each principal
    axis of a covariance, to catch signal broadened out of the bin.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Union

from scipy import linalg

from ..core.geometry import extrema_of_box
from ..errors import DimensionMismatch


class PaddingPolicy(ABC):
    """
    Abstract base class for bounding-box padding.

    Subclasses map a box of shape (3, 2), holding (min, max) along each
    Cartesian axis, to an enlarged box of the same shape.
    """

    @abstractmethod
    def pad(self, box: np.ndarray) -> np.ndarray:
        """
        Enlarge a bounding box.

        Parameters
        ----------
        box : np.ndarray, shape (3, 2)
            (min, max) along x, y, z in absolute units

        Returns
        -------
        padded : np.ndarray, shape (3, 2)
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NoPadding(PaddingPolicy):
    """Leave the bounding box unchanged."""

    def pad(self, box: np.ndarray) -> np.ndarray:
        return np.array(box, dtype=float)


class FixedMargin(PaddingPolicy):
    """
    Pad the box by a fixed margin on every side.

    Parameters
    ----------
    margin : float or array_like, shape (3,)
        Margin in absolute units, either shared or per Cartesian axis
    """

    def __init__(self, margin: Union[float, np.ndarray] = 0.0):
        margin = np.broadcast_to(np.asarray(margin, dtype=float), (3,)).copy()
        if np.any(margin < 0):
            raise ValueError("margin must be non-negative")
        self.margin = margin

    def pad(self, box: np.ndarray) -> np.ndarray:
        box = np.array(box, dtype=float)
        box[:, 0] -= self.margin
        box[:, 1] += self.margin
        return box

    def __repr__(self) -> str:
        return f"FixedMargin(margin={self.margin.tolist()})"


class GaussianMargin(PaddingPolicy):
    """
    Pad the box by nsigmas standard deviations along principal axes.

    The padded box is the bounding box of the bin swept by the
    parallelepiped spanned by ±nsigmas·σ_i·e_i, where e_i are the principal
    axes (columns of axes) and σ_i the corresponding standard deviations.

    Parameters
    ----------
    axes : np.ndarray, shape (3, 3)
        Principal axes as columns, in absolute space
    sigmas : np.ndarray, shape (3,)
        Standard deviations along each principal axis
    nsigmas : float
        Number of standard deviations to pad by
    """

    def __init__(self, axes: np.ndarray, sigmas: np.ndarray, nsigmas: float = 3.0):
        axes = np.asarray(axes, dtype=float)
        sigmas = np.asarray(sigmas, dtype=float)
        if axes.shape != (3, 3) or sigmas.shape != (3,):
            raise DimensionMismatch("GaussianMargin needs (3, 3) axes and 3 sigmas")
        if nsigmas < 0:
            raise ValueError("nsigmas must be non-negative")

        self.axes = axes
        self.sigmas = sigmas
        self.nsigmas = float(nsigmas)

    @classmethod
    def from_covariance(cls, covariance: Union[float, np.ndarray],
                        nsigmas: float = 3.0) -> 'GaussianMargin':
        """
        Build the margin from a covariance matrix.

        Parameters
        ----------
        covariance : float or np.ndarray, shape (3, 3)
            Covariance in absolute units. A scalar is read as an isotropic
            variance σ², i.e. σ²·I.

        Raises
        ------
        ValueError
            If the covariance is not positive definite
        """
        covariance = np.asarray(covariance, dtype=float)
        if covariance.ndim == 0:
            if covariance <= 0:
                raise ValueError(f"Variance must be positive, got {covariance}")
            return cls(np.eye(3), np.full(3, np.sqrt(covariance)), nsigmas)
        if covariance.shape != (3, 3):
            raise DimensionMismatch(f"Covariance must be a scalar or (3, 3), got {covariance.shape}")

        variances, axes = linalg.eigh(covariance)
        if np.any(variances <= 0):
            raise ValueError(f"Covariance must be positive definite, eigenvalues {variances}")

        return cls(axes, np.sqrt(variances), nsigmas)

    @property
    def min_sigma(self) -> float:
        """Standard deviation along the narrowest principal axis."""
        return float(self.sigmas.min())

    def pad(self, box: np.ndarray) -> np.ndarray:
        reach = self.nsigmas * self.sigmas
        extra = extrema_of_box(self.axes, np.column_stack([-reach, reach]))
        return np.array(box, dtype=float) + extra

    def __repr__(self) -> str:
        return (f"GaussianMargin(sigmas={np.round(self.sigmas, 6).tolist()}, "
                f"nsigmas={self.nsigmas})")
