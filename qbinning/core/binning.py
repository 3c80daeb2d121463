"""
Bins and uniform binnings.

BinSpec describes a single bin: a local coordinate frame, the extent of the
bin along each local axis and an energy width. UniformBinning is a regular
grid of such bins sharing one frame and one step size; it owns the BinSpec
of a single cell, so any sampler that works on one bin works on every bin
of the grid by passing the corresponding center.

Both objects are immutable once built. All validation happens at
construction; samplers and filters trust their inputs.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .crystal import AbstractCrystal
from .frames import absolute_frame, validate_direction_frame
from .geometry import as_bounds
from ..config import SamplingConfig, resolve_config
from ..errors import DimensionMismatch, NonUniformSpacing

logger = logging.getLogger(__name__)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=float)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class BinSpec:
    """
    A single parallelepiped bin in momentum space plus an energy width.

    Parameters
    ----------
    crystal : AbstractCrystal
        Provides the reciprocal vectors used to reach absolute space
    directions : np.ndarray, shape (3, 3)
        Columns are the local bin axes (u, v, w) in RLU
    bounds : sequence of three (lo, hi) pairs
        Extent of the bin along each local axis, relative to its center
    energy_width : float
        Width ΔE of the bin in energy
    config : SamplingConfig, optional
        Tolerances used to validate the frame and, later, by the samplers
        and the membership filter on this bin (default: SamplingConfig())

    Raises
    ------
    TypeError
        If crystal is not an AbstractCrystal
    DimensionMismatch
        If directions is not 3x3 or bounds are not three pairs
    SingularDirectionFrame
        If directions is not invertible
    ValueError
        If lo > hi on some axis or energy_width is negative

    Examples
    --------
    >>> crystal = Crystal.from_parameters(4.0, 4.0, 4.0)
    >>> spec = BinSpec.from_widths(crystal, np.eye(3), [0.1, 0.1, 0.2], energy_width=0.5)
    >>> spec.bounds[2]
    array([-0.1,  0.1])
    """
    crystal: AbstractCrystal
    directions: np.ndarray
    bounds: np.ndarray
    energy_width: float = 0.0
    config: Optional[SamplingConfig] = field(default=None, repr=False)

    def __post_init__(self):
        if not isinstance(self.crystal, AbstractCrystal):
            raise TypeError("crystal must be an AbstractCrystal instance")
        config = resolve_config(self.config)

        directions = validate_direction_frame(self.directions, config.singular_tol)
        bounds = as_bounds(self.bounds)
        if np.any(bounds[:, 0] > bounds[:, 1]):
            raise ValueError(f"Each bound must satisfy lo <= hi, got {bounds.tolist()}")
        if self.energy_width < 0:
            raise ValueError("energy_width must be non-negative")

        object.__setattr__(self, 'directions', directions)
        object.__setattr__(self, 'bounds', _readonly(bounds))
        object.__setattr__(self, 'energy_width', float(self.energy_width))
        object.__setattr__(self, 'config', config)

    @classmethod
    def from_widths(cls, crystal: AbstractCrystal, directions: np.ndarray,
                    widths: Sequence[float], energy_width: float = 0.0,
                    config: Optional[SamplingConfig] = None) -> 'BinSpec':
        """
        Create a bin symmetric about its center, bounds (-Δ/2, Δ/2) per axis.

        Parameters
        ----------
        widths : sequence of 3 floats
            Full width Δ along each local axis
        """
        widths = np.abs(np.asarray(widths, dtype=float))
        if widths.shape != (3,):
            raise DimensionMismatch(f"Expected three widths, got shape {widths.shape}")
        bounds = np.column_stack([-widths / 2, widths / 2])
        return cls(crystal, directions, bounds, energy_width, config)

    @property
    def widths(self) -> np.ndarray:
        """Full width of the bin along each local axis."""
        return self.bounds[:, 1] - self.bounds[:, 0]

    @property
    def recipvecs(self) -> np.ndarray:
        return self.crystal.recipvecs

    @property
    def absolute_directions(self) -> np.ndarray:
        """Bin axes in absolute units, B @ D."""
        return absolute_frame(self.recipvecs, self.directions)

    def to_dict(self) -> Dict:
        """
        Serialize the bin geometry.

        The crystal is not serialized; only its reciprocal vectors are kept
        for reference.
        """
        return {
            'recipvecs': self.recipvecs.tolist(),
            'directions': self.directions.tolist(),
            'bounds': self.bounds.tolist(),
            'energy_width': self.energy_width,
        }

    def __repr__(self) -> str:
        widths = ", ".join(f"{w:.3g}" for w in self.widths)
        return f"BinSpec(widths=({widths}), ΔE={self.energy_width:.3g})"


def _axis_centers(values: Sequence[float], name: str,
                  rtol: float, atol: float) -> Tuple[np.ndarray, float]:
    """
    Centers and step of one axis.

    A list of two values is read as (lo, hi) bounds and collapses to a
    single center at the midpoint; the step is then the full width.
    """
    values = np.asarray(values, dtype=float).ravel()
    if values.size < 2:
        raise DimensionMismatch(f"Axis {name} needs at least two values, got {values.size}")

    steps = np.diff(values)
    if not np.allclose(steps, steps[0], rtol=rtol, atol=atol):
        raise NonUniformSpacing(f"Step sizes along {name} must all be equal, got {steps}")

    if values.size == 2:
        return np.array([values.mean()]), steps[0]
    return values, steps[0]


@dataclass(frozen=True, eq=False)
class UniformBinning:
    """
    Regular grid of bins sharing one direction frame and step size.

    Attributes
    ----------
    binspec : BinSpec
        Geometry of a single bin, bounds (-Δ/2, Δ/2) along each axis and
        energy width |ΔE|
    bincenters : np.ndarray, shape (Nu, Nv, Nw, 3)
        Bin centers in RLU
    energy_centers : np.ndarray, shape (NE,)
        Energy bin centers
    steps : np.ndarray, shape (4,)
        [Δu, Δv, Δw, ΔE]

    Notes
    -----
    Use from_axes() rather than the constructor; it checks that the axis
    values are uniformly spaced and builds the centers.
    """
    binspec: BinSpec
    bincenters: np.ndarray
    energy_centers: np.ndarray
    steps: np.ndarray

    def __post_init__(self):
        bincenters = np.asarray(self.bincenters, dtype=float)
        if bincenters.ndim != 4 or bincenters.shape[-1] != 3:
            raise DimensionMismatch(f"bincenters must have shape (Nu, Nv, Nw, 3), got {bincenters.shape}")
        steps = np.asarray(self.steps, dtype=float)
        if steps.shape != (4,):
            raise DimensionMismatch(f"steps must have shape (4,), got {steps.shape}")

        object.__setattr__(self, 'bincenters', _readonly(bincenters))
        object.__setattr__(self, 'energy_centers', _readonly(np.ravel(self.energy_centers)))
        object.__setattr__(self, 'steps', _readonly(steps))

    @classmethod
    def from_axes(cls, crystal: AbstractCrystal, directions: np.ndarray,
                  us: Sequence[float], vs: Sequence[float], ws: Sequence[float],
                  es: Sequence[float],
                  config: Optional[SamplingConfig] = None) -> 'UniformBinning':
        """
        Build a binning from per-axis values.

        Parameters
        ----------
        crystal : AbstractCrystal
        directions : np.ndarray, shape (3, 3)
            Columns are the local axes u, v, w in RLU
        us, vs, ws, es : sequence of float
            Either a uniformly spaced list of bin centers, or a [lo, hi]
            pair describing a single bin
        config : SamplingConfig, optional
            Spacing and singularity tolerances (default: SamplingConfig()).
            The binspec of the result carries it.

        Returns
        -------
        binning : UniformBinning

        Raises
        ------
        NonUniformSpacing
            If the values along some axis are not evenly spaced
        DimensionMismatch
            If an axis has fewer than two values
        SingularDirectionFrame
            If directions is not invertible

        Examples
        --------
        >>> binning = UniformBinning.from_axes(
        ...     crystal, np.eye(3),
        ...     us=[0.0, 0.1, 0.2], vs=[-0.05, 0.05], ws=[-0.05, 0.05],
        ...     es=[0.0, 0.5, 1.0])
        >>> binning.shape
        (3, 1, 1)
        """
        config = resolve_config(config)
        directions = validate_direction_frame(directions, config.singular_tol)

        axes = []
        steps = []
        for name, values in zip("UVWE", (us, vs, ws, es)):
            centers, step = _axis_centers(values, name, config.spacing_rtol, config.spacing_atol)
            axes.append(centers)
            steps.append(step)
        steps = np.array(steps)

        local = np.stack(np.meshgrid(*axes[:3], indexing='ij'), axis=-1)
        bincenters = local @ directions.T

        binspec = BinSpec.from_widths(crystal, directions, steps[:3], energy_width=abs(steps[3]),
                                     config=config)
        logger.debug("Built uniform binning with %s spatial bins and %d energy bins",
                     bincenters.shape[:3], axes[3].size)

        return cls(binspec, bincenters, axes[3], steps)

    @property
    def crystal(self) -> AbstractCrystal:
        return self.binspec.crystal

    @property
    def directions(self) -> np.ndarray:
        return self.binspec.directions

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Number of bins along u, v and w."""
        return tuple(self.bincenters.shape[:3])

    @property
    def num_bins(self) -> int:
        """Total number of spatial bins."""
        return int(np.prod(self.shape))

    @property
    def base(self) -> np.ndarray:
        """Corner of the grid: the first bin center minus half a step along each axis."""
        return self.bincenters[0, 0, 0] - 0.5 * (self.directions @ self.steps[:3])

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            'binspec': self.binspec.to_dict(),
            'bincenters': self.bincenters.tolist(),
            'energy_centers': self.energy_centers.tolist(),
            'steps': self.steps.tolist(),
        }

    def __repr__(self) -> str:
        nu, nv, nw = self.shape
        steps = ", ".join(f"{s:.3g}" for s in self.steps)
        return (f"UniformBinning(shape=({nu}, {nv}, {nw}), "
                f"energies={self.energy_centers.size}, "
                f"steps=({steps}))")
