"""
Point samplers for bins.

Each sampler returns points in RLU that a signal can be evaluated at to
approximate its integral over a bin:

sample_bin_extent
    Grid with a fixed spacing along the (normalized) bin axes.
sample_bin_uniform
    Lab-aligned grid over the bounding box of the bin, optionally padded.
sample_bin_gaussian
    Lab-aligned grid whose spacing and padding follow a Gaussian
    broadening of the signal.
sample_bin_montecarlo
    Uniform random points inside the bin.
sample_binning
    Sub-bin grid covering every bin of a UniformBinning.

Grid sizes are chosen odd along every axis so that the grid is centered on
the bin (see odd_up and odd_down). The number of points grows with the
product of the per-axis counts; keeping it reasonable is up to the caller.
"""

import logging
from typing import Optional, Union

import numpy as np

from .membership import points_in_bin
from .padding import FixedMargin, GaussianMargin, NoPadding, PaddingPolicy
from ..core.binning import BinSpec, UniformBinning
from ..core.frames import as_vectors, from_local, to_local
from ..core.geometry import extrema_of_box

logger = logging.getLogger(__name__)


def odd_up(n):
    """Round an integer up to the next odd integer (odd values are kept)."""
    return n - (n % 2) + 1


def odd_down(n):
    """Round an integer down to the previous odd integer (odd values are kept)."""
    return n + (n % 2) - 1


def _as_spacing(spacing: Union[float, np.ndarray]) -> np.ndarray:
    spacing = np.broadcast_to(np.asarray(spacing, dtype=float), (3,))
    if np.any(spacing <= 0):
        raise ValueError(f"spacing must be positive, got {spacing.tolist()}")
    return spacing


def _as_counts(counts: Union[int, np.ndarray], name: str) -> np.ndarray:
    counts = np.broadcast_to(np.asarray(counts), (3,))
    if not (np.issubdtype(counts.dtype, np.integer) or np.all(np.mod(counts, 1) == 0)):
        raise ValueError(f"{name} must be integers, got {counts.tolist()}")
    return counts.astype(int)


def _centered_indices(half_counts: np.ndarray) -> np.ndarray:
    """Integer offsets -k..k along each axis, as a (2k1+1, 2k2+1, 2k3+1, 3) grid."""
    ranges = [np.arange(-k, k + 1) for k in half_counts]
    return np.stack(np.meshgrid(*ranges, indexing='ij'), axis=-1)


def sample_bin_extent(center: np.ndarray,
                      directions: np.ndarray,
                      extents: np.ndarray,
                      spacing: Union[float, np.ndarray]) -> np.ndarray:
    """
    Fixed-spacing grid along the bin axes.

    Along each local axis, 2k+1 points are placed at a fixed spacing along
    the unit vector of that axis, with
        k = floor(odd_down(round(extent / spacing)) / 2)
    clamped at zero so that the center is always sampled.

    Parameters
    ----------
    center : np.ndarray, shape (3,)
        Grid center in RLU
    directions : np.ndarray, shape (3, 3)
        Columns are the bin axes in RLU; only their directions matter
    extents : array_like, shape (3,)
        Target extent of the grid along each axis, in RLU
    spacing : float or array_like, shape (3,)
        Distance between neighbouring points along each axis, in RLU

    Returns
    -------
    points : np.ndarray, shape (2k1+1, 2k2+1, 2k3+1, 3)
        center + sum_i unit_i * spacing_i * index_i
    """
    center = as_vectors(center)
    spacing = _as_spacing(spacing)
    extents = np.broadcast_to(np.asarray(extents, dtype=float), (3,))

    directions = np.asarray(directions, dtype=float)
    units = directions / np.linalg.norm(directions, axis=0)

    counts = np.rint(extents / spacing).astype(int)
    half_counts = np.maximum(odd_down(counts) // 2, 0)

    indices = _centered_indices(half_counts)
    points = center + (indices * spacing) @ units.T

    logger.debug("Fixed-spacing grid with %s points per axis", (2 * half_counts + 1).tolist())
    return points


def lab_aligned_grid(binspec: BinSpec,
                     spacing: Union[float, np.ndarray],
                     bincenter: Optional[np.ndarray] = None,
                     padding: Optional[PaddingPolicy] = None) -> np.ndarray:
    """
    Cartesian grid over the (padded) bounding box of a bin.

    The bounding box of the bin is computed in absolute space and enlarged
    by the padding policy. Along each Cartesian axis
        n = floor(odd_up(round(extent / spacing)) / 2)
    and a grid of 2n+1 points at the given spacing is centered on the box.
    Grid points are mapped back to local coordinates through (B @ D)^{-1}
    and then to RLU around the bin center.

    Parameters
    ----------
    binspec : BinSpec
        Bin to sample
    spacing : float or array_like, shape (3,)
        Grid spacing in absolute units
    bincenter : np.ndarray, shape (3,), optional
        Bin center in RLU (default: origin)
    padding : PaddingPolicy, optional
        How to enlarge the bounding box (default: NoPadding)

    Returns
    -------
    points : np.ndarray, shape (2n1+1, 2n2+1, 2n3+1, 3)
        Grid points in RLU

    Notes
    -----
    A box aligned with the lab axes covers more than a general
    parallelepiped, so the grid contains points outside the bin. Filter
    with find_points_in_bin when only interior points are wanted.
    """
    spacing = _as_spacing(spacing)
    padding = NoPadding() if padding is None else padding
    bincenter = np.zeros(3) if bincenter is None else as_vectors(bincenter)

    frame_abs = binspec.absolute_directions
    box = padding.pad(extrema_of_box(frame_abs, binspec.bounds))

    extent = box[:, 1] - box[:, 0]
    half_counts = odd_up(np.rint(extent / spacing).astype(int)) // 2
    box_center = box.mean(axis=1)

    lab = box_center + _centered_indices(half_counts) * spacing
    local = to_local(frame_abs, lab)
    points = from_local(binspec.directions, local, center=bincenter)

    logger.debug("Lab-aligned grid (%r) with %s points per axis",
                 padding, (2 * half_counts + 1).tolist())
    return points


def sample_bin_uniform(binspec: BinSpec,
                       spacing: Union[float, np.ndarray],
                       bincenter: Optional[np.ndarray] = None,
                       margin: Union[float, np.ndarray] = 0.0,
                       clip_to_bin: bool = False) -> np.ndarray:
    """
    Lab-aligned grid over the bounding box of a bin, padded by a fixed margin.

    Parameters
    ----------
    binspec : BinSpec
    spacing : float or array_like, shape (3,)
        Grid spacing in absolute units
    bincenter : np.ndarray, shape (3,), optional
        Bin center in RLU (default: origin)
    margin : float or array_like, shape (3,)
        Padding added on every side of the box, in absolute units
    clip_to_bin : bool
        Keep only the points inside the bin itself. The margin then only
        widens the search box and never contributes points.

    Returns
    -------
    points : np.ndarray
        Grid of shape (2n1+1, 2n2+1, 2n3+1, 3), or (M, 3) when clip_to_bin
    """
    padding = FixedMargin(margin) if np.any(np.asarray(margin) != 0) else NoPadding()
    points = lab_aligned_grid(binspec, spacing, bincenter, padding)

    if clip_to_bin:
        center = np.zeros(3) if bincenter is None else bincenter
        points = points_in_bin(binspec, center, points)
        logger.debug("Kept %d grid points inside the bin", len(points))
    return points


def sample_bin_gaussian(binspec: BinSpec,
                        covariance: Union[float, np.ndarray],
                        bincenter: Optional[np.ndarray] = None,
                        density: Optional[float] = None,
                        nsigmas: Optional[float] = None) -> np.ndarray:
    """
    Lab-aligned grid adapted to a Gaussian broadening of the signal.

    The covariance is decomposed into principal axes e_i and standard
    deviations σ_i. The grid spacing is 3 min(σ_i) / density and the
    bounding box of the bin is enlarged by nsigmas σ_i along each e_i.

    Parameters
    ----------
    binspec : BinSpec
    covariance : float or np.ndarray, shape (3, 3)
        Covariance in absolute units; a scalar is an isotropic variance σ²
    bincenter : np.ndarray, shape (3,), optional
        Bin center in RLU (default: origin)
    density : float, optional
        Points per 3σ along the narrowest axis (default: binspec.config)
    nsigmas : float, optional
        Padding in standard deviations (default: binspec.config)

    Returns
    -------
    points : np.ndarray, shape (2n1+1, 2n2+1, 2n3+1, 3)
        Grid points in RLU
    """
    config = binspec.config
    density = config.gaussian_density if density is None else density
    nsigmas = config.gaussian_nsigmas if nsigmas is None else nsigmas
    if density <= 0:
        raise ValueError("density must be positive")

    padding = GaussianMargin.from_covariance(covariance, nsigmas)
    spacing = 3 * padding.min_sigma / density

    logger.debug("Gaussian sampling with σ=%s, spacing %.4g", padding.sigmas.tolist(), spacing)
    return lab_aligned_grid(binspec, spacing, bincenter, padding)


def sample_bin_montecarlo(binspec: BinSpec,
                          nsamples: int,
                          bincenter: Optional[np.ndarray] = None,
                          rng: Optional[Union[int, np.random.Generator]] = None) -> np.ndarray:
    """
    Uniform random points inside a bin.

    Each local coordinate is drawn independently and uniformly within its
    bounds, then mapped to RLU.

    Parameters
    ----------
    binspec : BinSpec
    nsamples : int
        Number of points to draw
    bincenter : np.ndarray, shape (3,), optional
        Bin center in RLU (default: origin)
    rng : np.random.Generator or int, optional
        Random source, or a seed for a new one. A fresh unseeded generator
        is used when omitted.

    Returns
    -------
    points : np.ndarray, shape (nsamples, 3)
        Points in RLU
    """
    if nsamples < 0:
        raise ValueError("nsamples must be non-negative")

    rng = np.random.default_rng(rng)
    lo, hi = binspec.bounds[:, 0], binspec.bounds[:, 1]
    local = rng.uniform(lo, hi, size=(int(nsamples), 3))

    center = None if bincenter is None else as_vectors(bincenter)
    return from_local(binspec.directions, local, center=center)


def sample_binning(binning: UniformBinning,
                   nperbin: Union[int, np.ndarray] = 1,
                   nghosts: Union[int, np.ndarray] = 0) -> np.ndarray:
    """
    Sub-bin grid covering every bin of a uniform binning.

    Points are spaced by Δ/nperbin along each bin axis, starting half a
    sub-step inside the grid corner (binning.base). The range is extended
    by nghosts bins on every side along each axis.

    Parameters
    ----------
    binning : UniformBinning
    nperbin : int or array_like, shape (3,)
        Points per bin along u, v and w
    nghosts : int or array_like, shape (3,)
        Ghost bins added on each side along u, v and w

    Returns
    -------
    points : np.ndarray, shape (Na, Nb, Nc, 3)
        Points in RLU, with Na = ((Nu + 2 nghosts - 1) nperbin + 1) along u
        and likewise along v and w

    Notes
    -----
    With nperbin=1 and nghosts=0 the points are exactly the bin centers.
    """
    nperbin = _as_counts(nperbin, 'nperbin')
    nghosts = _as_counts(nghosts, 'nghosts')
    if np.any(nperbin < 1):
        raise ValueError("nperbin must be at least 1")
    if np.any(nghosts < 0):
        raise ValueError("nghosts must be non-negative")

    increments = binning.steps[:3] / nperbin
    bottoms = -nghosts * nperbin
    tops = (np.array(binning.shape) + nghosts - 1) * nperbin

    ranges = [np.arange(b, t + 1) for b, t in zip(bottoms, tops)]
    indices = np.stack(np.meshgrid(*ranges, indexing='ij'), axis=-1)

    local = (indices + 0.5) * increments
    points = from_local(binning.directions, local, center=binning.base)

    logger.debug("Sampled binning %r with %s points", binning, points.shape[:3])
    return points
