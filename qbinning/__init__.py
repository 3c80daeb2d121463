"""
qbinning: bin geometry and point sampling in reciprocal space

A Python package for describing momentum-energy bins over a crystal's
reciprocal lattice, generating the points needed to sample a signal over
those bins, and testing which points fall inside a bin.

Main Components
---------------
core : Crystal interface, coordinate frames, BinSpec, UniformBinning, geometry
sampling : Padding policies, point samplers, membership filter
config : Numerical defaults and YAML configuration loading
errors : Exceptions raised for invalid bin definitions

Quick Start
-----------
>>> import numpy as np
>>> from qbinning import Crystal, UniformBinning, sample_bin_uniform, find_points_in_bin
>>>
>>> crystal = Crystal.from_parameters(4.0, 4.0, 6.0, 90, 90, 120)
>>> directions = np.array([[1, -1, 0], [1, 1, 0], [0, 0, 1]]).T
>>> binning = UniformBinning.from_axes(
...     crystal, directions,
...     us=np.linspace(0, 1, 11), vs=[-0.05, 0.05], ws=[-0.1, 0.1],
...     es=np.linspace(0, 5, 21)
... )
>>>
>>> # Grid over the second bin, then keep the interior points
>>> center = binning.bincenters[1, 0, 0]
>>> points = sample_bin_uniform(binning.binspec, spacing=0.01, bincenter=center)
>>> inside = find_points_in_bin(center, directions, binning.binspec.bounds, points)
"""

import logging

__version__ = "0.1.0"

from .errors import (
    BinningError,
    NonUniformSpacing,
    SingularDirectionFrame,
    DimensionMismatch
)

from .config import SamplingConfig, load_config

from .core import (
    # Crystal
    AbstractCrystal,
    Crystal,

    # Bins
    BinSpec,
    UniformBinning,

    # Geometry
    corners_of_parallelepiped,
    extrema_of_box,
)

from .sampling import (
    FixedMargin,
    GaussianMargin,
    NoPadding,
    sample_bin_extent,
    sample_bin_uniform,
    sample_bin_gaussian,
    sample_bin_montecarlo,
    sample_binning,
    find_points_in_bin,
    points_in_bin,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version info
    '__version__',

    # Errors
    'BinningError',
    'NonUniformSpacing',
    'SingularDirectionFrame',
    'DimensionMismatch',

    # Configuration
    'SamplingConfig',
    'load_config',

    # Core abstractions
    'AbstractCrystal',
    'Crystal',
    'BinSpec',
    'UniformBinning',
    'corners_of_parallelepiped',
    'extrema_of_box',

    # Sampling
    'FixedMargin',
    'GaussianMargin',
    'NoPadding',
    'sample_bin_extent',
    'sample_bin_uniform',
    'sample_bin_gaussian',
    'sample_bin_montecarlo',
    'sample_binning',
    'find_points_in_bin',
    'points_in_bin',
]
