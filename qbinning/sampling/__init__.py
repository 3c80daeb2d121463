"""
Point sampling and membership testing for bins.

Samplers produce candidate points in RLU; the membership filter keeps the
ones that actually lie in a given bin.
"""

from .padding import (
    PaddingPolicy,
    NoPadding,
    FixedMargin,
    GaussianMargin
)

from .samplers import (
    odd_up,
    odd_down,
    lab_aligned_grid,
    sample_bin_extent,
    sample_bin_uniform,
    sample_bin_gaussian,
    sample_bin_montecarlo,
    sample_binning
)

from .membership import find_points_in_bin, points_in_bin

__all__ = [
    # Padding policies
    'PaddingPolicy',
    'NoPadding',
    'FixedMargin',
    'GaussianMargin',

    # Samplers
    'odd_up',
    'odd_down',
    'lab_aligned_grid',
    'sample_bin_extent',
    'sample_bin_uniform',
    'sample_bin_gaussian',
    'sample_bin_montecarlo',
    'sample_binning',

    # Membership
    'find_points_in_bin',
    'points_in_bin',
]
