"""
Core domain models for the qbinning package.

This module contains the fundamental abstractions:
- Crystal: source of the reciprocal lattice vectors
- Frames: transforms between RLU, local bin coordinates and absolute space
- BinSpec / UniformBinning: single bins and regular grids of bins
- Geometry: corners and bounding boxes of parallelepiped bins

These are the building blocks used by the samplers and the membership filter.
"""

from .crystal import AbstractCrystal, Crystal

from .frames import (
    absolute_frame,
    absolute_to_rlu,
    from_local,
    rlu_to_absolute,
    to_local,
    validate_direction_frame
)

from .geometry import corners_of_parallelepiped, extrema_of_box

from .binning import BinSpec, UniformBinning

__all__ = [
    # Crystal
    'AbstractCrystal',
    'Crystal',

    # Frames
    'absolute_frame',
    'absolute_to_rlu',
    'from_local',
    'rlu_to_absolute',
    'to_local',
    'validate_direction_frame',

    # Geometry
    'corners_of_parallelepiped',
    'extrema_of_box',

    # Bins
    'BinSpec',
    'UniformBinning',
]
