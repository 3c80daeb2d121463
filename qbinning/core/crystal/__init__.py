"""
Crystal module.

Bins only consume the reciprocal lattice of a crystal. This module provides
the interface and a minimal lattice-vector based implementation:
- AbstractCrystal: anything exposing reciprocal vectors
- Crystal: cell built from lattice vectors or lattice parameters
"""

from .base import AbstractCrystal
from .presets import Crystal, lattice_vectors_from_parameters

__all__ = [
    'AbstractCrystal',
    'Crystal',
    'lattice_vectors_from_parameters',
]
