"""
Exceptions raised while building bins.

All of them derive from ValueError so code that already guards
construction with ``except ValueError`` keeps working.
"""


class BinningError(ValueError):
    """Base class for invalid bin or binning definitions."""


class NonUniformSpacing(BinningError):
    """Consecutive axis values are not equally spaced."""


class SingularDirectionFrame(BinningError):
    """Direction matrix cannot be inverted."""


class DimensionMismatch(BinningError):
    """Bounds, points or direction matrix do not have three spatial dimensions."""
