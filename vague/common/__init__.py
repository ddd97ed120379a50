"""
Common utilities for state estimation.

Includes angle handling, residual and mean functions.
"""

from .angles import normalize_angle, angle_diff, circular_mean
from .residuals import residual, make_residual_fn, make_mean_fn

__all__ = [
    'normalize_angle',
    'angle_diff',
    'circular_mean',
    'residual',
    'make_residual_fn',
    'make_mean_fn',
]
