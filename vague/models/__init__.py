"""
Dynamics and observation models.

Model variants (direct / sigma-point) consumed by the estimator, and an
example target model that can be used with it.
"""

from .base import DirectModel, SampledModel, LinearModel, linearized, sampled, as_model
from .constant_velocity import ConstantVelocityTarget

__all__ = [
    'DirectModel',
    'SampledModel',
    'LinearModel',
    'linearized',
    'sampled',
    'as_model',
    'ConstantVelocityTarget',
]
