"""
vague: recursive Bayesian state estimation

Maintains a time-stamped Gaussian belief over a hidden state, propagated
through dynamics models and corrected with asynchronous observations.
Models are propagated either directly (EKF-style linearization) or through
sigma points (UKF-style unscented transform).

License: MIT
"""

__version__ = "1.0.0"

from .estimate import MeanAndCovariance, SigmaPoints
from .unscented_transform import CubatureSigmaPoints, MerweScaledSigmaPoints, sample
from .models import DirectModel, SampledModel, LinearModel, linearized, sampled
from .state_estimator import (
    StateEstimator,
    PredictedObservation,
    TimeDependentAdditiveProcessNoise,
    InvalidTimeOrder,
    Update,
    make_estimator,
)

__all__ = [
    'MeanAndCovariance',
    'SigmaPoints',
    'CubatureSigmaPoints',
    'MerweScaledSigmaPoints',
    'sample',
    'DirectModel',
    'SampledModel',
    'LinearModel',
    'linearized',
    'sampled',
    'StateEstimator',
    'PredictedObservation',
    'TimeDependentAdditiveProcessNoise',
    'InvalidTimeOrder',
    'Update',
    'make_estimator',
]
