"""
Recursive Bayesian state estimator.

Keeps a time-stamped Gaussian belief over a hidden state. The belief is
rolled forward in time with a dynamics model (``predict``), compared against
what a sensor should see (``predict_observation``) and corrected with real
measurements (``assimilate``).

Models are propagated in one of two ways, chosen by their type:

- ``DirectModel`` (e.g. ``LinearModel``, ``linearized(f, jacobian)``): the
  model maps the belief itself, EKF-style.
- ``SampledModel`` or any plain callable: sigma points are drawn from the
  belief, pushed through the model one by one and recombined, UKF-style.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from .estimate import MeanAndCovariance
from .models.base import DirectModel, as_model
from .timing import elapsed_seconds
from .unscented_transform import CubatureSigmaPoints, sample

logger = logging.getLogger(__name__)


class InvalidTimeOrder(ValueError):
    """Raised when asked to predict to a time before the current estimate."""


class PredictedObservation(MeanAndCovariance):
    """
    Belief over an observation plus its cross-covariance with the state.

    Parameters
    ----------
    mean : array_like
        Predicted observation mean (M,)
    covariance : array_like
        Predicted observation covariance (M, M), excluding measurement noise
    cross_covariance : array_like
        Cov(state, observation) under the current belief (N, M)
    """

    def __init__(self, mean, covariance, cross_covariance):
        super().__init__(mean, covariance)
        cross_covariance = np.asarray(cross_covariance, dtype=float)
        if cross_covariance.ndim == 1 and self.dim == 1:
            cross_covariance = cross_covariance.reshape(-1, 1)
        if cross_covariance.ndim != 2 or cross_covariance.shape[1] != self.dim:
            raise ValueError(
                f"cross_covariance must have shape (N, {self.dim}), "
                f"got {cross_covariance.shape}")
        self.cross_covariance = cross_covariance

    def copy(self):
        return PredictedObservation(self.mean.copy(), self.covariance.copy(),
                                    self.cross_covariance.copy())


class TimeDependentAdditiveProcessNoise:
    """
    Process noise growing linearly with elapsed time.

    Returns ``covariance + dt * process_noise_per_second``.

    Parameters
    ----------
    process_noise_per_second : array_like
        Noise rate matrix Q (N, N)
    """

    def __init__(self, process_noise_per_second):
        Q = np.asarray(process_noise_per_second, dtype=float)
        if Q.ndim == 0:
            Q = Q.reshape(1, 1)
        if Q.ndim != 2 or Q.shape[0] != Q.shape[1]:
            raise ValueError(f"process noise must be a square matrix, got shape {Q.shape}")
        self.process_noise_per_second = Q

    def __call__(self, dt, mean, covariance):
        return covariance + dt * self.process_noise_per_second


@dataclass
class Update:
    """Quantities from the most recent ``assimilate`` call."""
    innovation: np.ndarray
    innovation_covariance: np.ndarray
    kalman_gain: np.ndarray


def _as_belief(estimate):
    if isinstance(estimate, MeanAndCovariance):
        return estimate.copy()
    mean, covariance = estimate
    return MeanAndCovariance(np.array(mean, dtype=float),
                             np.array(covariance, dtype=float))


class StateEstimator:
    """
    Time-stamped Gaussian belief with predict and assimilate steps.

    Attributes
    ----------
    time : object
        Time of the current estimate. Never decreases.
    estimate : MeanAndCovariance
        Current belief over the state
    scheme : object
        Sigma-point rule used for ``SampledModel`` propagation
    symmetrize : bool
        If True, the covariance is symmetrized after every ``assimilate``
    last_update : Update or None
        Innovation, innovation covariance and gain of the last update

    Examples
    --------
    >>> cv = ConstantVelocityTarget()
    >>> est = StateEstimator(0.0, (np.zeros(4), np.eye(4)))
    >>> noise = TimeDependentAdditiveProcessNoise(cv.process_noise_rate())
    >>> est.predict(0.1, cv.dynamics_model(), noise)
    >>> predicted = est.predict_observation(cv.position_observer())
    >>> est.assimilate(predicted, MeanAndCovariance([1.0, 2.0], 0.1 * np.eye(2)))
    """

    def __init__(self, initial_time, initial_estimate, scheme=None, symmetrize=False):
        """
        Initialize the estimator.

        Parameters
        ----------
        initial_time : object
            Time point of the initial estimate
        initial_estimate : MeanAndCovariance or tuple
            Initial belief, or a ``(mean, covariance)`` pair
        scheme : object, optional
            Sigma-point rule. Defaults to ``CubatureSigmaPoints()``.
        symmetrize : bool, optional
            Symmetrize the covariance after updates (default: False)
        """
        self.time = initial_time
        self.estimate = _as_belief(initial_estimate)
        self.scheme = CubatureSigmaPoints() if scheme is None else scheme
        self.symmetrize = symmetrize
        self.last_update = None

    def predict(self, t, dynamics, process_noise=None):
        """
        Advance the estimate to time ``t``.

        Parameters
        ----------
        t : object
            Target time point, not earlier than ``self.time``
        dynamics : DirectModel, SampledModel or callable
            Dynamics model, called with the elapsed time in seconds
        process_noise : callable, optional
            ``process_noise(dt, mean, covariance) -> covariance``. The mean is
            passed read-only.

        Raises
        ------
        InvalidTimeOrder
            If ``t`` precedes the current time. The estimator is unchanged.
        """
        dt = elapsed_seconds(t, self.time)

        if dt == 0:
            return
        if dt < 0:
            raise InvalidTimeOrder(f"Unable to wind back time from {self.time} to {t}")

        model = as_model(dynamics)
        if isinstance(model, DirectModel):
            propagated = model(self.estimate.copy(), dt)
        else:
            sigma_points = sample(self.estimate, self.scheme)
            propagated = model.propagate(sigma_points, dt).statistics()

        covariance = propagated.covariance
        if process_noise is not None:
            mean = propagated.mean.view()
            mean.flags.writeable = False
            covariance = process_noise(dt, mean, covariance)

        estimate = MeanAndCovariance(propagated.mean, covariance)
        logger.debug("predict dt=%.6g via %s", dt, type(model).__name__)

        self.time, self.estimate = t, estimate

    def predict_observation(self, observer, *augmented_state):
        """
        Observation expected under the current estimate.

        Does not modify the estimator.

        Parameters
        ----------
        observer : DirectModel, SampledModel or callable
            Observation model. A ``DirectModel`` must provide a Jacobian.
        *augmented_state
            Extra arguments passed to the observer (e.g. the sensor pose)

        Returns
        -------
        PredictedObservation
            Observation mean and covariance due to state uncertainty alone,
            with the state/observation cross-covariance. Measurement noise
            is accounted for in ``assimilate``.
        """
        model = as_model(observer)
        if isinstance(model, DirectModel):
            predicted = model(self.estimate.copy(), *augmented_state)
            H = model.jacobian(self.estimate, *augmented_state)
            return PredictedObservation(predicted.mean, predicted.covariance,
                                        self.estimate.covariance @ H.T)

        sigma_points = sample(self.estimate, self.scheme)
        _, state_centered = sigma_points.mean_centered_samples()

        predicted_sigma_points = model.propagate(sigma_points, *augmented_state)
        _, predicted_centered = predicted_sigma_points.mean_centered_samples()
        predicted = predicted_sigma_points.statistics()

        cross_covariance = (state_centered.T * sigma_points.covariance_weights) @ predicted_centered
        return PredictedObservation(predicted.mean, predicted.covariance, cross_covariance)

    def assimilate(self, predicted_observation, observation, residual_fn=None):
        """
        Correct the estimate with a measurement (Kalman update).

        Parameters
        ----------
        predicted_observation : PredictedObservation
            Output of ``predict_observation`` for the current estimate
        observation : MeanAndCovariance or tuple
            Measurement and its noise covariance
        residual_fn : callable, optional
            ``residual_fn(z, z_pred) -> innovation``. Useful for angular
            measurements. Defaults to ``z - z_pred``.

        Notes
        -----
        Invertibility of the innovation covariance is not checked. A singular
        one is logged and yields non-finite values in the estimate.
        """
        observation = _as_belief(observation)

        S = predicted_observation.covariance + observation.covariance
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LinAlgWarning)
            lu_piv = lu_factor(S, check_finite=False)
        if np.any(np.diag(lu_piv[0]) == 0):
            logger.warning("Innovation covariance is singular, estimate will not be finite")

        # K = C S^-1, solved as S^T K^T = C^T
        K = lu_solve(lu_piv, predicted_observation.cross_covariance.T,
                     trans=1, check_finite=False).T

        if residual_fn is not None:
            innovation = np.asarray(residual_fn(observation.mean, predicted_observation.mean),
                                    dtype=float)
        else:
            innovation = observation.mean - predicted_observation.mean

        mean = self.estimate.mean + K @ innovation
        covariance = self.estimate.covariance - K @ S @ K.T
        if self.symmetrize:
            covariance = 0.5 * (covariance + covariance.T)

        self.estimate = MeanAndCovariance(mean, covariance)
        self.last_update = Update(innovation, S, K)
        logger.debug("assimilate |innovation|=%.6g", np.linalg.norm(innovation))


def make_estimator(initial_time, initial_estimate, **options):
    """
    Create a ``StateEstimator`` from an initial time and belief.

    Parameters
    ----------
    initial_time : object
        Time point of the initial estimate
    initial_estimate : MeanAndCovariance or tuple
        Initial belief, or a ``(mean, covariance)`` pair
    **options
        Passed to ``StateEstimator`` (``scheme``, ``symmetrize``)
    """
    return StateEstimator(initial_time, initial_estimate, **options)
