"""
Residual functions for observations with angular components.

Passed to ``StateEstimator.assimilate`` so that, for example, a bearing
innovation of 359 degrees is treated as -1 degree.
"""

import numpy as np

from .angles import circular_mean, normalize_angle


def residual(a, b, angle_indices=None):
    """
    Compute residual y = a - b, normalizing the angular components.

    Parameters
    ----------
    a : np.ndarray
        First vector
    b : np.ndarray
        Second vector
    angle_indices : list of int, optional
        Indices of angular components (in radians) that need normalization

    Returns
    -------
    np.ndarray
        Residual vector y = a - b with normalized angles

    Examples
    --------
    >>> residual(np.array([1.0, 3.14]), np.array([0.5, -3.14]), angle_indices=[1])
    array([ 0.5       , -0.00318531])
    """
    y = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)

    if angle_indices is not None:
        for idx in angle_indices:
            y[idx] = normalize_angle(y[idx])

    return y


def make_residual_fn(angle_indices=None):
    """
    Factory function to create a residual function with fixed angle indices.

    Examples
    --------
    >>> residual_fn = make_residual_fn(angle_indices=[1])
    >>> estimator.assimilate(predicted, observation, residual_fn=residual_fn)
    """
    def residual_fn(a, b):
        return residual(a, b, angle_indices=angle_indices)

    return residual_fn


def make_mean_fn(angle_indices=None):
    """
    Factory for a weighted mean that averages angular components circularly.

    The result has the ``mean_fn(points, weights)`` signature used by
    ``SigmaPoints`` and ``SampledModel``.

    Examples
    --------
    >>> mean_fn = make_mean_fn(angle_indices=[1])
    >>> mean_fn(np.array([[1.0, 3.1], [3.0, -3.1]]), np.array([0.5, 0.5]))
    array([2.        , 3.14159265])
    """
    def mean_fn(points, weights):
        points = np.asarray(points, dtype=float)
        mean = weights @ points

        if angle_indices is not None:
            for idx in angle_indices:
                mean[idx] = circular_mean(points[:, idx], weights)

        return mean

    return mean_fn
