from __future__ import annotations

import numpy as np
import pytest

from vague import MeanAndCovariance, SigmaPoints


def test_scalar_belief_is_one_dimensional() -> None:
    belief = MeanAndCovariance(2.0, 4.0)

    assert belief.dim == 1
    assert belief.mean.shape == (1,)
    assert belief.covariance.shape == (1, 1)


def test_mismatched_covariance_is_rejected() -> None:
    with pytest.raises(ValueError):
        MeanAndCovariance([0.0, 0.0], np.eye(3))
    with pytest.raises(ValueError):
        MeanAndCovariance(np.zeros((2, 2)), np.eye(2))


def test_copy_is_independent() -> None:
    belief = MeanAndCovariance([1.0, 2.0], np.eye(2))
    clone = belief.copy()
    clone.mean[0] = 5.0
    clone.covariance[0, 0] = 5.0

    assert belief.mean[0] == 1.0
    assert belief.covariance[0, 0] == 1.0


def test_mean_centered_samples() -> None:
    points = SigmaPoints([[0.0, 2.0], [2.0, 4.0]], [0.5, 0.5])

    mean, centered = points.mean_centered_samples()

    np.testing.assert_allclose(mean, [1.0, 3.0])
    np.testing.assert_allclose(centered, [[-1.0, -1.0], [1.0, 1.0]])


def test_statistics_use_covariance_weights() -> None:
    points = SigmaPoints([[-1.0], [0.0], [1.0]], [0.25, 0.5, 0.25],
                         covariance_weights=[0.5, 0.0, 0.5])

    stats = points.statistics()

    np.testing.assert_allclose(stats.mean, [0.0])
    np.testing.assert_allclose(stats.covariance, [[1.0]])


def test_map_changes_dimension_and_keeps_weights() -> None:
    points = SigmaPoints([[1.0, 2.0], [3.0, 4.0]], [0.5, 0.5])

    mapped = points.map(lambda x, scale: scale * np.array([x.sum()]), 2.0)

    assert mapped.dim == 1
    np.testing.assert_allclose(mapped.points, [[6.0], [14.0]])
    np.testing.assert_array_equal(mapped.weights, points.weights)


def test_weights_must_match_points() -> None:
    with pytest.raises(ValueError):
        SigmaPoints(np.zeros((3, 2)), [0.5, 0.5])
    with pytest.raises(ValueError):
        SigmaPoints(np.zeros((2, 2)), [0.5, 0.5], covariance_weights=[1.0])


def test_mean_and_residual_functions_handle_wrapping() -> None:
    def wrapped_mean(points, weights):
        return np.array([np.arctan2(weights @ np.sin(points[:, 0]), weights @ np.cos(points[:, 0]))])

    def wrapped_residual(point, mean):
        return np.arctan2(np.sin(point - mean), np.cos(point - mean))

    points = SigmaPoints([[np.pi - 0.1], [-np.pi + 0.1]], [0.5, 0.5],
                         mean_fn=wrapped_mean, residual_fn=wrapped_residual)

    mean, centered = points.mean_centered_samples()
    stats = points.statistics()

    assert abs(abs(mean[0]) - np.pi) < 1e-12
    np.testing.assert_allclose(np.abs(centered), [[0.1], [0.1]], atol=1e-12)
    np.testing.assert_allclose(stats.covariance, [[0.01]], atol=1e-12)


def test_map_attaches_mean_and_residual_functions() -> None:
    points = SigmaPoints([[1.0], [3.0]], [0.5, 0.5])

    def half_mean(pts, weights):
        return 0.5 * (weights @ pts)

    mapped = points.map(lambda x: x, mean_fn=half_mean)

    assert mapped.mean_fn is half_mean
    assert mapped.residual_fn is None
    np.testing.assert_allclose(mapped.mean(), [1.0])
    assert points.mean_fn is None
