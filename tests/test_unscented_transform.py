from __future__ import annotations

import numpy as np
import pytest

from vague import CubatureSigmaPoints, MeanAndCovariance, MerweScaledSigmaPoints, sample
from vague.unscented_transform import matrix_sqrt

BELIEF = MeanAndCovariance([1.0, -2.0, 0.5],
                           [[2.0, 0.3, 0.1],
                            [0.3, 1.0, -0.2],
                            [0.1, -0.2, 0.5]])


def test_cubature_points_and_weights() -> None:
    points = CubatureSigmaPoints().sample(BELIEF)

    assert len(points) == 6
    assert points.dim == 3
    np.testing.assert_allclose(points.weights, np.full(6, 1.0 / 6.0))
    np.testing.assert_allclose(points.weights.sum(), 1.0)


@pytest.mark.parametrize("scheme", [CubatureSigmaPoints(),
                                    MerweScaledSigmaPoints(),
                                    MerweScaledSigmaPoints(alpha=1.0, beta=0.0, kappa=None)])
def test_statistics_reproduce_belief(scheme) -> None:
    stats = sample(BELIEF, scheme).statistics()

    np.testing.assert_allclose(stats.mean, BELIEF.mean, atol=1e-10)
    np.testing.assert_allclose(stats.covariance, BELIEF.covariance, atol=1e-10)


def test_merwe_points_and_weights() -> None:
    scheme = MerweScaledSigmaPoints(alpha=0.5, beta=2.0, kappa=1.0)
    points = scheme.sample(BELIEF)
    Wm, Wc = scheme.weights(3)

    assert len(points) == 7
    np.testing.assert_array_equal(points.points[0], BELIEF.mean)
    np.testing.assert_allclose(Wm.sum(), 1.0)
    np.testing.assert_allclose(Wc[1:], Wm[1:])
    assert Wc[0] == pytest.approx(Wm[0] + 1 - 0.5**2 + 2.0)


def test_default_scheme_is_cubature() -> None:
    points = sample(BELIEF)
    assert len(points) == 2 * BELIEF.dim


def test_semi_definite_covariance_falls_back_to_eigendecomposition() -> None:
    belief = MeanAndCovariance([0.0, 1.0], np.diag([1.0, 0.0]))

    stats = sample(belief).statistics()

    np.testing.assert_allclose(stats.mean, belief.mean, atol=1e-12)
    np.testing.assert_allclose(stats.covariance, belief.covariance, atol=1e-12)


def test_matrix_sqrt_rows_recombine() -> None:
    U = matrix_sqrt(BELIEF.covariance)
    np.testing.assert_allclose(U.T @ U, BELIEF.covariance)


def test_matrix_sqrt_of_non_finite_matrix_is_nan() -> None:
    U = matrix_sqrt(np.array([[np.nan, 0.0], [0.0, 1.0]]))
    assert not np.all(np.isfinite(U))
