"""
Sigma-point sampling rules for the unscented transform.

A sampling scheme turns a belief (x, P) into a weighted set of sigma points
whose weighted mean and covariance reproduce x and P. Pushing the points
through a nonlinear map and recombining them approximates the transformed
distribution without computing Jacobians.
"""

import logging

import numpy as np
from scipy.linalg import cholesky

from .estimate import SigmaPoints

logger = logging.getLogger(__name__)


def matrix_sqrt(P):
    """
    Square root U of P with ``U.T @ U == P``, rows used as sigma directions.

    Parameters
    ----------
    P : np.ndarray
        Symmetric positive semi-definite matrix (n, n)

    Returns
    -------
    np.ndarray
        Matrix (n, n) whose rows are the sigma-point offsets
    """
    # scipy.linalg.cholesky returns upper triangular U where U.T @ U = P
    try:
        return cholesky(P, check_finite=False)
    except np.linalg.LinAlgError:
        # Semi-definite (or slightly indefinite) P, use eigendecomposition
        logger.debug("Cholesky failed, falling back to eigendecomposition")
        if not np.all(np.isfinite(P)):
            return np.full_like(P, np.nan)
        eigval, eigvec = np.linalg.eigh(P)
        eigval = np.maximum(eigval, 0)
        return (eigvec * np.sqrt(eigval)).T


class CubatureSigmaPoints:
    """
    Third-degree spherical-radial cubature rule.

    Generates 2n points ``x +/- sqrt(n) * U[k]`` with equal weights
    ``1 / (2n)``. Exact for the mean and covariance of linear maps.
    """

    def sigma_points(self, x, P):
        """
        Generate sigma points around (x, P).

        Returns
        -------
        np.ndarray
            Sigma points (2n, n)
        """
        n = x.shape[0]
        U = matrix_sqrt(n * P)
        return np.vstack([x + U, x - U])

    def weights(self, n):
        return np.full(2*n, 0.5 / n)

    def sample(self, belief):
        sigmas = self.sigma_points(belief.mean, belief.covariance)
        return SigmaPoints(sigmas, self.weights(belief.dim))

    def __repr__(self):
        return "CubatureSigmaPoints()"


class MerweScaledSigmaPoints:
    """
    Merwe's scaled sigma points.

    Parameters
    ----------
    alpha : float, optional
        Spread of sigma points around mean (typically 1e-3 to 1, default 0.1)
    beta : float, optional
        Incorporate prior knowledge of distribution (2 is optimal for Gaussian)
    kappa : float, optional
        Secondary scaling parameter. If None, ``3 - n`` is used for each
        sampled belief.
    """

    def __init__(self, alpha=0.1, beta=2.0, kappa=0.0):
        self.alpha = alpha
        self.beta = beta
        self.kappa = kappa

    def _lambda(self, n):
        kappa = 3.0 - n if self.kappa is None else self.kappa
        return (self.alpha**2) * (n + kappa) - n

    def weights(self, n):
        """
        Mean and covariance weights for an n-dimensional belief.

        Returns
        -------
        Wm, Wc : np.ndarray
            Weights (2n+1,)
        """
        lambda_ = self._lambda(n)
        Wm = np.full(2*n + 1, 0.5 / (n + lambda_))
        Wc = np.copy(Wm)
        Wm[0] = lambda_ / (n + lambda_)
        Wc[0] = lambda_ / (n + lambda_) + (1 - self.alpha**2 + self.beta)
        return Wm, Wc

    def sigma_points(self, x, P):
        """
        Generate sigma points around (x, P).

        Returns
        -------
        np.ndarray
            Sigma points (2n+1, n)
        """
        n = x.shape[0]
        U = matrix_sqrt((self._lambda(n) + n) * P)

        sigmas = np.zeros((2*n + 1, n))
        sigmas[0] = x
        for k in range(n):
            sigmas[k+1]   = x + U[k]
            sigmas[n+k+1] = x - U[k]

        return sigmas

    def sample(self, belief):
        Wm, Wc = self.weights(belief.dim)
        sigmas = self.sigma_points(belief.mean, belief.covariance)
        return SigmaPoints(sigmas, Wm, Wc)

    def __repr__(self):
        return (f"MerweScaledSigmaPoints(alpha={self.alpha}, beta={self.beta}, "
                f"kappa={self.kappa})")


def sample(belief, scheme=None):
    """
    Draw sigma points representing ``belief``.

    Parameters
    ----------
    belief : MeanAndCovariance
        Distribution to sample
    scheme : object, optional
        Sampling rule with a ``sample(belief)`` method.
        Defaults to ``CubatureSigmaPoints()``.

    Returns
    -------
    SigmaPoints
    """
    if scheme is None:
        scheme = CubatureSigmaPoints()
    return scheme.sample(belief)
