"""
Gaussian beliefs and weighted sigma-point batches.

A belief is a mean vector and covariance matrix over an N-dimensional
space. A sigma-point batch is a small weighted set of points that carries
the same first and second moments and can be pushed through a nonlinear
map point by point.
"""

import numpy as np


class MeanAndCovariance:
    """
    Mean and covariance of a distribution over an N-dimensional space.

    Parameters
    ----------
    mean : array_like
        Mean vector (N,)
    covariance : array_like
        Covariance matrix (N, N)

    Notes
    -----
    Symmetry and positive semi-definiteness of ``covariance`` are assumed,
    not checked.
    """

    def __init__(self, mean, covariance):
        mean = np.asarray(mean, dtype=float)
        covariance = np.asarray(covariance, dtype=float)

        # Scalars are treated as 1-dimensional beliefs
        if mean.ndim == 0:
            mean = mean.reshape(1)
        if covariance.ndim == 0:
            covariance = covariance.reshape(1, 1)

        if mean.ndim != 1:
            raise ValueError(f"mean must be a vector, got shape {mean.shape}")
        n = mean.shape[0]
        if covariance.shape != (n, n):
            raise ValueError(
                f"covariance must have shape {(n, n)}, got {covariance.shape}")

        self.mean = mean
        self.covariance = covariance

    @property
    def dim(self):
        """Dimension N of the space."""
        return self.mean.shape[0]

    def copy(self):
        return MeanAndCovariance(self.mean.copy(), self.covariance.copy())

    def __repr__(self):
        return (f"{type(self).__name__}(mean={self.mean!r}, "
                f"covariance={self.covariance!r})")


class SigmaPoints:
    """
    Weighted set of points representing a belief.

    Parameters
    ----------
    points : array_like
        Sigma points, one per row (n_points, N)
    weights : array_like
        Weights used to recombine the mean (n_points,)
    covariance_weights : array_like, optional
        Weights used to recombine covariances. Defaults to ``weights``.
    mean_fn : callable, optional
        ``mean_fn(points, weights) -> mean``. Useful when points include
        angles. Defaults to the weighted arithmetic mean.
    residual_fn : callable, optional
        ``residual_fn(point, mean) -> deviation``. Defaults to ``point - mean``.
    """

    def __init__(self, points, weights, covariance_weights=None,
                 mean_fn=None, residual_fn=None):
        points = np.asarray(points, dtype=float)
        weights = np.asarray(weights, dtype=float)
        if points.ndim == 1:
            points = points.reshape(-1, 1)
        if points.ndim != 2:
            raise ValueError(f"points must be 2-D, got shape {points.shape}")
        if weights.shape != (points.shape[0],):
            raise ValueError(
                f"expected {points.shape[0]} weights, got shape {weights.shape}")

        if covariance_weights is None:
            covariance_weights = weights
        else:
            covariance_weights = np.asarray(covariance_weights, dtype=float)
            if covariance_weights.shape != weights.shape:
                raise ValueError("covariance_weights must match weights in shape")

        self.points = points
        self.weights = weights
        self.covariance_weights = covariance_weights
        self.mean_fn = mean_fn
        self.residual_fn = residual_fn

    def __len__(self):
        return self.points.shape[0]

    @property
    def dim(self):
        return self.points.shape[1]

    def mean(self):
        if self.mean_fn is not None:
            return np.asarray(self.mean_fn(self.points, self.weights), dtype=float)
        return self.weights @ self.points

    def mean_centered_samples(self):
        """
        Weighted mean and the deviation of every point from it.

        Returns
        -------
        mean : np.ndarray
            Weighted mean (N,)
        centered : np.ndarray
            ``points - mean``, or ``residual_fn(point, mean)`` per point
            (n_points, N)
        """
        mean = self.mean()
        if self.residual_fn is None:
            return mean, self.points - mean
        centered = np.vstack([np.asarray(self.residual_fn(point, mean), dtype=float)
                              for point in self.points])
        return mean, centered

    def statistics(self):
        """
        Recombine the weighted points into a mean and covariance.

        Returns
        -------
        MeanAndCovariance
        """
        mean, centered = self.mean_centered_samples()
        covariance = (centered.T * self.covariance_weights) @ centered
        return MeanAndCovariance(mean, covariance)

    def map(self, fn, *args, mean_fn=None, residual_fn=None):
        """
        Apply ``fn(point, *args)`` to every point.

        The weights are carried over unchanged, so the result may live in a
        space of a different dimension. ``mean_fn`` and ``residual_fn``
        apply to the mapped points.
        """
        mapped = [np.atleast_1d(np.asarray(fn(point, *args), dtype=float))
                  for point in self.points]
        return SigmaPoints(np.vstack(mapped), self.weights, self.covariance_weights,
                           mean_fn=mean_fn, residual_fn=residual_fn)
