"""
Model variants consumed by the state estimator.

A dynamics or observation model is tagged with how it propagates a belief:

- ``DirectModel``: maps a whole belief (mean and covariance) to a new
  belief, typically by linearization (EKF-style). Observation models of
  this kind also provide a Jacobian for the state/observation
  cross-covariance.
- ``SampledModel``: maps a single state vector to a new vector. The
  estimator pushes sigma points through it (UKF-style).

The estimator picks the propagation path from the variant, so a model
never has to be inspected for which call signatures it accepts.
"""

import numpy as np

from ..estimate import MeanAndCovariance


class DirectModel:
    """
    Model that propagates a belief directly.

    Parameters
    ----------
    fn : callable
        ``fn(belief, *args) -> MeanAndCovariance``
    jacobian : callable, optional
        ``jacobian(belief, *args) -> np.ndarray``, the Jacobian of the
        underlying point map evaluated at ``belief.mean``. Required when the
        model is used as an observer.
    dim_from, dim_to : int, optional
        Input and output dimensions, informational only
    """

    def __init__(self, fn, jacobian=None, dim_from=None, dim_to=None):
        self.fn = fn
        self._jacobian = jacobian
        self.dim_from = dim_from
        self.dim_to = dim_to

    def __call__(self, belief, *args):
        return self.fn(belief, *args)

    @property
    def has_jacobian(self):
        return self._jacobian is not None

    def jacobian(self, belief, *args):
        if self._jacobian is None:
            raise TypeError(f"{self!r} does not provide a Jacobian")
        return np.asarray(self._jacobian(belief, *args), dtype=float)

    def __repr__(self):
        return f"{type(self).__name__}({getattr(self.fn, '__name__', self.fn)!r})"


class SampledModel:
    """
    Model evaluated one state vector at a time.

    Parameters
    ----------
    fn : callable
        ``fn(x, *args) -> np.ndarray``
    mean_fn : callable, optional
        ``mean_fn(points, weights) -> mean`` for the propagated points, e.g.
        a circular mean for angular outputs
    residual_fn : callable, optional
        ``residual_fn(point, mean) -> deviation`` for the propagated points
    """

    def __init__(self, fn, dim_from=None, dim_to=None, mean_fn=None, residual_fn=None):
        self.fn = fn
        self.dim_from = dim_from
        self.dim_to = dim_to
        self.mean_fn = mean_fn
        self.residual_fn = residual_fn

    def __call__(self, x, *args):
        return self.fn(x, *args)

    def propagate(self, sigma_points, *args):
        """Push every sigma point through the model."""
        return sigma_points.map(self.fn, *args,
                                mean_fn=self.mean_fn, residual_fn=self.residual_fn)

    def __repr__(self):
        return f"{type(self).__name__}({getattr(self.fn, '__name__', self.fn)!r})"


class LinearModel(DirectModel):
    """
    Linear map ``x -> A x``.

    Parameters
    ----------
    matrix : array_like or callable
        The matrix A, or a callable returning it from the extra model
        arguments (for example ``lambda dt: transition(dt)``).

    Examples
    --------
    >>> model = LinearModel(lambda dt: np.array([[1.0, dt], [0.0, 1.0]]))
    >>> model.matrix_at(0.5)
    array([[1. , 0.5],
           [0. , 1. ]])
    """

    def __init__(self, matrix):
        if callable(matrix):
            self._matrix = matrix
            dim_from = dim_to = None
        else:
            self._matrix = np.asarray(matrix, dtype=float)
            if self._matrix.ndim != 2:
                raise ValueError(f"matrix must be 2-D, got shape {self._matrix.shape}")
            dim_to, dim_from = self._matrix.shape
        super().__init__(self._propagate, self._jacobian_at, dim_from, dim_to)

    def matrix_at(self, *args):
        if callable(self._matrix):
            return np.asarray(self._matrix(*args), dtype=float)
        return self._matrix

    def _propagate(self, belief, *args):
        A = self.matrix_at(*args)
        return MeanAndCovariance(A @ belief.mean, A @ belief.covariance @ A.T)

    def _jacobian_at(self, belief, *args):
        return self.matrix_at(*args)

    def sampled(self):
        """The same map as a point-wise model."""
        return SampledModel(lambda x, *args: self.matrix_at(*args) @ x,
                            self.dim_from, self.dim_to)

    def __repr__(self):
        return f"LinearModel({self._matrix!r})"


def linearized(fn, jacobian, dim_from=None, dim_to=None):
    """
    Build an EKF-style model from a point map and its Jacobian.

    The mean is propagated through ``fn`` and the covariance through the
    first-order expansion ``J P J^T`` with ``J = jacobian(mean, *args)``.

    Parameters
    ----------
    fn : callable
        ``fn(x, *args) -> np.ndarray``
    jacobian : callable
        ``jacobian(x, *args) -> np.ndarray``

    Returns
    -------
    DirectModel
    """
    def propagate(belief, *args):
        J = np.asarray(jacobian(belief.mean, *args), dtype=float)
        mean = np.atleast_1d(np.asarray(fn(belief.mean, *args), dtype=float))
        return MeanAndCovariance(mean, J @ belief.covariance @ J.T)

    def jacobian_at(belief, *args):
        return jacobian(belief.mean, *args)

    propagate.__name__ = getattr(fn, '__name__', 'propagate')
    return DirectModel(propagate, jacobian_at, dim_from, dim_to)


def sampled(fn=None, dim_from=None, dim_to=None, mean_fn=None, residual_fn=None):
    """
    Tag a point map as a sigma-point model.

    Usable directly or as a decorator::

        @sampled
        def range_bearing(x, sensor):
            ...
    """
    if fn is None:
        return lambda f: SampledModel(f, dim_from, dim_to, mean_fn, residual_fn)
    return SampledModel(fn, dim_from, dim_to, mean_fn, residual_fn)


def as_model(obj):
    """
    Return ``obj`` as a ``DirectModel`` or ``SampledModel``.

    Plain callables are taken to be point maps.
    """
    if isinstance(obj, (DirectModel, SampledModel)):
        return obj
    if callable(obj):
        return SampledModel(obj)
    raise TypeError(f"Expected a model or a callable, got {type(obj).__name__}")
