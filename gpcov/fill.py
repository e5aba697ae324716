# gpcov/fill.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Covariance matrix fill engine.

``fill(K, kernel, x, y, mode)`` evaluates the kernel for every pair of
rows of x (n1, d) and y (n2, d) and stores the result into the caller's
(n1, n2) matrix K, in place:

- ``FillMode.SET``: K[i, j] = k(x_i, y_j)
- ``FillMode.ADD``: K[i, j] += k(x_i, y_j)  (sums of kernels)
- ``FillMode.MULTIPLY``: K[i, j] *= k(x_i, y_j)  (products of kernels)

When y is omitted, K is the covariance matrix of x with itself. Only the
strict upper triangle (the condensed distance vector) and the diagonal
are evaluated, and the values are mirrored to the lower triangle. A
distance cache built by :func:`gpcov.cache.build_distance_cache` can then
be passed to skip the distance computations.

All shapes are checked before K is modified.
"""
from enum import Enum

import gpcov.num as gnp
from gpcov.config import get_config, get_logger
from gpcov.errors import ShapeMismatchError, check_nobs, check_same_dim
from gpcov.metric import (
    metric,
    distance_matrix,
    condensed_distance,
    combine_squared_differences,
)
from gpcov.cache import select_cache, check_cache
from gpcov.kernel.composite import CompositeKernel, SumKernel, ProductKernel

_logger = get_logger()


class FillMode(Enum):
    SET = "set"
    ADD = "add"
    MULTIPLY = "multiply"


def apply(K, index, values, mode: FillMode):
    """Store or combine values into K[index]."""
    if mode is FillMode.SET:
        K[index] = values
    elif mode is FillMode.ADD:
        K[index] += values
    else:
        K[index] *= values


def apply_symmetric(K, upper, diagonal, mode: FillMode):
    """Combine a condensed upper triangle, mirrored, and a diagonal into K."""
    n = K.shape[0]
    iu = gnp.triu_indices(n, k=1)
    apply(K, iu, upper, mode)
    apply(K, (iu[1], iu[0]), upper, mode)
    apply(K, gnp.diag_indices(n), diagonal, mode)


# ---------------------------------------------------------------------------
# Argument checks


def check_points(x, y=None):
    """Return x, y as (n, d) arrays, after checking their dimensions."""
    x = gnp.as_points(x)
    if y is not None:
        y = gnp.as_points(y)
        check_same_dim("x", x.shape[1], "y", y.shape[1])
    if get_config().check_finite:
        for name, z in (("x", x), ("y", y)):
            if z is not None and not gnp.all(gnp.isfinite(z)):
                raise ValueError(f"{name} contains nan or inf values")
    return x, y


def check_matrix(K, x, y=None, name="K"):
    if not gnp.isarray(K) or K.ndim != 2:
        raise ShapeMismatchError(f"{name} must be a 2d array")
    check_nobs("x", x.shape[0], f"{name} rows", K.shape[0])
    n2 = x.shape[0] if y is None else y.shape[0]
    check_nobs("y" if y is not None else "x", n2, f"{name} columns", K.shape[1])


def leaves(kernel):
    if isinstance(kernel, CompositeKernel):
        return list(kernel.leaves())
    return [kernel]


def check_kernel(kernel, x, y=None, cache=None):
    """Check metric weights and caches of every stationary kernel in kernel."""
    if cache is not None and y is not None:
        raise ShapeMismatchError(
            "a distance cache describes a single point set, "
            "it cannot be used with two point sets"
        )
    for k in leaves(kernel):
        metric(k).check_dim(x.shape[1])
        c = select_cache(cache, k)
        if c is not None:
            check_cache(c, k, x.shape[0], x.shape[1])


# ---------------------------------------------------------------------------
# Fill


def _fill_stationary(K, kernel, x, y, mode, cache):
    met = metric(kernel)
    if y is None:
        c = select_cache(cache, kernel)
        if c is not None:
            r = c.condensed(met)
        else:
            r = condensed_distance(met, x)
        n = x.shape[0]
        apply_symmetric(
            K, kernel.covariance(r), kernel.covariance(gnp.zeros(n)), mode
        )
    else:
        apply(K, Ellipsis, kernel.covariance(distance_matrix(met, x, y)), mode)
    return K


_ACCUMULATE = {SumKernel: FillMode.ADD, ProductKernel: FillMode.MULTIPLY}


def _fill_composite(K, kernel, x, y, mode, cache):
    accumulate = _ACCUMULATE[type(kernel)]
    if mode is not FillMode.SET and mode is not accumulate:
        # e.g. adding a product: evaluate it aside first
        C = gnp.empty(K.shape)
        _fill(C, kernel, x, y, FillMode.SET, cache)
        apply(K, Ellipsis, C, mode)
        return K
    first, rest = kernel.components[0], kernel.components[1:]
    _fill(K, first, x, y, mode, cache)
    for k in rest:
        _fill(K, k, x, y, accumulate, cache)
    return K


def _fill(K, kernel, x, y, mode, cache):
    if isinstance(kernel, CompositeKernel):
        return _fill_composite(K, kernel, x, y, mode, cache)
    return _fill_stationary(K, kernel, x, y, mode, cache)


def fill(K, kernel, x, y=None, mode=FillMode.SET, cache=None):
    """Fill K in place with the covariance of kernel between x and y.

    Parameters
    ----------
    K : gnp.array, shape (n1, n2)
        Target matrix, owned by the caller.
    kernel : StationaryKernel or CompositeKernel
    x : gnp.array, shape (n1, d)
    y : gnp.array, shape (n2, d), optional
        If None, K is the (symmetric) covariance matrix of x.
    mode : FillMode or str
        "set", "add" or "multiply".
    cache : distance cache, dict of caches or DistanceCacheStore, optional
        Distances of x, see :func:`gpcov.cache.build_distance_cache`.
        Only valid when y is None.

    Returns
    -------
    K

    Raises
    ------
    ShapeMismatchError
        If x and y have different dimensions, or if K (or the cache)
        does not match the number of points. K is left untouched.
    """
    mode = FillMode(mode)
    x, y = check_points(x, y)
    check_matrix(K, x, y)
    check_kernel(kernel, x, y, cache)
    _logger.debug(
        "fill %s (%s) into K of shape %s, cached=%s",
        type(kernel).__name__,
        mode.value,
        K.shape,
        cache is not None,
    )
    return _fill(K, kernel, x, y, mode, cache)


def cov(kernel, x, y=None, cache=None):
    """Covariance matrix of kernel between x and y, in a new array."""
    x, y = check_points(x, y)
    n2 = x.shape[0] if y is None else y.shape[0]
    K = gnp.empty((x.shape[0], n2))
    return fill(K, kernel, x, y, FillMode.SET, cache)


def cov_elementwise(kernel, x, y=None):
    """Vector of covariances k(x_i, y_i).

    If y is None, the variances k(x_i, x_i).
    """
    x, y = check_points(x, y)
    if y is not None:
        check_nobs("x", x.shape[0], "y", y.shape[0])
    if isinstance(kernel, CompositeKernel):
        return kernel.reduce([cov_elementwise(k, x, y) for k in kernel.components])
    met = metric(kernel)
    met.check_dim(x.shape[1])
    if y is None:
        r = gnp.zeros(x.shape[0])
    else:
        r = combine_squared_differences(met, ((x - y) ** 2).T)
    return kernel.covariance(r)
