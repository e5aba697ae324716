# gpcov/gradient.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Derivatives of covariance matrices with respect to kernel parameters.

Parameter indices are 0-based and refer to the log-parameter vector
returned by ``kernel.get_params()``.

ARD kernels need the per-dimension squared differences
:math:`(x_{ik} - x_{jk})^2` in addition to the aggregate distance to
differentiate with respect to each length scale. They are read from an
:class:`gpcov.cache.ARDDistanceCache` when one is given, and computed
otherwise.
"""
import gpcov.num as gnp
from gpcov.config import get_logger
from gpcov.errors import check_same_dim
from gpcov.cache import KernelFamily, select_cache
from gpcov.metric import (
    metric,
    pairwise_distance,
    distance_matrix,
    condensed_distance,
    squared_difference,
    squared_difference_stack,
    condensed_squared_difference_stack,
)
from gpcov.kernel.composite import CompositeKernel, ProductKernel
from gpcov.fill import (
    FillMode,
    apply,
    apply_symmetric,
    check_points,
    check_matrix,
    check_kernel,
    fill,
)

_logger = get_logger()


_DERIVATIVES = {
    KernelFamily.ISOTROPIC: lambda k, r, p, sqdiff: k.d_covariance_d_param(r, p),
    KernelFamily.ARD: lambda k, r, p, sqdiff: k.d_covariance_d_param(r, p, sqdiff),
}


def _d_covariance(kernel, r, p, sqdiff):
    return _DERIVATIVES[kernel.family](kernel, r, p, sqdiff)


def d_covariance_d_log_scale(kernel, r):
    """Derivative of the covariance with respect to log(sigma), 2 * k(r)."""
    return 2.0 * kernel.covariance(r)


# ---------------------------------------------------------------------------
# Single entries


def _cov_pair(kernel, a, b):
    if isinstance(kernel, CompositeKernel):
        return kernel.reduce([_cov_pair(k, a, b) for k in kernel.components])
    return kernel.covariance(pairwise_distance(metric(kernel), a, b))


def gradient_vector(kernel, a, b):
    """Gradient of k(a, b) with respect to all the parameters of kernel.

    Parameters
    ----------
    kernel : StationaryKernel or CompositeKernel
    a, b : gnp.array, shape (d,)
        Two points.

    Returns
    -------
    gnp.array, shape (kernel.num_params(),)
    """
    if isinstance(kernel, CompositeKernel):
        grads = [gradient_vector(k, a, b) for k in kernel.components]
        if isinstance(kernel, ProductKernel):
            values = [_cov_pair(k, a, b) for k in kernel.components]
            for i in range(len(grads)):
                others = values[:i] + values[i + 1 :]
                grads[i] = grads[i] * kernel.reduce(others)
        return gnp.concatenate(grads)
    r = pairwise_distance(metric(kernel), a, b)
    sqdiff = squared_difference(a, b) if kernel.family is KernelFamily.ARD else None
    return gnp.array(
        [_d_covariance(kernel, r, p, sqdiff) for p in range(kernel.num_params())]
    )


def _entry_distances(kernel, x, i, j, cache):
    met = metric(kernel)
    c = select_cache(cache, kernel)
    if c is not None:
        return c.entry(met, i, j), c.sqdiff(i, j)
    r = pairwise_distance(met, x[i], x[j])
    if kernel.family is KernelFamily.ARD:
        return r, squared_difference(x[i], x[j])
    return r, None


def _cov_entry(kernel, x, i, j, cache):
    if isinstance(kernel, CompositeKernel):
        return kernel.reduce([_cov_entry(k, x, i, j, cache) for k in kernel.components])
    r, _ = _entry_distances(kernel, x, i, j, cache)
    return kernel.covariance(r)


def _gradient_entry(kernel, x, i, j, p, cache):
    if isinstance(kernel, CompositeKernel):
        c, q = kernel.param_owner(p)
        dk = _gradient_entry(kernel.components[c], x, i, j, q, cache)
        if isinstance(kernel, ProductKernel):
            for m, k in enumerate(kernel.components):
                if m != c:
                    dk = dk * _cov_entry(k, x, i, j, cache)
        return dk
    kernel.check_param_index(p)
    r, sqdiff = _entry_distances(kernel, x, i, j, cache)
    return _d_covariance(kernel, r, p, sqdiff)


def gradient_entry(kernel, x, i, j, p, cache=None):
    """Derivative of K[i, j] = k(x_i, x_j) with respect to parameter p.

    The distance between x_i and x_j is read from cache if given, and
    computed otherwise.
    For the derivative at a given distance, see :func:`gradient_at_distance`.
    """
    x, _ = check_points(x)
    check_kernel(kernel, x, None, cache)
    n = x.shape[0]
    for idx in (i, j):
        if not -n <= idx < n:
            raise IndexError(f"index {idx} out of range for {n} points")
    return float(_gradient_entry(kernel, x, i, j, p, cache))


def gradient_at_distance(kernel, r, p, sqdiff=None):
    """Derivative of the covariance at distance r with respect to parameter p.

    Parameters
    ----------
    kernel : StationaryKernel
    r : float or gnp.array
        Distances under the metric of kernel.
    p : int
        Parameter index.
    sqdiff : gnp.array, shape (d, ...), optional
        Per-dimension squared differences matching r. Required for ARD
        kernels, whose length-scale derivatives cannot be recovered from r.
    """
    if isinstance(kernel, CompositeKernel):
        raise TypeError(
            "composite kernels mix metrics, use gradient_entry or gradient_vector"
        )
    kernel.check_param_index(p)
    if kernel.family is KernelFamily.ARD:
        if sqdiff is None:
            raise ValueError(f"{type(kernel).__name__} needs per-dimension squared differences")
        sqdiff = gnp.asarray(sqdiff)
        check_same_dim("sqdiff", sqdiff.shape[0], "kernel", kernel.dim)
    r = gnp.asarray(r)
    d = _d_covariance(kernel, r, p, sqdiff)
    return float(d) if r.ndim == 0 else d


# ---------------------------------------------------------------------------
# Matrices


def _gradient_stationary(out, kernel, x, y, p, cache):
    kernel.check_param_index(p)
    met = metric(kernel)
    ard = kernel.family is KernelFamily.ARD
    if y is None:
        n = x.shape[0]
        c = select_cache(cache, kernel)
        if c is not None:
            r = c.condensed(met)
            sqdiff = c.sqdiff_condensed() if ard else None
        else:
            r = condensed_distance(met, x)
            sqdiff = condensed_squared_difference_stack(x) if ard else None
        diag_sqdiff = gnp.zeros((x.shape[1], n)) if ard else None
        apply_symmetric(
            out,
            _d_covariance(kernel, r, p, sqdiff),
            _d_covariance(kernel, gnp.zeros(n), p, diag_sqdiff),
            FillMode.SET,
        )
    else:
        r = distance_matrix(met, x, y)
        sqdiff = squared_difference_stack(x, y) if ard else None
        apply(out, Ellipsis, _d_covariance(kernel, r, p, sqdiff), FillMode.SET)
    return out


def _gradient_matrix(out, kernel, x, y, p, cache):
    if isinstance(kernel, CompositeKernel):
        c, q = kernel.param_owner(p)
        _gradient_matrix(out, kernel.components[c], x, y, q, cache)
        if isinstance(kernel, ProductKernel):
            for m, k in enumerate(kernel.components):
                if m != c:
                    fill(out, k, x, y, FillMode.MULTIPLY, cache)
        return out
    return _gradient_stationary(out, kernel, x, y, p, cache)


def gradient_matrix(kernel, x, p, y=None, cache=None, out=None):
    """Matrix of derivatives dK/dtheta_p, K being the covariance between x and y.

    Parameters
    ----------
    kernel : StationaryKernel or CompositeKernel
    x : gnp.array, shape (n1, d)
    p : int
        Parameter index.
    y : gnp.array, shape (n2, d), optional
        If None, derivatives of the covariance matrix of x.
    cache : distance cache, dict of caches or DistanceCacheStore, optional
        Only valid when y is None.
    out : gnp.array, shape (n1, n2), optional
        Array the result is written to.

    Returns
    -------
    gnp.array, shape (n1, n2)
    """
    x, y = check_points(x, y)
    n2 = x.shape[0] if y is None else y.shape[0]
    if out is None:
        out = gnp.empty((x.shape[0], n2))
    else:
        check_matrix(out, x, y, name="out")
    check_kernel(kernel, x, y, cache)
    kernel.check_param_index(p)
    _logger.debug(
        "gradient of %s w.r.t. parameter %d, shape %s", type(kernel).__name__, p, out.shape
    )
    return _gradient_matrix(out, kernel, x, y, p, cache)


def gradient_stack(kernel, x, y=None, cache=None):
    """All the derivative matrices, shape (kernel.num_params(), n1, n2)."""
    x, y = check_points(x, y)
    n2 = x.shape[0] if y is None else y.shape[0]
    out = gnp.empty((kernel.num_params(), x.shape[0], n2))
    for p in range(kernel.num_params()):
        gradient_matrix(kernel, x, p, y, cache, out=out[p])
    return out
