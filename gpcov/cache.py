# gpcov/cache.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Distance caches.

Filling a covariance matrix and its derivatives for a fixed point set
requires the same pairwise distances over and over (one fill, then one
gradient matrix per parameter, at each iteration of an optimizer).
A distance cache holds them once for all:

- isotropic kernels: the (n, n) matrix ``R`` of pairwise distances for
  the unweighted metric of the kernel (the length scale is applied by
  the kernel itself, hence ``R`` does not depend on parameters),
- ARD kernels: the (d, n, n) stack ``dist_stack`` of per-dimension
  squared differences. The weighted distance for the current weights
  :math:`w` is recovered as :math:`\\sum_k w_k \\, dist\\_stack[k]`
  (square root taken for the Euclidean kinds), and the slices are
  what the length-scale derivatives are made of.

Caches hold no reference to the point set they were built from. A cache
must be rebuilt by the caller if the point set changes.
"""
from enum import Enum

import gpcov.num as gnp
from gpcov.config import get_logger
from gpcov.errors import check_nobs, check_same_dim
from gpcov.metric import (
    Metric,
    MetricKind,
    metric_kind,
    condensed_distance,
    combine_squared_differences,
)

_logger = get_logger()


class KernelFamily(Enum):
    ISOTROPIC = "isotropic"
    ARD = "ard"


class IsotropicDistanceCache:
    """Pairwise distances of a point set for an unweighted metric."""

    variant = "IsotropicData"

    def __init__(self, R, kind, dim):
        self.R = R
        self.kind = kind
        self.dim = dim

    @classmethod
    def build(cls, kernel, x):
        x = gnp.as_points(x)
        kind = metric_kind(kernel).base
        n = x.shape[0]
        R = gnp.symmetric_from_condensed(
            condensed_distance(Metric(kind), x), 0.0, n
        )
        return cls(R, kind, x.shape[1])

    @property
    def n(self) -> int:
        return self.R.shape[0]

    def _check_metric(self, metric):
        if metric.kind is not self.kind:
            raise ValueError(
                f"distance cache built for {self.kind.name} "
                f"cannot serve metric {metric.kind.name}"
            )

    def distances(self, metric):
        self._check_metric(metric)
        return self.R

    def condensed(self, metric):
        self._check_metric(metric)
        return gnp.condensed_from_square(self.R)

    def entry(self, metric, i, j):
        self._check_metric(metric)
        return self.R[i, j]

    def sqdiff(self, i=None, j=None):
        return None

    def __repr__(self):
        return f"{type(self).__name__}(n={self.n}, dim={self.dim}, kind={self.kind.name})"


class ARDDistanceCache:
    """Per-dimension squared differences of a point set."""

    variant = "StationaryARDData"

    def __init__(self, dist_stack):
        self.dist_stack = dist_stack

    @classmethod
    def build(cls, kernel, x):
        x = gnp.as_points(x)
        n, d = x.shape
        dist_stack = gnp.empty((d, n, n))
        for k in range(d):
            dist_stack[k] = gnp.symmetric_from_condensed(
                condensed_distance(Metric(MetricKind.SQ_EUCLIDEAN), x[:, k : k + 1]), 0.0, n
            )
        return cls(dist_stack)

    @property
    def n(self) -> int:
        return self.dist_stack.shape[1]

    @property
    def dim(self) -> int:
        return self.dist_stack.shape[0]

    def distances(self, metric):
        return combine_squared_differences(metric, self.dist_stack)

    def condensed(self, metric):
        return combine_squared_differences(metric, self.sqdiff_condensed())

    def entry(self, metric, i, j):
        return combine_squared_differences(metric, self.dist_stack[:, i, j])

    def sqdiff(self, i=None, j=None):
        """Squared differences for entry (i, j), or the whole stack."""
        if i is None:
            return self.dist_stack
        return self.dist_stack[:, i, j]

    def sqdiff_condensed(self):
        return gnp.condensed_from_square(self.dist_stack)

    def __repr__(self):
        return f"{type(self).__name__}(n={self.n}, dim={self.dim})"


_CACHE_TYPES = {
    KernelFamily.ISOTROPIC: IsotropicDistanceCache,
    KernelFamily.ARD: ARDDistanceCache,
}


def _is_composite(kernel) -> bool:
    return hasattr(kernel, "components")


def cache_key(kernel) -> str:
    """Identity of the cache a kernel can use, e.g. 'IsotropicData_SQ_EUCLIDEAN'."""
    cache_type = _CACHE_TYPES[kernel.family]
    return f"{cache_type.variant}_{metric_kind(kernel).name}"


def build_distance_cache(kernel, x):
    """Build the distance cache of kernel for the point set x.

    For sum and product kernels, returns a dict mapping the cache key of
    each leaf kernel to its cache; leaves with the same key share one.
    """
    if _is_composite(kernel):
        caches = {}
        for leaf in kernel.leaves():
            key = cache_key(leaf)
            if key not in caches:
                caches[key] = build_distance_cache(leaf, x)
        return caches
    cache = _CACHE_TYPES[kernel.family].build(kernel, x)
    _logger.debug("Built %s for x of shape %s", cache_key(kernel), tuple(cache_shape(cache)))
    return cache


def cache_shape(cache):
    if isinstance(cache, ARDDistanceCache):
        return cache.dist_stack.shape
    return cache.R.shape


def select_cache(cache, kernel):
    """Cache to be used by a stationary kernel, from a cache, a dict or a store."""
    if cache is None:
        return None
    if isinstance(cache, DistanceCacheStore):
        return cache.get(kernel)
    if isinstance(cache, dict):
        key = cache_key(kernel)
        try:
            return cache[key]
        except KeyError:
            raise KeyError(f"no distance cache with key '{key}'") from None
    return cache


def check_cache(cache, kernel, n, dim):
    """Validate a stationary kernel cache against a point set of shape (n, dim)."""
    expected = _CACHE_TYPES[kernel.family]
    if not isinstance(cache, expected):
        raise ValueError(
            f"{type(kernel).__name__} requires a {expected.__name__}, "
            f"got {type(cache).__name__}"
        )
    if expected is IsotropicDistanceCache and cache.kind is not metric_kind(kernel).base:
        raise ValueError(
            f"{type(kernel).__name__} requires a {metric_kind(kernel).name} "
            f"distance cache, got {cache.kind.name}"
        )
    check_nobs("x", n, "cache", cache.n)
    check_same_dim("x", dim, "cache", cache.dim)


class DistanceCacheStore:
    """Distance caches of one point set, built on demand and keyed by cache_key.

    This is the memoization layer between an optimizer loop and the
    fill / gradient engines: kernels that share a cache key share the
    cache. The store does not track changes of the point set; call
    clear() (or make a new store) when it changes.
    """

    def __init__(self, x):
        self.x = gnp.as_points(x)
        self._caches = {}

    def get(self, kernel):
        if _is_composite(kernel):
            return {cache_key(leaf): self.get(leaf) for leaf in kernel.leaves()}
        key = cache_key(kernel)
        cache = self._caches.get(key)
        if cache is None:
            _logger.debug("Distance cache miss: %s", key)
            cache = build_distance_cache(kernel, self.x)
            self._caches[key] = cache
        else:
            _logger.debug("Distance cache hit: %s", key)
        return cache

    def populate(self, kernel):
        """Build every cache kernel needs; the store is read-only afterwards."""
        self.get(kernel)
        return self

    def keys(self):
        return self._caches.keys()

    def clear(self):
        self._caches.clear()

    def __contains__(self, key):
        return key in self._caches

    def __len__(self):
        return len(self._caches)

    def __repr__(self):
        return f"DistanceCacheStore(n={self.x.shape[0]}, keys={list(self._caches)})"

