# gpcov/metric.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Distance metrics for stationary kernels.

A stationary kernel only sees the distance between two points. The
metric selector maps a kernel to the metric it is evaluated with, so
that the fill and gradient engines can be written once for all
kernels:

==========================  =====================================
MetricKind                  distance
==========================  =====================================
EUCLIDEAN                   :math:`\\|x - y\\|`
SQ_EUCLIDEAN                :math:`\\|x - y\\|^2`
WEIGHTED_EUCLIDEAN          :math:`(\\sum_k w_k (x_k - y_k)^2)^{1/2}`
WEIGHTED_SQ_EUCLIDEAN       :math:`\\sum_k w_k (x_k - y_k)^2`
==========================  =====================================

For ARD kernels the weights are the inverse squared length scales
:math:`w_k = 1 / \\ell_k^2`.
"""
from enum import Enum
from typing import Optional

import gpcov.num as gnp
from gpcov.errors import ShapeMismatchError, check_same_dim


class MetricKind(Enum):
    EUCLIDEAN = "euclidean"
    SQ_EUCLIDEAN = "sqeuclidean"
    WEIGHTED_EUCLIDEAN = "weighted_euclidean"
    WEIGHTED_SQ_EUCLIDEAN = "weighted_sqeuclidean"

    @property
    def weighted(self) -> bool:
        return self in (MetricKind.WEIGHTED_EUCLIDEAN, MetricKind.WEIGHTED_SQ_EUCLIDEAN)

    @property
    def squared(self) -> bool:
        return self in (MetricKind.SQ_EUCLIDEAN, MetricKind.WEIGHTED_SQ_EUCLIDEAN)

    @property
    def base(self) -> "MetricKind":
        """Unweighted counterpart."""
        return MetricKind.SQ_EUCLIDEAN if self.squared else MetricKind.EUCLIDEAN

    @property
    def scipy_name(self) -> str:
        """Metric name understood by scipy.spatial.distance."""
        return "sqeuclidean" if self.squared else "euclidean"


class Metric:
    """A metric kind, with its weight vector for the weighted kinds.

    The weights are not copied: a metric built from a kernel sees the
    kernel's weights as they are when the metric is used.
    """

    __slots__ = ("kind", "weights")

    def __init__(self, kind: MetricKind, weights: Optional[gnp.ndarray] = None):
        kind = MetricKind(kind)
        if kind.weighted and weights is None:
            raise ValueError(f"metric {kind.name} requires a weight vector")
        if not kind.weighted and weights is not None:
            raise ValueError(f"metric {kind.name} does not take weights")
        self.kind = kind
        self.weights = None if weights is None else gnp.asarray(weights)

    @property
    def dim(self) -> Optional[int]:
        return None if self.weights is None else self.weights.shape[0]

    def check_dim(self, d: int):
        if self.weights is not None:
            check_same_dim("metric weights", self.weights.shape[0], "points", d)

    def __eq__(self, other):
        if not isinstance(other, Metric):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.weights is None:
            return other.weights is None
        return other.weights is not None and gnp.array_equal(self.weights, other.weights)

    def __repr__(self):
        if self.weights is None:
            return f"Metric({self.kind.name})"
        return f"Metric({self.kind.name}, weights={self.weights.tolist()})"

    def __str__(self):
        return self.kind.name


# ---------------------------------------------------------------------------
# Metric selector


def metric_kind(kernel) -> MetricKind:
    """Metric kind a stationary kernel is evaluated with."""
    return kernel.metric_kind


def metric(kernel) -> Metric:
    """Metric of a stationary kernel.

    For ARD kernels, the current weight vector of the kernel is read at
    each call, so that in-place hyperparameter updates are reflected.
    """
    kind = metric_kind(kernel)
    if kind.weighted:
        return Metric(kind, kernel.ard_weights())
    return Metric(kind)


# ---------------------------------------------------------------------------
# Distances


def _finish(metric: Metric, sq):
    # sq is a (weighted) sum of squared differences
    return sq if metric.kind.squared else gnp.sqrt(sq)


def pairwise_distance(metric: Metric, a, b) -> float:
    """Distance between two points a and b under metric."""
    a = gnp.as_point(a)
    b = gnp.as_point(b)
    check_same_dim("a", a.shape[0], "b", b.shape[0])
    metric.check_dim(a.shape[0])
    sq = (a - b) ** 2
    if metric.weights is not None:
        sq = metric.weights * sq
    return float(_finish(metric, gnp.sum(sq)))


def distance_matrix(metric: Metric, x, y=None):
    """(n1, n2) matrix of distances between the rows of x and y.

    When y is None, distances between the rows of x and themselves.
    """
    x = gnp.as_points(x)
    y = x if y is None else gnp.as_points(y)
    check_same_dim("x", x.shape[1], "y", y.shape[1])
    metric.check_dim(x.shape[1])
    return gnp.weighted_cdist(x, y, metric.kind.scipy_name, metric.weights)


def condensed_distance(metric: Metric, x):
    """Strict upper triangle of the self-distance matrix of x (pdist order)."""
    x = gnp.as_points(x)
    metric.check_dim(x.shape[1])
    return gnp.weighted_pdist(x, metric.kind.scipy_name, metric.weights)


def squared_difference(a, b):
    """Per-dimension squared differences (a_k - b_k)^2, shape (d,)."""
    a = gnp.as_point(a)
    b = gnp.as_point(b)
    check_same_dim("a", a.shape[0], "b", b.shape[0])
    return (a - b) ** 2


def squared_difference_stack(x, y=None):
    """Stack of per-dimension squared difference matrices, shape (d, n1, n2).

    Slice k holds the pairwise squared distances computed with
    coordinate k only.
    """
    x = gnp.as_points(x)
    y = x if y is None else gnp.as_points(y)
    check_same_dim("x", x.shape[1], "y", y.shape[1])
    d = x.shape[1]
    stack = gnp.empty((d, x.shape[0], y.shape[0]))
    for k in range(d):
        stack[k] = gnp.cdist(x[:, k : k + 1], y[:, k : k + 1], metric="sqeuclidean")
    return stack


def combine_squared_differences(metric: Metric, sqdiff):
    """Aggregate distance from per-dimension squared differences.

    sqdiff has shape (d, ...); the leading axis is contracted with the
    metric weights (or summed for unweighted metrics).
    """
    sqdiff = gnp.asarray(sqdiff)
    if metric.weights is None:
        sq = gnp.sum(sqdiff, axis=0)
    else:
        if sqdiff.shape[0] != metric.weights.shape[0]:
            raise ShapeMismatchError(
                "metric weights and squared differences must have same dimension "
                f"({metric.weights.shape[0]} != {sqdiff.shape[0]})"
            )
        sq = gnp.einsum("k,k...->...", metric.weights, sqdiff)
    return _finish(metric, sq)


def condensed_squared_difference_stack(x):
    """Per-dimension squared differences of x with itself, condensed, shape (d, m)."""
    x = gnp.as_points(x)
    return gnp.stack(
        [gnp.pdist(x[:, k : k + 1], metric="sqeuclidean") for k in range(x.shape[1])]
    ).reshape(x.shape[1], -1)
