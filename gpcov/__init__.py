# gpcov/__init__.py

from . import config
from . import num
from . import errors
from . import cache
from . import kernel
from . import gradient
from .errors import CovarianceError, ShapeMismatchError, DomainError
from .metric import (
    MetricKind,
    Metric,
    metric,
    metric_kind,
    pairwise_distance,
    distance_matrix,
)
from .cache import (
    KernelFamily,
    IsotropicDistanceCache,
    ARDDistanceCache,
    DistanceCacheStore,
    build_distance_cache,
    cache_key,
)
from .fill import FillMode, fill, cov, cov_elementwise
from .gradient import (
    gradient_entry,
    gradient_at_distance,
    gradient_vector,
    gradient_matrix,
    gradient_stack,
    d_covariance_d_log_scale,
)

__version__ = config.__version__

__all__ = [
    "num",
    "kernel",
    "MetricKind",
    "Metric",
    "metric",
    "metric_kind",
    "pairwise_distance",
    "distance_matrix",
    "KernelFamily",
    "IsotropicDistanceCache",
    "ARDDistanceCache",
    "DistanceCacheStore",
    "build_distance_cache",
    "cache_key",
    "FillMode",
    "fill",
    "cov",
    "cov_elementwise",
    "gradient_entry",
    "gradient_at_distance",
    "gradient_vector",
    "gradient_matrix",
    "gradient_stack",
    "d_covariance_d_log_scale",
    "CovarianceError",
    "ShapeMismatchError",
    "DomainError",
    "__version__",
]
