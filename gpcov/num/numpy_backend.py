# gpcov/num/numpy_backend.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""NumPy numerical backend for GPcov.

This module defines the NumPy/SciPy implementation of the gpcov.num API.
Covariance matrices are float64 arrays; point sets are (n, d) arrays.
"""

from typing import Any, Optional, Union
from gpcov.config import get_config, get_logger

Scalar = Union[int, float]
ArrayLike = Any

_config = get_config()
_logger = get_logger()


# -----------------------------------------------------
#
#                      NUMPY
#
# -----------------------------------------------------

import numpy
from numpy.typing import NDArray

_np_dtype = numpy.float64
_config.dtype = _np_dtype
ndarray = NDArray[_np_dtype]

from numpy import (
    copy,
    where,
    any,
    all,
    isfinite,
    allclose,
    array_equal,
    stack,
    concatenate,
    sqrt,
    exp,
    log,
    sum,
    einsum,
    triu_indices,
    diag_indices,
    errstate,
)
from numpy import inf
from scipy.spatial.distance import cdist, pdist

_logger.debug("Using numpy backend (dtype=%s)", _np_dtype.__name__)

# ..................................................


def array(x, dtype=None):
    return numpy.array(x, dtype=_np_dtype if dtype is None else dtype)


def asarray(x, dtype=None):
    if dtype is not None:
        return numpy.asarray(x, dtype=dtype)
    if isinstance(x, numpy.ndarray):
        if numpy.issubdtype(x.dtype, numpy.floating):
            return x.astype(_np_dtype, copy=False)
        return x.astype(_np_dtype)
    return numpy.asarray(x, dtype=_np_dtype)


def empty(shape, dtype=None):
    return numpy.empty(shape, dtype=_np_dtype if dtype is None else dtype)


def zeros(shape, dtype=None):
    return numpy.zeros(shape, dtype=_np_dtype if dtype is None else dtype)


def ones(shape, dtype=None):
    return numpy.ones(shape, dtype=_np_dtype if dtype is None else dtype)


def full(shape, fill_value, dtype=None):
    return numpy.full(shape, fill_value, dtype=_np_dtype if dtype is None else dtype)


def isarray(x):
    return isinstance(x, numpy.ndarray)


# ..................................................


def as_points(x: ArrayLike) -> ArrayLike:
    """Return x as a float64 (n, d) array; a 1d array is a single point."""
    x = asarray(x)
    if x.ndim == 1:
        x = x.reshape(1, -1)
    elif x.ndim != 2:
        raise ValueError(f"point sets must be 1d or 2d arrays (got ndim={x.ndim})")
    return x


def as_point(x: ArrayLike) -> ArrayLike:
    """Return x as a float64 (d,) array."""
    x = asarray(x)
    if x.ndim == 2 and x.shape[0] == 1:
        x = x[0]
    elif x.ndim == 0:
        x = x.reshape(1)
    elif x.ndim != 1:
        raise ValueError(f"a point must be a 1d array (got shape {x.shape})")
    return x


def weighted_cdist(
    x: ArrayLike, y: ArrayLike, metric: str, w: Optional[ArrayLike] = None
) -> ArrayLike:
    if w is None:
        return cdist(x, y, metric=metric)
    return cdist(x, y, metric=metric, w=w)


def weighted_pdist(
    x: ArrayLike, metric: str, w: Optional[ArrayLike] = None
) -> ArrayLike:
    if w is None:
        return pdist(x, metric=metric)
    return pdist(x, metric=metric, w=w)


def symmetric_from_condensed(c: ArrayLike, diagonal: ArrayLike, n: int) -> ArrayLike:
    """Mirror a strict upper triangle (condensed form) into an (n, n) matrix."""
    M = empty((n, n))
    iu = triu_indices(n, k=1)
    M[iu] = c
    M[iu[1], iu[0]] = c
    M[diag_indices(n)] = diagonal
    return M


def condensed_from_square(M: ArrayLike) -> ArrayLike:
    """Strict upper triangle of a square matrix, row-major (pdist order)."""
    iu = triu_indices(M.shape[-1], k=1)
    return M[..., iu[0], iu[1]]
