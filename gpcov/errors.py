# gpcov/errors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Exceptions raised by the covariance evaluation engine."""


class CovarianceError(Exception):
    """Base class for gpcov errors."""


class ShapeMismatchError(CovarianceError, ValueError):
    """Point sets, matrices or caches with incompatible shapes.

    Raised before any numerical work, so that the target matrix is
    left untouched.
    """


class DomainError(CovarianceError, ValueError):
    """A covariance function evaluated outside of its domain.

    Raised by kernel implementations, e.g. a negative distance given to
    a kernel defined on :math:`[0, +\\infty)`.
    """


def check_same_dim(name1, dim1, name2, dim2):
    if dim1 != dim2:
        raise ShapeMismatchError(
            f"{name1} and {name2} must have same dimension ({dim1} != {dim2})"
        )


def check_nobs(name1, n1, name2, n2):
    if n1 != n2:
        raise ShapeMismatchError(
            f"{name1} and {name2} incompatible number of observations ({n1} != {n2})"
        )
