# gpcov/kernel/stationary.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Base classes for stationary kernels.

A stationary kernel is evaluated through a scalar function of the
distance between two points. Subclasses define

- ``metric_kind``: the :class:`gpcov.metric.MetricKind` the distance is
  computed with,
- ``covariance(r)``: covariance at distance ``r``,
- ``d_covariance_d_param(r, p)`` (isotropic) or
  ``d_covariance_d_param(r, p, sqdiff)`` (ARD): derivative of the
  covariance with respect to the p-th (log-)parameter.

Both functions must accept scalars and arrays of distances.

Parameters are exposed in log space, ordered as
``[log(ell), log(sigma)]`` for isotropic kernels and
``[log(ell_1), ..., log(ell_d), log(sigma)]`` for ARD kernels. The
amplitude enters the covariance as ``sigma**2``.
"""
import gpcov.num as gnp
from gpcov.cache import KernelFamily
from gpcov.errors import DomainError


class StationaryKernel:
    family = None
    metric_kind = None

    def covariance(self, r):
        raise NotImplementedError

    def d_covariance_d_param(self, r, p, sqdiff=None):
        raise NotImplementedError

    def num_params(self) -> int:
        raise NotImplementedError

    def get_params(self):
        raise NotImplementedError

    def set_params(self, params):
        raise NotImplementedError

    def param_names(self):
        raise NotImplementedError

    def d_covariance_d_log_scale(self, r):
        """Derivative with respect to log(sigma); sigma enters squared."""
        return 2.0 * self.covariance(r)

    def check_param_index(self, p: int):
        if not 0 <= p < self.num_params():
            raise IndexError(
                f"parameter index {p} out of range for {type(self).__name__} "
                f"with {self.num_params()} parameters"
            )

    @staticmethod
    def check_distance(r):
        """Raise DomainError for negative distances."""
        if gnp.any(gnp.asarray(r) < 0.0):
            raise DomainError("negative distance given to a kernel defined for r >= 0")

    def __add__(self, other):
        from .composite import SumKernel

        return SumKernel(self, other)

    def __mul__(self, other):
        from .composite import ProductKernel

        return ProductKernel(self, other)

    def __repr__(self):
        names = self.param_names()
        values = ", ".join(
            f"{n}={v:.4g}" for n, v in zip(names, gnp.exp(self.get_params()))
        )
        return f"{type(self).__name__}({values})"


def _positive(name, value):
    value = gnp.asarray(value)
    if not gnp.all(value > 0.0) or not gnp.all(gnp.isfinite(value)):
        raise ValueError(f"{name} must be positive and finite")
    return value


class IsotropicKernel(StationaryKernel):
    """Stationary kernel with a single length scale."""

    family = KernelFamily.ISOTROPIC

    def __init__(self, ell=1.0, sigma=1.0):
        self.ell = float(_positive("ell", ell).reshape(-1)[0])
        self.sigma2 = float(_positive("sigma", sigma).reshape(-1)[0]) ** 2

    def num_params(self) -> int:
        return 2

    def get_params(self):
        return gnp.array([gnp.log(self.ell), 0.5 * gnp.log(self.sigma2)])

    def set_params(self, params):
        params = gnp.asarray(params).reshape(-1)
        if params.shape[0] != self.num_params():
            raise ValueError(
                f"{type(self).__name__} expects {self.num_params()} parameters, "
                f"got {params.shape[0]}"
            )
        self.ell = float(gnp.exp(params[0]))
        self.sigma2 = float(gnp.exp(2.0 * params[1]))

    def param_names(self):
        return ["ell", "sigma"]


class ARDKernel(StationaryKernel):
    """Stationary kernel with one length scale per input dimension.

    ``iell2`` holds the inverse squared length scales; it is the weight
    vector of the kernel metric and is updated in place by set_params.
    """

    family = KernelFamily.ARD

    def __init__(self, ell, sigma=1.0):
        ell = _positive("ell", ell).reshape(-1)
        self.iell2 = 1.0 / ell**2
        self.sigma2 = float(_positive("sigma", sigma).reshape(-1)[0]) ** 2

    @property
    def dim(self) -> int:
        return self.iell2.shape[0]

    def ard_weights(self):
        return self.iell2

    def num_params(self) -> int:
        return self.dim + 1

    def get_params(self):
        return gnp.concatenate(
            (-0.5 * gnp.log(self.iell2), gnp.array([0.5 * gnp.log(self.sigma2)]))
        )

    def set_params(self, params):
        params = gnp.asarray(params).reshape(-1)
        if params.shape[0] != self.num_params():
            raise ValueError(
                f"{type(self).__name__} expects {self.num_params()} parameters, "
                f"got {params.shape[0]}"
            )
        self.iell2[:] = gnp.exp(-2.0 * params[: self.dim])
        self.sigma2 = float(gnp.exp(2.0 * params[-1]))

    def param_names(self):
        return [f"ell_{k}" for k in range(self.dim)] + ["sigma"]
