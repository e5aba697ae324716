# gpcov/kernel/matern.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Matérn kernels with half-integer regularity :math:`\\nu \\in \\{1/2, 3/2, 5/2\\}`.

With :math:`s = \\sqrt{2\\nu}\\, r / \\ell`, where r is the Euclidean
distance (isotropic kernels) or the weighted Euclidean distance with
weights :math:`1/\\ell_k^2` (ARD kernels, where :math:`\\ell = 1`),

.. math::
    k_{1/2}(s) = e^{-s}, \\quad
    k_{3/2}(s) = (1 + s) e^{-s}, \\quad
    k_{5/2}(s) = (1 + s + s^2/3) e^{-s}.

These kernels are defined for :math:`r \\geq 0` only; negative distances
raise :class:`gpcov.errors.DomainError`.
"""
from math import sqrt
import gpcov.num as gnp
from gpcov.metric import MetricKind
from .stationary import IsotropicKernel, ARDKernel


def matern12_kernel(s):
    """Matérn 1/2 (exponential) kernel of the scaled distance s."""
    return gnp.exp(-s)


def matern32_kernel(s):
    """Matérn 3/2 kernel of the scaled distance s = sqrt(3) r / ell."""
    return (1.0 + s) * gnp.exp(-s)


def matern52_kernel(s):
    """Matérn 5/2 kernel of the scaled distance s = sqrt(5) r / ell."""
    return (1.0 + s + s**2 / 3.0) * gnp.exp(-s)


# -k'(s) / s, finite at s = 0 except for nu = 1/2


def _matern12_h(s):
    s = gnp.asarray(s)
    with gnp.errstate(divide="ignore", invalid="ignore"):
        return gnp.where(s > 0.0, gnp.exp(-s) / s, 0.0)


def _matern32_h(s):
    return gnp.exp(-s)


def _matern52_h(s):
    return (1.0 + s) / 3.0 * gnp.exp(-s)


class _MaternIso(IsotropicKernel):
    metric_kind = MetricKind.EUCLIDEAN
    nu = None
    _k = None
    _h = None

    @property
    def _c(self):
        return sqrt(2.0 * self.nu)

    def covariance(self, r):
        self.check_distance(r)
        s = self._c * r / self.ell
        return self.sigma2 * self._k(s)

    def d_covariance_d_param(self, r, p, sqdiff=None):
        self.check_param_index(p)
        if p == 0:
            self.check_distance(r)
            s = self._c * r / self.ell
            # d s / d log(ell) = -s
            return self.sigma2 * self._h(s) * s**2
        return self.d_covariance_d_log_scale(r)


class _MaternArd(ARDKernel):
    metric_kind = MetricKind.WEIGHTED_EUCLIDEAN
    nu = None
    _k = None
    _h = None

    @property
    def _c(self):
        return sqrt(2.0 * self.nu)

    def covariance(self, r):
        self.check_distance(r)
        return self.sigma2 * self._k(self._c * r)

    def d_covariance_d_param(self, r, p, sqdiff=None):
        self.check_param_index(p)
        if p < self.dim:
            self.check_distance(r)
            c = self._c
            # d r / d log(ell_p) = -iell2[p] * sqdiff[p] / r
            return self.sigma2 * c**2 * self._h(c * r) * self.iell2[p] * sqdiff[p]
        return self.d_covariance_d_log_scale(r)


class Mat12Iso(_MaternIso):
    """Isotropic Matérn 1/2 (exponential) kernel, :math:`\\sigma^2 e^{-r/\\ell}`."""

    nu = 0.5
    _k = staticmethod(matern12_kernel)
    _h = staticmethod(_matern12_h)


class Mat32Iso(_MaternIso):
    """Isotropic Matérn 3/2 kernel."""

    nu = 1.5
    _k = staticmethod(matern32_kernel)
    _h = staticmethod(_matern32_h)


class Mat52Iso(_MaternIso):
    """Isotropic Matérn 5/2 kernel."""

    nu = 2.5
    _k = staticmethod(matern52_kernel)
    _h = staticmethod(_matern52_h)


class Mat12Ard(_MaternArd):
    """Matérn 1/2 kernel with one length scale per dimension.

    The length-scale derivatives have a removable singularity at
    :math:`r = 0`, where they are set to 0.
    """

    nu = 0.5
    _k = staticmethod(matern12_kernel)
    _h = staticmethod(_matern12_h)


class Mat32Ard(_MaternArd):
    """Matérn 3/2 kernel with one length scale per dimension."""

    nu = 1.5
    _k = staticmethod(matern32_kernel)
    _h = staticmethod(_matern32_h)


class Mat52Ard(_MaternArd):
    """Matérn 5/2 kernel with one length scale per dimension."""

    nu = 2.5
    _k = staticmethod(matern52_kernel)
    _h = staticmethod(_matern52_h)
