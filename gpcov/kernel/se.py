# gpcov/kernel/se.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gpcov.num as gnp
from gpcov.metric import MetricKind
from .stationary import IsotropicKernel, ARDKernel


def se_kernel(r2):
    """Squared exponential kernel.

    .. math::
        k(r^2) = \\exp(-r^2 / 2)

    Parameters
    ----------
    r2 : gnp.array
        Squared (scaled) distances between points.

    Returns
    -------
    gnp.array
        Kernel values.
    """
    return gnp.exp(-0.5 * r2)


class SEIso(IsotropicKernel):
    """Isotropic squared exponential kernel.

    .. math::
        k(x, y) = \\sigma^2 \\exp\\left(-\\frac{\\|x - y\\|^2}{2 \\ell^2}\\right)

    Evaluated on squared Euclidean distances. Defined for every real
    distance, no domain check is made.
    """

    metric_kind = MetricKind.SQ_EUCLIDEAN

    def covariance(self, r):
        return self.sigma2 * se_kernel(r / self.ell**2)

    def d_covariance_d_param(self, r, p, sqdiff=None):
        self.check_param_index(p)
        if p == 0:
            r2 = r / self.ell**2
            return self.sigma2 * se_kernel(r2) * r2
        return self.d_covariance_d_log_scale(r)


class SEArd(ARDKernel):
    """Squared exponential kernel with one length scale per dimension.

    .. math::
        k(x, y) = \\sigma^2 \\exp\\left(-\\frac12 \\sum_k
        \\frac{(x_k - y_k)^2}{\\ell_k^2}\\right)

    Evaluated on weighted squared Euclidean distances, with weights
    :math:`1 / \\ell_k^2`. The derivative with respect to
    :math:`\\log \\ell_k` is :math:`k(x, y) (x_k - y_k)^2 / \\ell_k^2`.
    """

    metric_kind = MetricKind.WEIGHTED_SQ_EUCLIDEAN

    def covariance(self, r):
        return self.sigma2 * se_kernel(r)

    def d_covariance_d_param(self, r, p, sqdiff=None):
        self.check_param_index(p)
        if p < self.dim:
            return self.covariance(r) * self.iell2[p] * sqdiff[p]
        return self.d_covariance_d_log_scale(r)
