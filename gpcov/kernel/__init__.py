# gpcov/kernel/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Stationary kernels.

This subpackage provides reference covariance functions for the fill
and gradient engines of gpcov.

Modules
-------
stationary
    Base classes for isotropic and ARD stationary kernels.
se
    Squared exponential kernels.
matern
    Matérn kernels with regularity 1/2, 3/2 and 5/2.
composite
    Sums and products of kernels.

Public API
-----------
- Base classes:
    StationaryKernel, IsotropicKernel, ARDKernel
- Squared exponential kernels:
    SEIso, SEArd
- Matérn kernels:
    Mat12Iso, Mat32Iso, Mat52Iso, Mat12Ard, Mat32Ard, Mat52Ard
- Composite kernels:
    SumKernel, ProductKernel
"""

from .stationary import StationaryKernel, IsotropicKernel, ARDKernel
from .se import se_kernel, SEIso, SEArd
from .matern import (
    matern12_kernel,
    matern32_kernel,
    matern52_kernel,
    Mat12Iso,
    Mat32Iso,
    Mat52Iso,
    Mat12Ard,
    Mat32Ard,
    Mat52Ard,
)
from .composite import CompositeKernel, SumKernel, ProductKernel

__all__ = [
    # Base classes
    "StationaryKernel",
    "IsotropicKernel",
    "ARDKernel",
    # Squared exponential
    "se_kernel",
    "SEIso",
    "SEArd",
    # Matérn
    "matern12_kernel",
    "matern32_kernel",
    "matern52_kernel",
    "Mat12Iso",
    "Mat32Iso",
    "Mat52Iso",
    "Mat12Ard",
    "Mat32Ard",
    "Mat52Ard",
    # Composite
    "CompositeKernel",
    "SumKernel",
    "ProductKernel",
]
