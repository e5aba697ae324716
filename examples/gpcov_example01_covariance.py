"""Covariance matrices of stationary kernels

Fill the covariance matrix of three points on a line with a squared
exponential kernel, then build a sum kernel by accumulating a Matérn
kernel into the same matrix.

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
"""
import gpcov.num as gnp
import gpcov as gc
from gpcov.kernel import SEIso, Mat32Iso, SEArd


def main():
    x = gnp.asarray([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])

    # k(x, y) = exp(-|x - y|^2 / 2)
    kernel = SEIso(ell=1.0, sigma=1.0)
    K = gnp.empty((3, 3))
    gc.fill(K, kernel, x)
    print("SE covariance matrix:")
    print(K)

    # K = k_SE + k_Matern32, accumulated in place
    gc.fill(K, Mat32Iso(ell=0.5, sigma=0.3), x, mode=gc.FillMode.ADD)
    print("SE + Matern 3/2 covariance matrix:")
    print(K)
    assert gnp.allclose(K, gc.cov(SEIso(1.0, 1.0) + Mat32Iso(0.5, 0.3), x))

    # cross-covariance with an ARD kernel
    y = gnp.asarray([[0.5, 1.0], [1.5, -1.0]])
    print("ARD cross-covariance:")
    print(gc.cov(SEArd(ell=[1.0, 2.0]), x, y))

    return K


if __name__ == "__main__":
    main()
