import math
import numpy as np
import pytest

import gpcov as gc
import gpcov.num as gnp
from gpcov.kernel import (
    se_kernel,
    matern32_kernel,
    SEIso,
    SEArd,
    Mat12Iso,
    Mat32Iso,
    Mat52Iso,
    Mat12Ard,
    Mat32Ard,
    Mat52Ard,
    SumKernel,
    ProductKernel,
)


def points(n, d=3, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(n, d))


def test_kernel_functions():
    assert se_kernel(0.0) == 1.0
    assert se_kernel(2.0) == pytest.approx(math.exp(-1.0))
    s = math.sqrt(3.0)
    assert matern32_kernel(s) == pytest.approx((1.0 + s) * math.exp(-s))


def test_covariance_values():
    assert SEIso(2.0, 1.5).covariance(4.0) == pytest.approx(2.25 * math.exp(-0.5))
    assert Mat12Iso(2.0, 1.0).covariance(1.0) == pytest.approx(math.exp(-0.5))
    s = math.sqrt(3.0) * 0.5
    assert Mat32Iso(2.0, 1.0).covariance(1.0) == pytest.approx((1.0 + s) * math.exp(-s))
    s = math.sqrt(5.0) * 0.5
    assert Mat52Iso(2.0, 1.0).covariance(1.0) == pytest.approx(
        (1.0 + s + s**2 / 3.0) * math.exp(-s)
    )


@pytest.mark.parametrize(
    "iso, ard",
    [(SEIso, SEArd), (Mat12Iso, Mat12Ard), (Mat32Iso, Mat32Ard), (Mat52Iso, Mat52Ard)],
)
def test_ard_with_equal_lengthscales_is_isotropic(iso, ard):
    x, y = points(5), points(4, seed=1)
    k_iso = iso(0.8, 1.3)
    k_ard = ard([0.8, 0.8, 0.8], 1.3)
    assert gnp.allclose(gc.cov(k_iso, x, y), gc.cov(k_ard, x, y))
    assert gnp.allclose(gc.cov(k_iso, x), gc.cov(k_ard, x))


def test_params_roundtrip():
    kernel = SEIso(2.0, 3.0)
    assert kernel.num_params() == 2
    assert gnp.allclose(kernel.get_params(), [math.log(2.0), math.log(3.0)])
    kernel.set_params([0.0, math.log(2.0)])
    assert kernel.ell == pytest.approx(1.0)
    assert kernel.sigma2 == pytest.approx(4.0)
    assert kernel.param_names() == ["ell", "sigma"]


def test_ard_params_roundtrip():
    kernel = Mat32Ard([1.0, 2.0, 4.0], 0.5)
    assert kernel.num_params() == 4
    assert kernel.dim == 3
    assert gnp.allclose(gnp.exp(kernel.get_params()), [1.0, 2.0, 4.0, 0.5])
    weights = kernel.ard_weights()
    kernel.set_params(gnp.log(gnp.asarray([2.0, 2.0, 2.0, 1.0])))
    assert weights is kernel.ard_weights()
    assert gnp.allclose(weights, 0.25)
    assert kernel.sigma2 == pytest.approx(1.0)
    assert kernel.param_names() == ["ell_0", "ell_1", "ell_2", "sigma"]


def test_invalid_parameters():
    with pytest.raises(ValueError):
        SEIso(0.0)
    with pytest.raises(ValueError):
        SEIso(1.0, -1.0)
    with pytest.raises(ValueError):
        SEArd([1.0, -2.0])
    with pytest.raises(ValueError):
        Mat32Iso(gnp.inf)
    with pytest.raises(ValueError):
        SEIso().set_params([0.0])
    with pytest.raises(ValueError):
        SEArd([1.0, 1.0]).set_params([0.0, 0.0])


def test_matern_negative_distance():
    for kernel in (Mat12Iso(), Mat32Iso(), Mat52Ard([1.0, 1.0])):
        with pytest.raises(gc.DomainError):
            kernel.covariance(-1.0)
        with pytest.raises(gc.DomainError):
            kernel.d_covariance_d_param(gnp.asarray([0.5, -0.1]), 0, gnp.ones((2, 2)))


def test_matern12_ard_derivative_at_zero():
    kernel = Mat12Ard([1.0, 2.0], 1.0)
    sqdiff = gnp.zeros((2, 3))
    d = kernel.d_covariance_d_param(gnp.zeros(3), 0, sqdiff)
    assert gnp.all(d == 0.0)


def test_composition_operators():
    a, b, c = SEIso(), Mat32Iso(), Mat52Ard([1.0, 1.0])
    k = a + b + c
    assert isinstance(k, SumKernel)
    assert k.components == [a, b, c]
    assert k.num_params() == 7
    assert list(k.leaves()) == [a, b, c]
    p = a * b * c
    assert isinstance(p, ProductKernel)
    assert len(p.components) == 3
    mixed = a * b + c
    assert isinstance(mixed.components[0], ProductKernel)
    assert list(mixed.leaves()) == [a, b, c]
    assert mixed.param_owner(4) == (1, 0)
    with pytest.raises(ValueError):
        SumKernel(a)


def test_composite_params():
    a, b = SEIso(2.0, 1.0), SEArd([1.0, 3.0], 0.5)
    k = a * b
    assert k.param_names() == ["k0.ell", "k0.sigma", "k1.ell_0", "k1.ell_1", "k1.sigma"]
    params = k.get_params()
    assert params.shape == (5,)
    params[0] = 0.0
    params[3] = 0.0
    k.set_params(params)
    assert a.ell == pytest.approx(1.0)
    assert gnp.allclose(b.ard_weights(), [1.0, 1.0])
    with pytest.raises(ValueError):
        k.set_params(params[:4])


def test_repr():
    assert repr(SEIso(2.0, 1.0)) == "SEIso(ell=2, sigma=1)"
    assert repr(SEIso() + Mat12Iso()).startswith("SumKernel(SEIso(")
