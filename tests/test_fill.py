import math
import numpy as np
import pytest

import gpcov as gc
import gpcov.num as gnp
from gpcov.config import get_config, set_check_finite
from gpcov.fill import FillMode, fill, cov, cov_elementwise
from gpcov.kernel import (
    IsotropicKernel,
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
from gpcov.metric import MetricKind


def make_kernels(d=3):
    return [
        SEIso(0.7, 1.3),
        Mat12Iso(1.5, 0.8),
        Mat32Iso(0.4, 2.0),
        Mat52Iso(1.1, 1.0),
        SEArd([0.5, 1.0, 2.0][:d], 1.2),
        Mat12Ard([1.5, 0.3, 0.9][:d], 0.7),
        Mat32Ard([0.8, 1.7, 0.6][:d], 1.0),
        Mat52Ard([2.2, 0.4, 1.0][:d], 1.5),
    ]


KERNELS = make_kernels()
KERNEL_IDS = [type(k).__name__ for k in KERNELS]


def points(n, d=3, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(n, d))


class _SumOfIsotropic(IsotropicKernel):
    metric_kind = MetricKind.SQ_EUCLIDEAN

    def __init__(self, a, b):
        self.a, self.b = a, b

    def covariance(self, r):
        return self.a.covariance(r) + self.b.covariance(r)


class _ProductOfIsotropic(_SumOfIsotropic):
    def covariance(self, r):
        return self.a.covariance(r) * self.b.covariance(r)


def test_squared_exponential_three_points():
    x = gnp.asarray([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
    K = cov(SEIso(1.0, 1.0), x)
    a, b = math.exp(-0.5), math.exp(-2.0)
    expected = gnp.asarray([[1.0, a, b], [a, 1.0, a], [b, a, 1.0]])
    assert gnp.allclose(K, expected)
    assert abs(K[0, 1] - 0.6065) < 1e-4
    assert abs(K[0, 2] - 0.1353) < 1e-4


@pytest.mark.parametrize("kernel", KERNELS, ids=KERNEL_IDS)
def test_self_covariance_is_symmetric(kernel):
    x = points(9)
    K = gnp.empty((9, 9))
    fill(K, kernel, x)
    assert gnp.array_equal(K, K.T)
    assert gnp.allclose(gnp.asarray(K.diagonal()), kernel.sigma2)


@pytest.mark.parametrize("kernel", KERNELS, ids=KERNEL_IDS)
def test_two_sets_and_one_set_fill_agree(kernel):
    x = points(8)
    K1 = fill(gnp.empty((8, 8)), kernel, x, x)
    K2 = fill(gnp.empty((8, 8)), kernel, x)
    assert gnp.allclose(K1, K2, rtol=1e-12, atol=1e-12)


@pytest.mark.parametrize("kernel", KERNELS, ids=KERNEL_IDS)
def test_cached_fill_equals_uncached(kernel):
    x = points(10)
    cache = gc.build_distance_cache(kernel, x)
    assert gnp.allclose(cov(kernel, x, cache=cache), cov(kernel, x), rtol=1e-12, atol=1e-12)


@pytest.mark.parametrize("kernel", KERNELS, ids=KERNEL_IDS)
def test_cross_covariance_matches_pointwise(kernel):
    x, y = points(4, seed=1), points(6, seed=2)
    K = cov(kernel, x, y)
    assert K.shape == (4, 6)
    met = gc.metric(kernel)
    for i in range(4):
        for j in range(6):
            r = gc.pairwise_distance(met, x[i], y[j])
            assert K[i, j] == pytest.approx(kernel.covariance(r), rel=1e-10, abs=1e-12)


def test_additive_composition():
    a, b = SEIso(0.7, 1.2), SEIso(2.0, 0.5)
    x, y = points(7), points(5, seed=3)
    for second in (None, y):
        n2 = 7 if second is None else 5
        K = gnp.empty((7, n2))
        fill(K, a, x, second, mode=FillMode.SET)
        fill(K, b, x, second, mode=FillMode.ADD)
        expected = cov(_SumOfIsotropic(a, b), x, second)
        assert gnp.allclose(K, expected, rtol=1e-12, atol=1e-12)


def test_multiplicative_composition():
    a, b = SEIso(0.7, 1.2), SEIso(2.0, 0.5)
    x, y = points(7), points(5, seed=3)
    for second in (None, y):
        n2 = 7 if second is None else 5
        K = gnp.empty((7, n2))
        fill(K, a, x, second, mode="set")
        fill(K, b, x, second, mode="multiply")
        expected = cov(_ProductOfIsotropic(a, b), x, second)
        assert gnp.allclose(K, expected, rtol=1e-12, atol=1e-12)


def test_sum_and_product_kernels():
    a, b, c = SEIso(0.7, 1.2), Mat32Iso(1.3, 0.9), SEArd([0.5, 1.0, 2.0], 1.1)
    x = points(6)
    Ka, Kb, Kc = cov(a, x), cov(b, x), cov(c, x)
    assert gnp.allclose(cov(a + b + c, x), Ka + Kb + Kc)
    assert gnp.allclose(cov(a * b * c, x), Ka * Kb * Kc)
    assert gnp.allclose(cov(a * b + c, x), Ka * Kb + Kc)
    assert gnp.allclose(cov(SumKernel(a * b, c), x), Ka * Kb + Kc)


def test_composite_accumulated_into_existing_matrix():
    a, b = SEIso(0.7, 1.2), Mat52Iso(1.3, 0.9)
    x = points(5)
    Ka, Kb = cov(a, x), cov(b, x)

    K = gnp.ones((5, 5))
    fill(K, ProductKernel(a, b), x, mode=FillMode.ADD)
    assert gnp.allclose(K, 1.0 + Ka * Kb)

    K = gnp.full((5, 5), 2.0)
    fill(K, SumKernel(a, b), x, mode=FillMode.MULTIPLY)
    assert gnp.allclose(K, 2.0 * (Ka + Kb))


def test_composite_with_cache():
    a, b, c = SEIso(0.7, 1.2), SEIso(2.0, 0.3), Mat32Ard([0.5, 1.0, 2.0], 1.1)
    k = (a + b) * c
    x = points(8)
    caches = gc.build_distance_cache(k, x)
    assert len(caches) == 2
    assert gnp.allclose(cov(k, x, cache=caches), cov(k, x))
    store = gc.DistanceCacheStore(x)
    assert gnp.allclose(cov(k, x, cache=store), cov(k, x))


def test_wrong_rows_fail_fast():
    x = points(3)
    K = gnp.full((4, 3), 7.0)
    with pytest.raises(gc.ShapeMismatchError, match="rows"):
        fill(K, SEIso(), x)
    assert gnp.all(K == 7.0)


def test_wrong_columns_fail_fast():
    x, y = points(3), points(5)
    K = gnp.full((3, 4), 7.0)
    for mode in ("set", "add", "multiply"):
        with pytest.raises(gc.ShapeMismatchError, match="columns"):
            fill(K, SEIso(), x, y, mode=mode)
    assert gnp.all(K == 7.0)


def test_dimension_mismatch():
    K = gnp.zeros((3, 3))
    with pytest.raises(gc.ShapeMismatchError, match="same dimension"):
        fill(K, SEIso(), points(3, d=2), points(3, d=3))
    with pytest.raises(gc.ShapeMismatchError, match="same dimension"):
        fill(K, SEArd([1.0, 1.0]), points(3, d=3))
    assert gnp.all(K == 0.0)


def test_composite_shape_errors_leave_matrix_untouched():
    # the ARD component fails the dimension check, the SE one would not
    k = SEIso() + SEArd([1.0, 2.0])
    K = gnp.full((4, 4), 3.0)
    with pytest.raises(gc.ShapeMismatchError):
        fill(K, k, points(4, d=3))
    assert gnp.all(K == 3.0)


def test_cache_errors():
    x = points(5)
    kernel = SEIso()
    cache = gc.build_distance_cache(kernel, x)
    with pytest.raises(gc.ShapeMismatchError):
        fill(gnp.empty((5, 5)), kernel, x, x, cache=cache)
    with pytest.raises(gc.ShapeMismatchError):
        fill(gnp.empty((4, 4)), kernel, x[:4], cache=cache)
    with pytest.raises(ValueError):
        fill(gnp.empty((5, 5)), SEArd([1.0, 1.0, 1.0]), x, cache=cache)
    with pytest.raises(ValueError):
        fill(gnp.empty((5, 5)), Mat32Iso(), x, cache=cache)


def test_matrix_must_be_2d():
    with pytest.raises(gc.ShapeMismatchError):
        fill(gnp.zeros(9), SEIso(), points(3))


def test_invalid_mode():
    with pytest.raises(ValueError):
        fill(gnp.zeros((3, 3)), SEIso(), points(3), mode="subtract")


def test_single_point():
    x = gnp.asarray([0.3, -0.2])
    K = cov(SEIso(1.0, 2.0), x)
    assert K.shape == (1, 1)
    assert K[0, 0] == pytest.approx(4.0)


@pytest.mark.parametrize("kernel", KERNELS, ids=KERNEL_IDS)
def test_cov_elementwise(kernel):
    x, y = points(6, seed=4), points(6, seed=5)
    assert gnp.allclose(cov_elementwise(kernel, x), cov(kernel, x).diagonal())
    assert gnp.allclose(cov_elementwise(kernel, x, y), cov(kernel, x, y).diagonal())
    k = kernel * SEIso(0.5) + Mat12Iso()
    assert gnp.allclose(cov_elementwise(k, x, y), cov(k, x, y).diagonal())


def test_check_finite():
    x = points(4)
    x[1, 2] = gnp.inf
    assert get_config().check_finite is False
    set_check_finite(True)
    try:
        with pytest.raises(ValueError, match="nan or inf"):
            cov(SEIso(), x)
    finally:
        set_check_finite(False)
