import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from noiselab.utils import (
    HASH_MULTIPLIER,
    INT_MAX,
    PRIME_X,
    PRIME_Y,
    ROOT2,
    ROOT3,
    DistanceFunction,
    calc_distance,
    get_value_coord,
    gradient_dot_2d,
    gradient_dot_3d,
    gradient_dot_4d,
    gradient_dot_fancy,
    hash_primes,
    hash_primes_hb,
    interp_hermite,
    interp_quintic,
    lerp,
    to_int32,
)

int32s = st.integers(min_value=-(2**31), max_value=2**31 - 1)
floats = st.floats(min_value=-1000, max_value=1000, allow_nan=False)
units = st.floats(min_value=0, max_value=1, allow_nan=False)


@given(st.integers(min_value=-(2**40), max_value=2**40))
def test_to_int32_in_range_and_congruent(value):
    wrapped = to_int32(value)
    assert -(2**31) <= wrapped <= 2**31 - 1
    assert (wrapped - value) % 2**32 == 0


def test_to_int32_wraps_int_max_plus_one():
    assert to_int32(INT_MAX + 1) == -INT_MAX - 1


def test_hash_primes_hb_of_one_is_multiplier():
    assert hash_primes_hb(1) == HASH_MULTIPLIER


def test_hash_of_zero_is_zero():
    assert hash_primes_hb(0, 0, 0) == 0
    assert hash_primes(0, 0, 0) == 0


@given(int32s, int32s, int32s)
def test_hash_is_order_independent_and_in_range(seed, a, b):
    assert hash_primes(seed, a, b) == hash_primes(seed, b, a)
    assert hash_primes_hb(seed, a, b) == hash_primes_hb(seed, b, a)
    assert -(2**31) <= hash_primes(seed, a, b) < 2**31


def test_hash_primes_differs_for_neighbouring_cells():
    first = hash_primes(1337, PRIME_X, PRIME_Y)
    second = hash_primes(1337, PRIME_X * 2, PRIME_Y)
    assert first != second


@given(int32s, int32s, int32s)
def test_value_coord_is_bounded(seed, a, b):
    value = get_value_coord(seed, a, b)
    assert -1.0 - 1e-9 <= value <= 1.0 + 1e-9


def test_value_coord_of_zero_is_zero():
    assert get_value_coord(0, 0) == 0.0


@given(floats, floats)
def test_lerp_endpoints(a, b):
    assert lerp(a, b, 0.0) == pytest.approx(a)
    assert lerp(a, b, 1.0) == pytest.approx(b, abs=1e-9)


@pytest.mark.parametrize("curve", [interp_hermite, interp_quintic])
def test_interp_endpoints(curve):
    assert curve(0.0) == 0.0
    assert curve(1.0) == 1.0


@pytest.mark.parametrize("curve", [interp_hermite, interp_quintic])
@given(t=units)
def test_interp_is_symmetric_and_bounded(curve, t):
    assert curve(t) + curve(1.0 - t) == pytest.approx(1.0, abs=1e-9)
    assert -1e-9 <= curve(t) <= 1.0 + 1e-9


@given(floats, floats, floats)
def test_distance_relations(dx, dy, dz):
    euclid = calc_distance(DistanceFunction.EUCLIDEAN, dx, dy, dz)
    squared = calc_distance(DistanceFunction.EUCLIDEAN_SQUARED, dx, dy, dz)
    manhattan = calc_distance(DistanceFunction.MANHATTAN, dx, dy, dz)
    hybrid = calc_distance(DistanceFunction.HYBRID, dx, dy, dz)
    max_axis = calc_distance(DistanceFunction.MAX_AXIS, dx, dy, dz)

    assert euclid * euclid == pytest.approx(squared, rel=1e-9, abs=1e-9)
    assert hybrid == pytest.approx(squared + manhattan, rel=1e-9, abs=1e-9)
    assert max_axis == max(abs(dx), abs(dy), abs(dz))
    assert max_axis <= euclid + 1e-9 <= manhattan + 2e-9


def test_distance_accepts_plain_int():
    assert calc_distance(2, -3.0, 4.0) == calc_distance(DistanceFunction.MANHATTAN, 3.0, -4.0)


def test_distance_rejects_unknown_function():
    with pytest.raises(ValueError):
        calc_distance(99, 1.0, 1.0)


def test_gradient_2d_values():
    expected = {1.0 + ROOT2, -(1.0 + ROOT2), 1.0, -1.0}
    for h in range(8):
        assert any(math.isclose(gradient_dot_2d(h, 1.0, 0.0), e) for e in expected)


@given(int32s)
def test_gradient_2d_zero_offset(h):
    assert gradient_dot_2d(h, 0.0, 0.0) == 0.0


@given(int32s)
def test_gradient_fancy_magnitudes(h):
    value = abs(gradient_dot_fancy(h, 1.0, 0.0))
    assert any(math.isclose(value, e, abs_tol=1e-12) for e in (ROOT3, 2.0, 1.0, 0.0))


@given(int32s)
def test_gradient_3d_on_diagonal(h):
    assert gradient_dot_3d(h, 1.0, 1.0, 1.0) in (-2.0, 0.0, 2.0)


@given(int32s, floats, floats, floats)
def test_gradient_3d_bounded(h, x, y, z):
    assert abs(gradient_dot_3d(h, x, y, z)) <= abs(x) + abs(y) + abs(z) + 1e-9


@given(int32s)
def test_gradient_4d_on_diagonal(h):
    assert gradient_dot_4d(h, 1.0, 1.0, 1.0, 1.0) in (-3.0, -1.0, 1.0, 3.0)


@given(int32s, floats, floats, floats, floats)
def test_gradient_4d_bounded(h, x, y, z, w):
    bound = abs(x) + abs(y) + abs(z) + abs(w)
    assert abs(gradient_dot_4d(h, x, y, z, w)) <= bound + 1e-9