import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from noiselab.cellular import Cellular, CellularValue
from noiselab.utils import INT_MAX, PRIME_X, PRIME_Y, PRIME_Z, DistanceFunction, hash_primes_hb, to_int32


class _ZeroSource:
    def gen_2d(self, seed, x, y):
        return 0.0

    def gen_3d(self, seed, x, y, z):
        return 0.0

    def gen_4d(self, seed, x, y, z, w):
        return 0.0


coords = st.floats(min_value=-1000, max_value=1000, allow_nan=False)
seeds = st.integers(min_value=-(2**31), max_value=2**31 - 1)


def _is_hash_value(value):
    scaled = value * INT_MAX
    return abs(scaled - round(scaled)) < 1e-3


def test_defaults():
    node = CellularValue()
    assert node.value_index == 0
    assert node.jitter_modifier == 1.0
    assert node.distance_function is DistanceFunction.EUCLIDEAN_SQUARED


@pytest.mark.parametrize("given_index, expected", [(-5, 0), (0, 0), (2, 2), (3, 3), (10, 3)])
def test_value_index_is_clamped(given_index, expected):
    node = CellularValue()
    node.set_value_index(given_index)
    assert node.value_index == expected


def test_invalid_distance_function_raises():
    with pytest.raises(ValueError):
        Cellular().set_distance_function(99)


def test_invalid_jitter_modifier_raises():
    with pytest.raises(TypeError):
        Cellular().set_jitter_modifier("wobbly")


def test_set_distance_function_accepts_int():
    node = CellularValue()
    node.set_distance_function(2)
    assert node.distance_function is DistanceFunction.MANHATTAN


def test_deterministic():
    first = CellularValue().gen_3d(1337, 1.25, -3.5, 7.75)
    second = CellularValue().gen_3d(1337, 1.25, -3.5, 7.75)
    assert first == second
    assert -1.0 - 1e-6 <= first <= 1.0 + 1e-6


def test_zero_jitter_picks_nearest_lattice_point_2d():
    node = CellularValue(jitter_modifier=0.0)
    expected = hash_primes_hb(42, to_int32(0 * PRIME_X), to_int32(3 * PRIME_Y)) / INT_MAX
    assert node.gen_2d(42, 0.2, 3.1) == pytest.approx(expected)


def test_zero_jitter_picks_nearest_lattice_point_3d():
    node = CellularValue(jitter_modifier=0.0)
    expected = hash_primes_hb(
        7, to_int32(2 * PRIME_X), to_int32(-1 * PRIME_Y), to_int32(5 * PRIME_Z)
    ) / INT_MAX
    assert node.gen_3d(7, 2.1, -0.9, 5.3) == pytest.approx(expected)


def test_generator_jitter_source_matches_constant():
    constant = CellularValue(jitter_modifier=0.0)
    sourced = CellularValue()
    sourced.set_jitter_modifier(_ZeroSource())
    for point in [(0.3, 0.4), (10.7, -2.2), (-5.5, 8.1)]:
        assert sourced.gen_2d(3, *point) == constant.gen_2d(3, *point)
    assert sourced.gen_4d(3, 1.1, 2.2, 3.3, 4.4) == constant.gen_4d(3, 1.1, 2.2, 3.3, 4.4)


def test_seed_changes_output():
    node = CellularValue()
    points = [(i * 0.37, i * -0.53) for i in range(20)]
    a = [node.gen_2d(1, *p) for p in points]
    b = [node.gen_2d(2, *p) for p in points]
    assert a != b


def test_value_indices_differ_somewhere():
    first = CellularValue(value_index=0)
    second = CellularValue(value_index=1)
    points = [(i * 0.61, i * 0.29, -i * 0.17) for i in range(20)]
    assert [first.gen_3d(5, *p) for p in points] != [second.gen_3d(5, *p) for p in points]


@settings(max_examples=50)
@given(seeds, coords, coords)
def test_2d_output_bounded(seed, x, y):
    value = CellularValue().gen_2d(seed, x, y)
    assert -1.0 - 1e-6 <= value <= 1.0 + 1e-6
    assert _is_hash_value(value)


@settings(max_examples=30)
@given(seeds, coords, coords, coords, st.integers(min_value=0, max_value=3))
def test_3d_output_is_a_cell_value(seed, x, y, z, index):
    node = CellularValue(value_index=index)
    value = node.gen_3d(seed, x, y, z)
    assert math.isfinite(value)
    assert -1.0 - 1e-6 <= value <= 1.0 + 1e-6
    scaled = value * INT_MAX
    assert abs(scaled - round(scaled)) < 1e-3


@settings(max_examples=20)
@given(seeds, coords, coords, coords, coords, st.sampled_from(list(DistanceFunction)))
def test_4d_output_bounded_for_all_distances(seed, x, y, z, w, func):
    node = CellularValue(distance_function=func)
    value = node.gen_4d(seed, x, y, z, w)
    assert -1.0 - 1e-6 <= value <= 1.0 + 1e-6


def test_cells_visits_full_neighbourhood():
    node = Cellular()
    assert len(list(node._cells(0, (0.5, 0.5)))) == 9
    assert len(list(node._cells(0, (0.5, 0.5, 0.5)))) == 27
    assert len(list(node._cells(0, (0.5, 0.5, 0.5, 0.5)))) == 81