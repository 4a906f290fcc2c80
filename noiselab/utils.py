"""Hashing, interpolation, gradient and distance helpers shared by noise generators.

All integer arithmetic follows signed 32-bit wrap-around semantics so that the
hash values match the ones produced by the vectorised generators.
"""

from __future__ import annotations

import math
import struct
from enum import IntEnum
from functools import reduce
from operator import xor

__all__ = [
    "DistanceFunction",
    "PRIME_X",
    "PRIME_Y",
    "PRIME_Z",
    "PRIME_W",
    "PRIMES",
    "HASH_MULTIPLIER",
    "INT_MAX",
    "ROOT2",
    "ROOT3",
    "to_int32",
    "hash_primes",
    "hash_primes_hb",
    "get_value_coord",
    "lerp",
    "interp_hermite",
    "interp_quintic",
    "calc_distance",
    "gradient_dot_2d",
    "gradient_dot_fancy",
    "gradient_dot_3d",
    "gradient_dot_4d",
]

PRIME_X = 501125321
PRIME_Y = 1136930381
PRIME_Z = 1720413743
PRIME_W = 1066037191
PRIMES = (PRIME_X, PRIME_Y, PRIME_Z, PRIME_W)

HASH_MULTIPLIER = 0x27D4EB2D
INT_MAX = 2147483647

ROOT2 = 1.4142135623730950488
ROOT3 = 1.7320508075688772935


class DistanceFunction(IntEnum):
    """How the distance between a point and a cell centre is measured."""

    EUCLIDEAN = 0
    EUCLIDEAN_SQUARED = 1
    MANHATTAN = 2
    HYBRID = 3
    MAX_AXIS = 4


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


_FANCY_SCALE = _f32(1.3333333333333333)


def to_int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _combine(seed: int, primed: tuple[int, ...]) -> int:
    return to_int32(reduce(xor, primed, seed))


def hash_primes(seed: int, *primed: int) -> int:
    """Hash a seed with pre-multiplied coordinates, mixing in the high bits."""
    value = to_int32(_combine(seed, primed) * HASH_MULTIPLIER)
    return to_int32((value >> 15) ^ value)


def hash_primes_hb(seed: int, *primed: int) -> int:
    """Hash a seed with pre-multiplied coordinates, keeping the high bits raw."""
    return to_int32(_combine(seed, primed) * HASH_MULTIPLIER)


def get_value_coord(seed: int, *primed: int) -> float:
    """Return a pseudo-random value in [-1, 1] for a lattice point."""
    value = _combine(seed, primed)
    value = to_int32(value * to_int32(value * HASH_MULTIPLIER))
    return float(value) * (1.0 / INT_MAX)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return t * (b - a) + a


def interp_hermite(t: float) -> float:
    """Cubic Hermite smoothing curve."""
    return t * t * (3.0 - t * 2.0)


def interp_quintic(t: float) -> float:
    """Quintic smoothing curve."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def calc_distance(func: DistanceFunction | int, dx: float, *others: float) -> float:
    """Distance of the offset vector ``(dx, *others)`` under ``func``."""
    func = DistanceFunction(func)
    components = (dx, *others)

    if func is DistanceFunction.EUCLIDEAN:
        return math.sqrt(sum(d * d for d in components))
    if func is DistanceFunction.EUCLIDEAN_SQUARED:
        return sum(d * d for d in components)
    if func is DistanceFunction.MANHATTAN:
        return sum(abs(d) for d in components)
    if func is DistanceFunction.HYBRID:
        return sum(d * d + abs(d) for d in components)
    return max(abs(d) for d in components)


def gradient_dot_2d(hash_value: int, fx: float, fy: float) -> float:
    """Dot product of a 2D offset with one of eight hashed gradients."""
    if hash_value & 1:
        fx = -fx
    if hash_value & 2:
        fy = -fy
    if hash_value & 4:
        a, b = fy, fx
    else:
        a, b = fx, fy
    return (1.0 + ROOT2) * a + b


def gradient_dot_fancy(hash_value: int, fx: float, fy: float) -> float:
    """Dot product of a 2D offset with one of sixteen evenly spread gradients."""
    index = round(_f32(float(hash_value & 0x3FFFFF) * _FANCY_SCALE))

    if index & 4:
        a, b = fy, fx
    else:
        a, b = fx, fy

    if index & 1:
        b = -b

    if index & 2:
        a *= 2.0
        b = 0.0
    else:
        a *= ROOT3

    result = a + b
    return -result if index & 8 else result


def gradient_dot_3d(hash_value: int, fx: float, fy: float, fz: float) -> float:
    """Dot product of a 3D offset with one of the twelve cube-edge gradients."""
    hasha13 = hash_value & 13

    u = fx if hasha13 < 8 else fy
    v = fx if hasha13 == 12 else fz
    if hasha13 < 2:
        v = fy

    if hash_value & 1:
        u = -u
    if hash_value & 2:
        v = -v
    return u + v


def gradient_dot_4d(hash_value: int, fx: float, fy: float, fz: float, fw: float) -> float:
    """Dot product of a 4D offset with one of thirty-two hashed gradients."""
    p = hash_value & (3 << 3)

    a = fx if p > 0 else fy
    b = fy if p > (1 << 3) else fz
    c = fz if p > (2 << 3) else fw

    if hash_value & 1:
        a = -a
    if hash_value & 2:
        b = -b
    if hash_value & 4:
        c = -c
    return a + b + c