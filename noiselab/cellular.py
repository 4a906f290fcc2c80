"""Cellular (Worley) noise: shared cell iteration and the value variant."""

from __future__ import annotations

import math
from itertools import product
from typing import Any, Iterator, Union

from noiselab.utils import (
    INT_MAX,
    PRIMES,
    DistanceFunction,
    calc_distance,
    hash_primes_hb,
    to_int32,
)

__all__ = ["Cellular", "CellularValue"]

HybridSource = Union[float, Any]

# Jitter scale, hash bits per axis and the mask for each axis, per dimension.
_JITTER = {2: 0.437016, 3: 0.396144, 4: 0.366025}
_AXIS_BITS = {2: 16, 3: 10, 4: 8}


class Cellular:
    """Base for cellular generators.

    The jitter modifier may be a number or a generator object providing
    ``gen_2d``/``gen_3d``/``gen_4d``; values above 1.0 cause grid artifacts.
    """

    def __init__(
        self,
        jitter_modifier: HybridSource = 1.0,
        distance_function: DistanceFunction | int = DistanceFunction.EUCLIDEAN_SQUARED,
    ) -> None:
        self.jitter_modifier: HybridSource = 1.0
        self.distance_function = DistanceFunction.EUCLIDEAN_SQUARED
        self.set_jitter_modifier(jitter_modifier)
        self.set_distance_function(distance_function)

    def set_jitter_modifier(self, value: HybridSource) -> None:
        """Set the jitter modifier to a constant or to a source generator."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            self.jitter_modifier = float(value)
        elif callable(getattr(value, "gen_2d", None)):
            self.jitter_modifier = value
        else:
            raise TypeError("jitter modifier must be a number or a generator")

    def set_distance_function(self, value: DistanceFunction | int) -> None:
        """Set how distance to the closest cells is calculated."""
        self.distance_function = DistanceFunction(value)

    @staticmethod
    def _source_value(source: HybridSource, seed: int, *coords: float) -> float:
        """Sample a hybrid source: a constant or a generator at ``coords``."""
        if isinstance(source, (int, float)):
            return float(source)
        generate = getattr(source, f"gen_{len(coords)}d")
        return float(generate(seed, *coords))

    def _cells(self, seed: int, coords: tuple[float, ...]) -> Iterator[tuple[tuple[float, ...], int]]:
        """Yield the jittered offset and hash of every neighbouring cell.

        Cells are visited over a 3^n block around the point, first axis outermost.
        """
        dims = len(coords)
        seed = to_int32(seed)
        jitter = _JITTER[dims] * self._source_value(self.jitter_modifier, seed, *coords)
        bits = _AXIS_BITS[dims]
        mask = (1 << bits) - 1
        half = mask / 2.0

        bases = [round(c) - 1 for c in coords]

        for steps in product(range(3), repeat=dims):
            cells = [base + step for base, step in zip(bases, steps)]
            primed = [to_int32(cell * prime) for cell, prime in zip(cells, PRIMES)]
            hash_value = hash_primes_hb(seed, *primed)

            raw = [float((hash_value >> (bits * axis)) & mask) - half for axis in range(dims)]
            inv_mag = jitter / math.sqrt(sum(d * d for d in raw))
            offset = tuple(
                d * inv_mag + (float(cell) - coord)
                for d, cell, coord in zip(raw, cells, coords)
            )
            yield offset, hash_value


class CellularValue(Cellular):
    """Returns the value of the Nth closest cell.

    The value is generated using white noise; output is bounded -1 : 1.
    """

    MAX_DISTANCE_COUNT = 4

    def __init__(
        self,
        jitter_modifier: HybridSource = 1.0,
        distance_function: DistanceFunction | int = DistanceFunction.EUCLIDEAN_SQUARED,
        value_index: int = 0,
    ) -> None:
        super().__init__(jitter_modifier, distance_function)
        self.value_index = 0
        self.set_value_index(value_index)

    def set_value_index(self, value: int) -> None:
        """Choose which closest cell supplies the value, clamped to 0..3."""
        self.value_index = min(max(int(value), 0), self.MAX_DISTANCE_COUNT - 1)

    def _generate(self, seed: int, coords: tuple[float, ...]) -> float:
        distances = [math.inf] * self.MAX_DISTANCE_COUNT
        values = [math.inf] * self.MAX_DISTANCE_COUNT
        depth = min(self.value_index + 2, self.MAX_DISTANCE_COUNT)

        for offset, hash_value in self._cells(seed, coords):
            new_value = float(hash_value) * (1.0 / INT_MAX)
            new_distance = calc_distance(self.distance_function, *offset)

            for i in range(depth):
                closer = new_distance < distances[i]
                old_distance, old_value = distances[i], values[i]
                if closer:
                    distances[i], values[i] = new_distance, new_value
                if i > self.value_index:
                    break
                if closer:
                    new_distance, new_value = old_distance, old_value

        return values[self.value_index]

    def gen_2d(self, seed: int, x: float, y: float) -> float:
        """Noise value at a 2D point."""
        return self._generate(seed, (x, y))

    def gen_3d(self, seed: int, x: float, y: float, z: float) -> float:
        """Noise value at a 3D point."""
        return self._generate(seed, (x, y, z))

    def gen_4d(self, seed: int, x: float, y: float, z: float, w: float) -> float:
        """Noise value at a 4D point."""
        return self._generate(seed, (x, y, z, w))