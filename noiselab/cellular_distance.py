"""Cellular noise that returns distances to the closest cells."""

from __future__ import annotations

import math
from enum import IntEnum

from noiselab.cellular import Cellular, HybridSource
from noiselab.utils import DistanceFunction, calc_distance

__all__ = ["ReturnType", "CellularDistance"]


class ReturnType(IntEnum):
    """How the distances at the two chosen indices are combined."""

    INDEX0 = 0
    INDEX0_ADD1 = 1
    INDEX0_SUB1 = 2
    INDEX0_MUL1 = 3
    INDEX0_DIV1 = 4


class CellularDistance(Cellular):
    """Returns the distance of the Nth closest cell.

    The distances at ``distance_index0`` and ``distance_index1`` are combined
    according to the return type. The result is always positive except with
    ``INDEX0_SUB1`` when index 0 is further than index 1.
    """

    MAX_DISTANCE_COUNT = 4

    def __init__(
        self,
        jitter_modifier: HybridSource = 1.0,
        distance_function: DistanceFunction | int = DistanceFunction.EUCLIDEAN_SQUARED,
        distance_index0: int = 0,
        distance_index1: int = 1,
        return_type: ReturnType | int = ReturnType.INDEX0,
    ) -> None:
        super().__init__(jitter_modifier, distance_function)
        self.distance_index0 = 0
        self.distance_index1 = 1
        self.return_type = ReturnType.INDEX0
        self.set_distance_index0(distance_index0)
        self.set_distance_index1(distance_index1)
        self.set_return_type(return_type)

    def _clamp_index(self, value: int) -> int:
        return min(max(int(value), 0), self.MAX_DISTANCE_COUNT - 1)

    def set_distance_index0(self, value: int) -> None:
        """Choose the first closest-cell index, clamped to 0..3."""
        self.distance_index0 = self._clamp_index(value)

    def set_distance_index1(self, value: int) -> None:
        """Choose the second closest-cell index, clamped to 0..3."""
        self.distance_index1 = self._clamp_index(value)

    def set_return_type(self, value: ReturnType | int) -> None:
        """Set how index 0 and index 1 are combined."""
        self.return_type = ReturnType(value)

    def _generate(self, seed: int, coords: tuple[float, ...]) -> float:
        distances = [math.inf] * self.MAX_DISTANCE_COUNT

        for offset, _hash in self._cells(seed, coords):
            new_distance = calc_distance(self.distance_function, *offset)
            for i in range(self.MAX_DISTANCE_COUNT - 1, 0, -1):
                distances[i] = max(min(distances[i], new_distance), distances[i - 1])
            distances[0] = min(distances[0], new_distance)

        return self._combine(distances)

    def _combine(self, distances: list[float]) -> float:
        i0, i1 = self.distance_index0, self.distance_index1

        if self.distance_function is DistanceFunction.EUCLIDEAN:
            distances[i0] = math.sqrt(distances[i0])
            distances[i1] = math.sqrt(distances[i1])

        d0, d1 = distances[i0], distances[i1]
        if self.return_type is ReturnType.INDEX0_ADD1:
            return d0 + d1
        if self.return_type is ReturnType.INDEX0_SUB1:
            return d0 - d1
        if self.return_type is ReturnType.INDEX0_MUL1:
            return d0 * d1
        if self.return_type is ReturnType.INDEX0_DIV1:
            return d0 * (1.0 / d1 if d1 else math.inf)
        return d0

    def gen_2d(self, seed: int, x: float, y: float) -> float:
        """Noise value at a 2D point."""
        return self._generate(seed, (x, y))

    def gen_3d(self, seed: int, x: float, y: float, z: float) -> float:
        """Noise value at a 3D point."""
        return self._generate(seed, (x, y, z))

    def gen_4d(self, seed: int, x: float, y: float, z: float, w: float) -> float:
        """Noise value at a 4D point."""
        return self._generate(seed, (x, y, z, w))