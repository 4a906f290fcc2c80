"""Cellular noise whose value is sampled from another generator at the cell centre."""

from __future__ import annotations

from typing import Any

from noiselab.cellular import Cellular, HybridSource
from noiselab.utils import DistanceFunction, calc_distance, to_int32

__all__ = ["CellularLookup"]

_FLT_MAX = 3.4028234663852886e38


class CellularLookup(Cellular):
    """Returns the value of the closest cell.

    The value is generated at the cell centre using the lookup source, at a
    frequency relative to the cellular frequency.
    """

    def __init__(
        self,
        lookup: Any = None,
        lookup_frequency: float = 0.1,
        jitter_modifier: HybridSource = 1.0,
        distance_function: DistanceFunction | int = DistanceFunction.EUCLIDEAN_SQUARED,
    ) -> None:
        super().__init__(jitter_modifier, distance_function)
        self.lookup: Any = None
        self.lookup_frequency = 0.1
        if lookup is not None:
            self.set_lookup(lookup)
        self.set_lookup_frequency(lookup_frequency)

    def set_lookup(self, source: Any) -> None:
        """Set the generator used to produce cell values."""
        if not callable(getattr(source, "gen_2d", None)):
            raise TypeError("lookup source must be a generator")
        self.lookup = source

    def set_lookup_frequency(self, frequency: float) -> None:
        """Set the lookup frequency relative to the cellular frequency."""
        self.lookup_frequency = float(frequency)

    def _generate(self, seed: int, coords: tuple[float, ...]) -> float:
        if self.lookup is None:
            raise ValueError("no lookup source has been set")

        distance = _FLT_MAX
        cell = coords
        for offset, _hash in self._cells(seed, coords):
            new_distance = calc_distance(self.distance_function, *offset)
            if new_distance < distance:
                cell = tuple(d + c for d, c in zip(offset, coords))
            distance = min(new_distance, distance)

        generate = getattr(self.lookup, f"gen_{len(coords)}d")
        scaled = (c * self.lookup_frequency for c in cell)
        return float(generate(to_int32(seed + 1), *scaled))

    def gen_2d(self, seed: int, x: float, y: float) -> float:
        """Noise value at a 2D point."""
        return self._generate(seed, (x, y))

    def gen_3d(self, seed: int, x: float, y: float, z: float) -> float:
        """Noise value at a 3D point."""
        return self._generate(seed, (x, y, z))

    def gen_4d(self, seed: int, x: float, y: float, z: float, w: float) -> float:
        """Noise value at a 4D point."""
        return self._generate(seed, (x, y, z, w))