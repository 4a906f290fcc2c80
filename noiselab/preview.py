"""Streaming chunk preview of a noise generator.

Chunks around a camera position are queued for meshing on worker threads,
collected as they complete and unloaded once they fall out of range. The load
range shrinks while the triangle count is over its limit and grows while there
is spare capacity. Settings can be written to and read from an ini-style
section.
"""

from __future__ import annotations

import math
import os
import re
import threading
import time
from collections import deque
from dataclasses import replace
from typing import Any, Deque, Generic, Iterable, Optional, TypeVar

from noiselab.mesh import (
    CHUNK_SIZE,
    BuildData,
    MeshData,
    MeshType,
    MinMax,
    build_mesh_data,
)
from noiselab.utils import to_int32

__all__ = ["SETTINGS_TYPE_NAME", "scroll_combo", "MeshNoisePreview"]

SETTINGS_TYPE_NAME = "NoiseToolMeshNoisePreview"

_T = TypeVar("_T")
Vec3 = tuple[float, float, float]
Vec3i = tuple[int, int, int]


def scroll_combo(index: int, count: int, wheel: float) -> tuple[int, bool]:
    """Step a combo selection with the mouse wheel.

    Scrolling down (negative wheel) selects the next entry, scrolling up the
    previous one. Returns the new index and whether it changed.
    """
    if wheel < 0 and index < count - 1:
        return index + 1, True
    if wheel > 0 and index > 0:
        return index - 1, True
    return index, False


class _GenerateQueue(Generic[_T]):
    """Blocking work queue shared by the meshing threads."""

    def __init__(self) -> None:
        self._items: Deque[_T] = deque()
        self._cond = threading.Condition()
        self._killed = False

    def push(self, item: _T) -> int:
        with self._cond:
            self._items.append(item)
            self._cond.notify()
            return len(self._items)

    def pop(self) -> Optional[_T]:
        """Wait for an item; returns None once the queue has been killed."""
        with self._cond:
            while not self._items and not self._killed:
                self._cond.wait()
            if self._killed:
                return None
            return self._items.popleft()

    def clear(self) -> None:
        with self._cond:
            self._items.clear()

    def kill(self) -> None:
        with self._cond:
            self._killed = True
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)


class _CompleteQueue(Generic[_T]):
    """Results queue that rejects items built for an outdated generation."""

    def __init__(self) -> None:
        self._items: Deque[_T] = deque()
        self._lock = threading.Lock()
        self._version = 0

    def inc_version(self) -> int:
        with self._lock:
            self._version += 1
            return self._version

    def push(self, item: _T, version: int) -> bool:
        with self._lock:
            if version != self._version:
                return False
            self._items.append(item)
            return True

    def pop(self) -> Optional[_T]:
        with self._lock:
            return self._items.popleft() if self._items else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def _dist_sq(a: Iterable[float], b: Iterable[float]) -> float:
    return sum((x - y) * (x - y) for x, y in zip(a, b))


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // b
    return quotient if a >= 0 else -quotient


def _to_srgb(v: float) -> float:
    return 12.92 * v if v <= 0.0031308 else 1.055 * v ** (1.0 / 2.4) - 0.055


def _from_srgb(v: float) -> float:
    return v / 12.92 if v <= 0.04045 else ((v + 0.055) / 1.055) ** 2.4


def _color_to_srgb_int(color: Iterable[float]) -> int:
    packed = 0
    for component in color:
        srgb = min(max(_to_srgb(component), 0.0), 1.0)
        packed = (packed << 8) | int(round(srgb * 255.0))
    return packed


def _color_from_srgb_int(value: int) -> tuple[float, float, float]:
    channels = ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    return tuple(_from_srgb(c / 255.0) for c in channels)


_INT_PATTERN = r"\s*([+-]?\d+)"
_FLOAT_PATTERN = (
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?"
    r"|[iI][nN][fF](?:[iI][nN][iI][tT][yY])?|[nN][aA][nN]))"
)


def _scan_int(line: str, key: str) -> Optional[int]:
    match = re.match(re.escape(key) + "=" + _INT_PATTERN, line)
    return int(match.group(1)) if match else None


def _scan_float(line: str, key: str) -> Optional[float]:
    match = re.match(re.escape(key) + "=" + _FLOAT_PATTERN, line)
    return float(match.group(1)) if match else None


def _default_thread_count() -> int:
    count = max(2, os.cpu_count() or 1)
    return count - count // 4


class MeshNoisePreview:
    """Loads and meshes chunks of a noise generator around a moving position."""

    def __init__(
        self,
        generator: Any = None,
        thread_count: Optional[int] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if thread_count is None:
            thread_count = _default_thread_count()
        if thread_count < 1:
            raise ValueError("at least one meshing thread is required")
        if chunk_size <= 0:
            raise ValueError("chunk size must be positive")

        self.chunk_size = chunk_size
        self.build_data = BuildData(generator=generator, size=chunk_size)
        self.enabled = True
        self.load_range = 300.0
        self.avg_new_chunks = 1.0
        self.tri_limit = 35_000_000
        self.tri_count = 0
        self.meshes_count = 0
        self.stagger_check = 0
        self.min_max = MinMax()
        self.min_air_y = math.inf
        self.max_solid_y = -math.inf

        self.registered_chunk_positions: set[Vec3i] = set()
        self.chunks: list[MeshData] = []

        self._generate_queue: _GenerateQueue[BuildData] = _GenerateQueue()
        self._complete_queue: _CompleteQueue[MeshData] = _CompleteQueue()
        self._timer_start = time.perf_counter()
        self._threads = [
            threading.Thread(target=self._generate_loop, daemon=True)
            for _ in range(thread_count)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> "MeshNoisePreview":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def thread_count(self) -> int:
        """Number of meshing threads."""
        return len(self._threads)

    @property
    def active(self) -> bool:
        """True when a generator is set and the preview is enabled."""
        return self.build_data.generator is not None and self.enabled

    @property
    def pending_count(self) -> int:
        """Chunks waiting in the generate queue."""
        return len(self._generate_queue)

    def close(self) -> None:
        """Stop and join the meshing threads."""
        self._generate_queue.kill()
        for thread in self._threads:
            thread.join()

    def regenerate(self, generator: Any) -> None:
        """Switch to ``generator`` and discard every loaded and queued chunk."""
        self.load_range = 200.0
        self.build_data.generator = generator
        self.build_data.pos = (0, 0, 0)

        self.min_max = MinMax()
        self.min_air_y = math.inf
        self.max_solid_y = -math.inf

        self.registered_chunk_positions.clear()
        self.chunks.clear()
        self._generate_queue.clear()
        self.build_data.gen_version = self._complete_queue.inc_version()

        while self._complete_queue.pop() is not None:
            pass

    def load_range_modifier(self) -> float:
        """Fraction by which the load range grows or shrinks per update."""
        return min(0.01, 1000.0 / math.pow(min(1000.0, self.load_range), 1.5))

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self._timer_start) * 1000.0

    def update_chunk_queues(self, position: Iterable[float]) -> None:
        """Collect finished chunks, unload distant ones and adapt the load range."""
        if not self.active:
            return

        size = self.chunk_size
        queue_count = len(self._complete_queue)

        if self.tri_count > self.tri_limit:
            self.load_range = max(
                self.load_range * (1.0 - self.load_range_modifier()), size * 1.5
            )

        self._timer_start = time.perf_counter()
        chunk_pos = tuple(int(p - size / 2.0) for p in position)

        if queue_count:
            new_chunks = 0
            while self._elapsed_ms() < 14:
                mesh_data = self._complete_queue.pop()
                if mesh_data is None:
                    break
                self.min_max.merge(mesh_data.min_max)
                self.min_air_y = min(self.min_air_y, mesh_data.min_air_y)
                self.max_solid_y = max(self.max_solid_y, mesh_data.max_solid_y)
                self.chunks.append(mesh_data)
                new_chunks += 1
            self.avg_new_chunks += (new_chunks - self.avg_new_chunks) * 0.01

        self.chunks.sort(key=lambda chunk: _dist_sq(chunk_pos, chunk.pos))

        unload_range = self.load_range * 1.1
        while self.chunks:
            back_pos = self.chunks[-1].pos
            if self._elapsed_ms() < 15 and _dist_sq(chunk_pos, back_pos) > unload_range * unload_range:
                self.registered_chunk_positions.discard(back_pos)
                self.chunks.pop()
            else:
                break

        meshing = len(self.registered_chunk_positions) - len(self.chunks)
        if (
            self.tri_count < self.tri_limit * 0.85
            and meshing < self.thread_count * self.avg_new_chunks
        ):
            self.load_range = min(
                self.load_range * (1.0 + self.load_range_modifier()), 3000.0
            )

        meshes = [chunk for chunk in self.chunks if chunk.vertices]
        self.meshes_count = len(meshes)
        self.tri_count = sum(chunk.element_count for chunk in meshes) // 3

    def update_chunks_for_position(self, position: Iterable[float]) -> None:
        """Queue unregistered chunks within the load range, nearest first."""
        if not self.active:
            return

        size = self.chunk_size
        chunk_range = int(math.ceil(self.load_range / size))
        position_i = [int(p - size * 0.5) for p in position]
        center = [_trunc_div(p, size) * size for p in position_i]

        load_range_sq = int(self.load_range * self.load_range)
        stagger_shift = min(5, (load_range_sq * int(self.load_range)) // 1_000_000_000)
        stagger_count = (1 << stagger_shift) - 1

        heightmap = self.build_data.mesh_type is MeshType.HEIGHTMAP_2D
        if heightmap:
            position_i[1] = 0
            ys = [0]
        else:
            ys = [y * size + center[1] for y in range(-chunk_range, chunk_range + 1)]

        origin = tuple(position_i)
        candidates: list[Vec3i] = []
        for x in range(-chunk_range, chunk_range + 1):
            if (x & stagger_count) != (self.stagger_check & stagger_count):
                continue
            cx = x * size + center[0]
            for cy in ys:
                for z in range(-chunk_range, chunk_range + 1):
                    pos = (cx, cy, z * size + center[2])
                    if (
                        _dist_sq(origin, pos) <= load_range_sq
                        and pos not in self.registered_chunk_positions
                    ):
                        candidates.append(pos)

        self.stagger_check += 1
        candidates.sort(key=lambda pos: _dist_sq(origin, pos))

        limit = self.thread_count * 16
        for pos in candidates:
            self.build_data.pos = pos
            self.registered_chunk_positions.add(pos)
            if self._generate_queue.push(replace(self.build_data)) >= limit:
                break

    def _generate_loop(self) -> None:
        while True:
            build_data = self._generate_queue.pop()
            if build_data is None:
                return
            mesh_data = build_mesh_data(build_data)
            self._complete_queue.push(mesh_data, build_data.gen_version)

    def write_settings(self) -> str:
        """Serialise the persistent settings as an ini-style section."""
        data = self.build_data
        lines = [
            f"tri_limit={to_int32(self.tri_limit)}",
            f"frequency={data.frequency:f}",
            f"iso_surface={data.iso_surface:f}",
            f"heightmap_multiplier={data.heightmap_multiplier:f}",
            f"seed={data.seed}",
            f"color={_color_to_srgb_int(data.color)}",
            f"mesh_type={int(data.mesh_type)}",
            f"enabled={int(self.enabled)}",
        ]
        return f"\n[{SETTINGS_TYPE_NAME}][Settings]\n" + "".join(f"{line}\n" for line in lines)

    def read_settings_line(self, line: str) -> None:
        """Apply one ``key=value`` settings line; unknown lines are ignored."""
        data = self.build_data

        value = _scan_int(line, "tri_limit")
        if value is not None:
            self.tri_limit = value & 0xFFFFFFFF
        number = _scan_float(line, "frequency")
        if number is not None:
            data.frequency = number
        number = _scan_float(line, "iso_surface")
        if number is not None:
            data.iso_surface = number
        number = _scan_float(line, "heightmap_multiplier")
        if number is not None:
            data.heightmap_multiplier = number
        value = _scan_int(line, "seed")
        if value is not None:
            data.seed = to_int32(value)
        value = _scan_int(line, "mesh_type")
        if value is not None and value in MeshType._value2member_map_:
            data.mesh_type = MeshType(value)

        value = _scan_int(line, "color")
        if value is not None:
            data.color = _color_from_srgb_int(value)
        else:
            value = _scan_int(line, "enabled")
            if value is not None:
                self.enabled = bool(value)