"""Chunk meshing for the noise preview: voxel and heightmap meshes built from noise.

A chunk is a cube of ``size`` voxels along each axis, 128 by default. Voxel meshes
sample one voxel of padding around the chunk so that faces on the chunk border
and their ambient occlusion can be decided without the neighbouring chunks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import product
from typing import Any, Optional

__all__ = [
    "CHUNK_SIZE",
    "LIGHT_DIR",
    "AMBIENT_LIGHT",
    "AO_STRENGTH",
    "MeshType",
    "MinMax",
    "VertexData",
    "MeshData",
    "BuildData",
    "uniform_grid_2d",
    "uniform_grid_3d",
    "build_mesh_data",
    "build_voxel_3d_mesh",
    "build_heightmap_2d_mesh",
]

CHUNK_SIZE = 128
LIGHT_DIR = (3.0, 4.0, 2.0)
AMBIENT_LIGHT = 0.3
AO_STRENGTH = 0.6

Vec3 = tuple[float, float, float]


class MeshType(IntEnum):
    """Kind of mesh generated from the noise."""

    VOXEL_3D = 0
    HEIGHTMAP_2D = 1

    @property
    def label(self) -> str:
        """Human readable name shown in the preview's combo box."""
        return ("Voxel 3D", "Heightmap 2D")[self.value]


@dataclass
class MinMax:
    """Running minimum and maximum of generated noise values."""

    min: float = math.inf
    max: float = -math.inf

    def merge(self, other: "MinMax") -> "MinMax":
        """Widen this range to include ``other``; returns ``self``."""
        self.min = min(self.min, other.min)
        self.max = max(self.max, other.max)
        return self


@dataclass(frozen=True)
class VertexData:
    """A mesh vertex: world position and light level."""

    position: Vec3
    light: float

    @property
    def pos_light(self) -> tuple[float, float, float, float]:
        """Position and light packed as one four-component attribute."""
        return (*self.position, self.light)


@dataclass
class MeshData:
    """Result of meshing one chunk."""

    pos: tuple[int, int, int]
    min_max: MinMax = field(default_factory=MinMax)
    vertices: list[VertexData] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    min_air_y: float = math.inf
    max_solid_y: float = -math.inf

    def __post_init__(self) -> None:
        self.pos = tuple(int(c) for c in self.pos)
        self.vertices = list(self.vertices)
        self.indices = list(self.indices) if self.vertices else []

    @property
    def element_count(self) -> int:
        """Number of vertices drawn: indices when indexed, else raw vertices."""
        return len(self.indices) if self.indices else len(self.vertices)


@dataclass
class BuildData:
    """Everything a worker needs to mesh one chunk."""

    generator: Any = None
    pos: tuple[int, int, int] = (0, 0, 0)
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    frequency: float = 0.005
    iso_surface: float = 0.0
    heightmap_multiplier: float = 100.0
    seed: int = 1338
    mesh_type: MeshType = MeshType.VOXEL_3D
    gen_version: int = 0
    size: int = CHUNK_SIZE

    def __post_init__(self) -> None:
        self.pos = tuple(int(c) for c in self.pos)
        self.color = tuple(float(c) for c in self.color)
        self.mesh_type = MeshType(self.mesh_type)
        if self.size <= 0:
            raise ValueError("chunk size must be positive")


def _normalized(v: Vec3) -> Vec3:
    length = math.sqrt(sum(c * c for c in v))
    return tuple(c / length for c in v)


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return tuple(x - y for x, y in zip(a, b))


def _add(a: Vec3, b: Vec3) -> Vec3:
    return tuple(x + y for x, y in zip(a, b))


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length_sq(v: Vec3) -> float:
    return sum(c * c for c in v)


def _sun_light() -> Vec3:
    return tuple(c * (1.0 - AMBIENT_LIGHT) + AMBIENT_LIGHT for c in _normalized(LIGHT_DIR))


def _check_sizes(*sizes: int) -> None:
    if any(s <= 0 for s in sizes):
        raise ValueError("grid sizes must be positive")


def _value_range(values: list[float]) -> MinMax:
    return MinMax(min(values), max(values))


def uniform_grid_2d(
    generator: Any, x_start: int, y_start: int, x_size: int, y_size: int,
    frequency: float, seed: int,
) -> tuple[list[float], MinMax]:
    """Sample ``generator`` on a 2D integer grid, x varying fastest."""
    _check_sizes(x_size, y_size)
    values = [
        float(generator.gen_2d(seed, (x_start + x) * frequency, (y_start + y) * frequency))
        for y, x in product(range(y_size), range(x_size))
    ]
    return values, _value_range(values)


def uniform_grid_3d(
    generator: Any, x_start: int, y_start: int, z_start: int,
    x_size: int, y_size: int, z_size: int, frequency: float, seed: int,
) -> tuple[list[float], MinMax]:
    """Sample ``generator`` on a 3D integer grid, x fastest, then y, then z."""
    _check_sizes(x_size, y_size, z_size)
    values = [
        float(generator.gen_3d(
            seed,
            (x_start + x) * frequency,
            (y_start + y) * frequency,
            (z_start + z) * frequency,
        ))
        for z, y, x in product(range(z_size), range(y_size), range(x_size))
    ]
    return values, _value_range(values)


def _require_generator(build_data: BuildData) -> Any:
    if build_data.generator is None:
        raise ValueError("build data has no generator")
    return build_data.generator


def _quad_indices(base: int, rotation: int) -> list[int]:
    return [base, base + 3 - rotation, base + 2, base + 3, base + rotation, base + 1]


def _quad_ao(
    density: list[float], iso: float, idx: int, facing_offset: int,
    offset_a: int, offset_b: int, light: float,
    pos00: Vec3, pos01: Vec3, pos11: Vec3, pos10: Vec3, base: int,
) -> tuple[list[VertexData], list[int]]:
    """Build one face quad with per-corner ambient occlusion."""
    facing = idx + facing_offset

    def solid(offset: int) -> int:
        return int(density[facing + offset] <= iso)

    side_a0, side_a1 = solid(-offset_a), solid(offset_a)
    side_b0, side_b1 = solid(-offset_b), solid(offset_b)

    corner00 = int(bool(side_a0 & side_b0) or bool(solid(-offset_a - offset_b)))
    corner01 = int(bool(side_a0 & side_b1) or bool(solid(-offset_a + offset_b)))
    corner10 = int(bool(side_a1 & side_b0) or bool(solid(offset_a - offset_b)))
    corner11 = int(bool(side_a1 & side_b1) or bool(solid(offset_a + offset_b)))

    ao_adjust = AO_STRENGTH / 3.0
    ao00 = (side_a0 + side_b0 + corner00) * ao_adjust
    ao01 = (side_a1 + side_b0 + corner10) * ao_adjust
    ao10 = (side_a0 + side_b1 + corner01) * ao_adjust
    ao11 = (side_a1 + side_b1 + corner11) * ao_adjust

    shift = 1.0 - (iso - density[idx]) * 2.0
    light *= shift * shift

    vertices = [
        VertexData(pos00, (1.0 - ao00) * light),
        VertexData(pos01, (1.0 - ao01) * light),
        VertexData(pos10, (1.0 - ao10) * light),
        VertexData(pos11, (1.0 - ao11) * light),
    ]
    # Rotate the split so the diagonal follows the occlusion gradient.
    rotation = 2 if ao00 + ao11 > ao01 + ao10 else 0
    return vertices, _quad_indices(base, rotation)


def build_voxel_3d_mesh(build_data: BuildData) -> MeshData:
    """Mesh the solid voxels (density at or below the iso surface) of a chunk."""
    generator = _require_generator(build_data)
    size = build_data.size
    gen_size = size + 2
    px, py, pz = build_data.pos
    iso = build_data.iso_surface

    density, min_max = uniform_grid_3d(
        generator, px - 1, py - 1, pz - 1, gen_size, gen_size, gen_size,
        build_data.frequency, build_data.seed,
    )

    min_air = math.inf
    max_solid = -math.inf
    vertices: list[VertexData] = []
    indices: list[int] = []

    if min_max.min > iso:
        min_air = float(py)
    elif min_max.max < iso:
        max_solid = float(py) - 1.0 + size
    else:
        lx, ly, lz = (abs(c) for c in _sun_light())
        sx, sy, sz = 1, gen_size, gen_size * gen_size
        faces = (
            (sx, sy, sz, lx, ((1, 0, 0), (1, 1, 0), (1, 1, 1), (1, 0, 1))),
            (-sx, -sy, sz, 1.0 - lx, ((0, 1, 0), (0, 0, 0), (0, 0, 1), (0, 1, 1))),
            (sy, sz, sx, ly, ((0, 1, 0), (0, 1, 1), (1, 1, 1), (1, 1, 0))),
            (-sy, -sz, sx, 1.0 - ly, ((0, 0, 1), (0, 0, 0), (1, 0, 0), (1, 0, 1))),
            (sz, sx, sy, lz, ((0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1))),
            (-sz, -sx, sy, 1.0 - lz, ((1, 0, 0), (0, 0, 0), (0, 1, 0), (1, 1, 0))),
        )

        for z, y, x in product(range(size), repeat=3):
            idx = (x + 1) * sx + (y + 1) * sy + (z + 1) * sz
            xf, yf, zf = float(x + px), float(y + py), float(z + pz)

            if density[idx] > iso:
                min_air = min(yf, min_air)
                continue

            max_solid = max(yf, max_solid)
            for facing, offset_a, offset_b, light, corners in faces:
                if density[idx + facing] <= iso:
                    continue
                positions = [(xf + cx, yf + cy, zf + cz) for cx, cy, cz in corners]
                quad_vertices, quad_indices = _quad_ao(
                    density, iso, idx, facing, offset_a, offset_b, light,
                    *positions, len(vertices),
                )
                vertices.extend(quad_vertices)
                indices.extend(quad_indices)

    return MeshData(build_data.pos, min_max, vertices, indices, min_air, max_solid)


def build_heightmap_2d_mesh(build_data: BuildData) -> MeshData:
    """Mesh a heightmap over the chunk's x/z square, heights scaled by the multiplier."""
    generator = _require_generator(build_data)
    size = build_data.size
    gen_size = size + 1
    px, _, pz = build_data.pos
    mult = build_data.heightmap_multiplier

    heights, min_max = uniform_grid_2d(
        generator, px, pz, gen_size, gen_size, build_data.frequency, build_data.seed,
    )
    sun = _sun_light()

    vertices: list[VertexData] = []
    indices: list[int] = []

    for y, x in product(range(size), repeat=2):
        idx = x + y * gen_size
        xf, yf = float(x + px), float(y + pz)

        v00 = (xf, heights[idx] * mult, yf)
        v01 = (xf, heights[idx + gen_size] * mult, yf + 1.0)
        v10 = (xf + 1.0, heights[idx + 1] * mult, yf)
        v11 = (xf + 1.0, heights[idx + 1 + gen_size] * mult, yf + 1.0)

        normal = _normalized(_add(
            _normalized(_cross(_sub(v10, v11), _sub(v00, v11))),
            _normalized(_cross(_sub(v01, v00), _sub(v11, v00))),
        ))
        light = _length_sq(tuple(s * n for s, n in zip(sun, normal)))

        base = len(vertices)
        vertices.extend(VertexData(v, light) for v in (v00, v01, v10, v11))

        # Split the quad along its longest diagonal.
        rotation = 2 if _length_sq(_add(v00, v11)) < _length_sq(_add(v01, v10)) else 0
        indices.extend(_quad_indices(base, rotation))

    return MeshData(build_data.pos, min_max, vertices, indices)


def build_mesh_data(build_data: BuildData) -> MeshData:
    """Mesh a chunk according to its mesh type."""
    if build_data.mesh_type is MeshType.VOXEL_3D:
        return build_voxel_3d_mesh(build_data)
    if build_data.mesh_type is MeshType.HEIGHTMAP_2D:
        return build_heightmap_2d_mesh(build_data)
    return MeshData(build_data.pos)