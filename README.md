# noiselab

Cellular noise generators, lattice hashing helpers and a chunked mesh
builder for previewing noise as voxel terrain or as a heightmap.

## Modules

- `noiselab.utils`: signed 32-bit wrapping (`to_int32`), hashing of
  pre-multiplied lattice coordinates (`hash_primes`, `hash_primes_hb`,
  `get_value_coord`), interpolation curves (`lerp`, `interp_hermite`,
  `interp_quintic`), gradient dot products (`gradient_dot_2d`,
  `gradient_dot_fancy`, `gradient_dot_3d`, `gradient_dot_4d`) and
  `calc_distance` for every member of `DistanceFunction` (`EUCLIDEAN`,
  `EUCLIDEAN_SQUARED`, `MANHATTAN`, `HYBRID`, `MAX_AXIS`).
- `noiselab.base64codec`: `encode` bytes to padded base64 text and `decode`
  it back. Decoding is lenient: input whose length is not a multiple of four
  gives empty bytes, and `=` counts as a zero sextet wherever it appears.
- `noiselab.cellular`: the `Cellular` base class (jitter modifier and
  distance function) and `CellularValue`, which returns the white-noise value
  of the Nth closest cell, with the index clamped to 0..3.
- `noiselab.cellular_distance`: `CellularDistance`, which combines the
  distances to two of the closest cells according to a `ReturnType`
  (`INDEX0`, `INDEX0_ADD1`, `INDEX0_SUB1`, `INDEX0_MUL1`, `INDEX0_DIV1`).
- `noiselab.cellular_lookup`: `CellularLookup`, which samples a lookup
  generator at the centre of the closest cell, scaled by
  `lookup_frequency`. Generating without a lookup source raises
  `ValueError`.
- `noiselab.mesh`: `BuildData`, `MeshData`, `VertexData`, `MinMax` and
  `MeshType`; `uniform_grid_2d` and `uniform_grid_3d` sample any generator
  on an integer grid; `build_mesh_data` dispatches to
  `build_voxel_3d_mesh` (solid voxel faces with per-corner ambient
  occlusion) or `build_heightmap_2d_mesh`.
- `noiselab.preview`: `MeshNoisePreview`, which queues chunks around a
  position for meshing on worker threads, collects finished chunks, unloads
  distant ones and adapts its load range to a triangle limit. It writes its
  settings as an ini-style section (`write_settings`) and reads them back one
  line at a time (`read_settings_line`). `scroll_combo` steps a selection
  index by mouse-wheel direction.

Every generator offers `gen_2d`, `gen_3d` and `gen_4d`, each taking a seed
followed by the coordinates. Anything with those methods can serve as a
jitter modifier, a lookup source or the generator of a mesh.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from noiselab.cellular import CellularValue
from noiselab.cellular_distance import CellularDistance, ReturnType
from noiselab.utils import DistanceFunction

value = CellularValue()
value.set_value_index(1)
print(value.gen_2d(1337, 0.5, 2.25))

distance = CellularDistance()
distance.set_distance_function(DistanceFunction.EUCLIDEAN)
distance.set_return_type(ReturnType.INDEX0_SUB1)
print(distance.gen_3d(1337, 1.0, 2.0, 3.0))
```

Meshes are built from a `BuildData` description. Chunks are 128 voxels wide
by default; a smaller `size` keeps the example quick:

```python
from noiselab.mesh import BuildData, MeshType, build_mesh_data

data = BuildData(generator=value, mesh_type=MeshType.HEIGHTMAP_2D, size=16)
mesh = build_mesh_data(data)
print(len(mesh.vertices), len(mesh.indices), mesh.min_max)
```

Streaming chunks around a position:

```python
from noiselab.preview import MeshNoisePreview

with MeshNoisePreview(generator=value, thread_count=2, chunk_size=16) as preview:
    preview.update_chunks_for_position((0.0, 0.0, 0.0))
    preview.update_chunk_queues((0.0, 0.0, 0.0))
    print(len(preview.chunks), preview.tri_count, preview.load_range)
    print(preview.write_settings())
```

Leaving the `with` block, or calling `close`, stops the worker threads.

## What it does not do

The package produces vertex and index lists only: it draws nothing and has
no window, camera or settings screen. The preview's settings are exchanged
as text; storing them in a file is up to the caller. Cellular noise is the
only noise family included, and there is no loader that turns a base64
string into a tree of generators; `base64codec` only converts between text
and bytes.