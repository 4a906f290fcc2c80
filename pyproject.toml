[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "noiselab"
version = "0.1.0"
description = "Cellular noise generators, hashing utilities and chunked voxel/heightmap mesh building for noise previews"
requires-python = ">=3.10"
dependencies = []
keywords = ["noise", "cellular", "worley", "voronoi", "voxel", "heightmap", "mesh", "procedural"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["noiselab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
