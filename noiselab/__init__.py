"""Cellular noise generators, noise utilities, base64 codec and chunked mesh building."""

__version__ = "0.1.0"

__all__ = [
    "base64codec",
    "cellular",
    "cellular_distance",
    "cellular_lookup",
    "mesh",
    "preview",
    "utils",
]