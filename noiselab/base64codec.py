"""Base64 encoding used for serialised node trees.

Decoding is lenient in the same way the node-tree loader is: input whose
length is not a multiple of four yields no bytes, ``=`` counts as a zero
sextet wherever it appears, and unknown characters are not rejected.
"""

from __future__ import annotations

import base64
from typing import Iterable, Union

__all__ = ["encode", "decode"]

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_DECODING = {char: index for index, char in enumerate(_ALPHABET)}
_INVALID_SEXTET = 64


def encode(data: Union[bytes, bytearray, memoryview, Iterable[int]]) -> str:
    """Encode bytes as padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def _sextet(char: str) -> int:
    if char == "=":
        return 0
    return _DECODING.get(char, _INVALID_SEXTET)


def decode(text: Union[str, bytes]) -> bytes:
    """Decode base64 text; returns empty bytes for input of invalid length."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")

    length = len(text)
    out_len = length // 4 * 3
    if out_len == 0 or length % 4 != 0:
        return b""

    if text[-1] == "=":
        out_len -= 1
    if text[-2] == "=":
        out_len -= 1

    out = bytearray()
    for start in range(0, length, 4):
        a, b, c, d = (_sextet(char) for char in text[start:start + 4])
        triple = (a << 18) + (b << 12) + (c << 6) + d
        out.extend(((triple >> 16) & 0xFF, (triple >> 8) & 0xFF, triple & 0xFF))

    return bytes(out[:out_len])