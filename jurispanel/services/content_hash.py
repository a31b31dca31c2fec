"""
Content hasher for the extraction cache.

DJB2 variant: seed 5381, multiply by 33, XOR each UTF-16 code unit, kept to
32 bits. Not for integrity or security; collisions are accepted.
"""
from __future__ import annotations

_SEED = 5381
_MASK = 0xFFFFFFFF


def _utf16_units(text: str):
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def content_hash(text: str) -> str:
    """Unsigned 32-bit digest of *text*, lowercase hex without padding."""
    h = _SEED
    for unit in _utf16_units(text):
        h = ((h * 33) & _MASK) ^ unit
    return format(h & _MASK, "x")
