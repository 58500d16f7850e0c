"""Stateless 32-bit hashing used by every noise stream.

All arithmetic is carried out modulo 2**32 so results are identical on every
platform and match the reference 32-bit implementation bit for bit.
"""

from __future__ import annotations

from marketsim.types import SymbolSeed

MASK32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193

_MIX_SALT = 0xDEADBEEF
_MIX_GOLDEN = 0x9E3779B9
_MIX_AVALANCHE = 0x045D9F3B

_TWO_POW_32 = 4294967296.0


def imul32(a: int, b: int) -> int:
    """Multiply two integers and keep the low 32 bits (unsigned)."""
    return ((a & MASK32) * (b & MASK32)) & MASK32


def symbol_seed(symbol: str) -> SymbolSeed:
    """FNV-1a hash of a symbol's UTF-16 code units.

    :param symbol: Ticker symbol.
    :returns: Unsigned 32-bit seed.
    """
    data = symbol.encode("utf-16-le")
    h = FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = imul32(h ^ unit, FNV_PRIME)
    return SymbolSeed(h)


def mix2(a: int, b: int) -> float:
    """Mix two integers into a float in [0, 1).

    Two-round xorshift-multiply avalanche. Adjacent ``b`` values for a fixed
    ``a`` produce uncorrelated outputs. Negative inputs wrap as 32-bit ints.

    :param a: Stream key (usually ``seed ^ channel``).
    :param b: Position within the stream.
    :returns: Value in [0, 1).
    """
    x = (imul32(a ^ _MIX_SALT, _MIX_GOLDEN) + b) & MASK32
    x = imul32((x >> 16) ^ x, _MIX_AVALANCHE)
    x = imul32((x >> 16) ^ x, _MIX_AVALANCHE)
    return ((x >> 16) ^ x) / _TWO_POW_32


def signed_mix2(a: int, b: int) -> float:
    """Like :func:`mix2` but rescaled to [-1, 1)."""
    return mix2(a, b) * 2 - 1
