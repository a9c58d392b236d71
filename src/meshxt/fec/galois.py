"""Arithmetic over GF(2^8) using exponent/logarithm tables.

The field is generated by the primitive polynomial ``x^8 + x^4 + x^3 + x^2 + 1``
(``0x11D``) with ``alpha = 2``, the same field used by QR codes and DVB.
"""

from __future__ import annotations

from functools import lru_cache
from typing import NamedTuple, Tuple

from ..exceptions import GFZeroDivisionError

PRIM_POLY = 0x11D
GENERATOR = 2
FIELD_ORDER = 255


class GaloisTables(NamedTuple):
    exp: Tuple[int, ...]
    log: Tuple[int, ...]


@lru_cache(maxsize=None)
def gf_tables() -> GaloisTables:
    """Return the exponent and logarithm tables, building them on first use.

    The exponent table holds 512 entries so that the sum of two logarithms can
    index it directly without reducing modulo 255.
    """

    exp = [0] * 512
    log = [0] * 256
    x = 1
    for power in range(FIELD_ORDER):
        exp[power] = x
        log[x] = power
        x <<= 1
        if x & 0x100:
            x ^= PRIM_POLY
    for power in range(FIELD_ORDER, 512):
        exp[power] = exp[power - FIELD_ORDER]
    return GaloisTables(tuple(exp), tuple(log))


GF_EXP, GF_LOG = gf_tables()


def gf_mul(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return GF_EXP[GF_LOG[a] + GF_LOG[b]]


def gf_div(a: int, b: int) -> int:
    if b == 0:
        raise GFZeroDivisionError("Division by zero in GF(2^8)")
    if a == 0:
        return 0
    return GF_EXP[(GF_LOG[a] + FIELD_ORDER - GF_LOG[b]) % FIELD_ORDER]


def gf_pow(a: int, n: int) -> int:
    """Raise *a* to the integer power *n*; negative powers need ``a != 0``."""

    if a == 0:
        if n < 0:
            raise GFZeroDivisionError("Zero has no multiplicative inverse in GF(2^8)")
        return 1 if n == 0 else 0
    return GF_EXP[(GF_LOG[a] * n) % FIELD_ORDER]


def gf_inverse(a: int) -> int:
    if a == 0:
        raise GFZeroDivisionError("Zero has no multiplicative inverse in GF(2^8)")
    return GF_EXP[FIELD_ORDER - GF_LOG[a]]


__all__ = [
    "FIELD_ORDER",
    "GENERATOR",
    "GF_EXP",
    "GF_LOG",
    "GaloisTables",
    "PRIM_POLY",
    "gf_div",
    "gf_inverse",
    "gf_mul",
    "gf_pow",
    "gf_tables",
]
