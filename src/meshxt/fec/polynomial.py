"""Polynomial helpers over GF(2^8).

Polynomials are sequences of coefficients, highest degree first. Addition and
subtraction are both XOR.
"""

from __future__ import annotations

from typing import List, Sequence

from .galois import gf_mul


def poly_add(p: Sequence[int], q: Sequence[int]) -> List[int]:
    size = max(len(p), len(q))
    result = [0] * size
    for i, coef in enumerate(p):
        result[i + size - len(p)] = coef
    for i, coef in enumerate(q):
        result[i + size - len(q)] ^= coef
    return result


def poly_mul(p: Sequence[int], q: Sequence[int]) -> List[int]:
    result = [0] * (len(p) + len(q) - 1)
    for i, a in enumerate(p):
        if a == 0:
            continue
        for j, b in enumerate(q):
            result[i + j] ^= gf_mul(a, b)
    return result


def poly_scale(p: Sequence[int], scalar: int) -> List[int]:
    return [gf_mul(coef, scalar) for coef in p]


def poly_eval(p: Sequence[int], x: int) -> int:
    """Evaluate *p* at *x* with Horner's rule."""

    result = p[0]
    for coef in p[1:]:
        result = gf_mul(result, x) ^ coef
    return result


def poly_formal_derivative(p: Sequence[int]) -> List[int]:
    """Return the formal derivative of *p*.

    In characteristic 2 the even-degree terms vanish, so the derivative keeps
    the odd-degree coefficients shifted down by one degree.
    """

    degree = len(p) - 1
    if degree < 1:
        return [0]
    result = []
    for i, coef in enumerate(p[:-1]):
        power = degree - i
        result.append(coef if power % 2 == 1 else 0)
    return result


def poly_trim(p: Sequence[int]) -> List[int]:
    """Drop leading zero coefficients, keeping at least one term."""

    start = 0
    while start < len(p) - 1 and p[start] == 0:
        start += 1
    return list(p[start:])


__all__ = [
    "poly_add",
    "poly_eval",
    "poly_formal_derivative",
    "poly_mul",
    "poly_scale",
    "poly_trim",
]
