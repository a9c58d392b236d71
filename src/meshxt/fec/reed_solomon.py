"""Reed-Solomon forward error correction over GF(2^8).

Blocks are systematic: the message symbols are followed by ``nsym`` parity
symbols and the whole codeword never exceeds 255 symbols. The generator
polynomial has consecutive roots ``alpha^0 .. alpha^(nsym-1)``.

Decoding follows the classic algebraic path: syndromes, Berlekamp-Massey for
the error locator, Chien search for the error positions and Forney's formula
for the magnitudes. Every correction is verified by recomputing the syndromes
before the message is returned; a codeword with more than ``nsym // 2`` symbol
errors is either rejected or, in rare cases, mis-corrected into another valid
codeword.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence, Tuple, Union

from ..exceptions import (
    BlockTooLargeError,
    LocatorMismatchError,
    TooManyErrorsError,
    TruncatedBlockError,
    UncorrectableError,
    VerificationFailedError,
)
from ..types import FECLevel
from .galois import FIELD_ORDER, GF_EXP, gf_div, gf_inverse, gf_mul, gf_pow
from .polynomial import (
    poly_add,
    poly_eval,
    poly_formal_derivative,
    poly_mul,
    poly_scale,
    poly_trim,
)

logger = logging.getLogger(__name__)

MAX_BLOCK_SIZE = FIELD_ORDER

LevelLike = Union[FECLevel, str, int]


@dataclass(frozen=True)
class RSDecodeResult:
    """Outcome of a successful decode."""

    message: bytes
    error_positions: Tuple[int, ...] = ()

    @property
    def errors_corrected(self) -> int:
        return len(self.error_positions)


@lru_cache(maxsize=None)
def generator_poly(nsym: int) -> Tuple[int, ...]:
    """Return ``prod(x - alpha^i for i in range(nsym))``."""

    gen: List[int] = [1]
    for i in range(nsym):
        gen = poly_mul(gen, [1, GF_EXP[i]])
    return tuple(gen)


def parity_bytes(level: LevelLike) -> int:
    return FECLevel.parse(level).parity_bytes


def max_correctable_errors(level: LevelLike) -> int:
    return FECLevel.parse(level).max_correctable_errors


def _parity(message: Sequence[int], nsym: int) -> bytes:
    gen = generator_poly(nsym)
    feedback = list(message) + [0] * nsym
    for i in range(len(message)):
        coef = feedback[i]
        if coef == 0:
            continue
        for j in range(1, len(gen)):
            feedback[i + j] ^= gf_mul(gen[j], coef)
    return bytes(feedback[len(message) :])


def calc_syndromes(block: Sequence[int], nsym: int) -> List[int]:
    return [poly_eval(block, GF_EXP[i]) for i in range(nsym)]


def _find_error_locator(synd: Sequence[int], nsym: int) -> List[int]:
    """Berlekamp-Massey: return the error locator, constant term last."""

    err_loc = [1]
    old_loc = [1]
    for i in range(nsym):
        delta = synd[i]
        for j in range(1, len(err_loc)):
            delta ^= gf_mul(err_loc[-(j + 1)], synd[i - j])
        old_loc = old_loc + [0]
        if delta != 0:
            if len(old_loc) > len(err_loc):
                new_loc = poly_scale(old_loc, delta)
                old_loc = poly_scale(err_loc, gf_inverse(delta))
                err_loc = new_loc
            err_loc = poly_add(err_loc, poly_scale(old_loc, delta))

    err_loc = poly_trim(err_loc)
    errors = len(err_loc) - 1
    if errors * 2 > nsym:
        raise TooManyErrorsError(errors=errors, capacity=nsym // 2)
    return err_loc


def _find_error_positions(err_loc: Sequence[int], length: int) -> List[int]:
    """Chien search over every symbol of a codeword of *length* symbols.

    The symbol at offset ``k`` is the coefficient of ``x^(length - 1 - k)``, so
    its locator is ``X = alpha^(length - 1 - k)`` and it is in error exactly when
    the locator polynomial vanishes at ``X^-1``.
    """

    expected = len(err_loc) - 1
    positions = []
    for power in range(length):
        if poly_eval(err_loc, gf_pow(2, -power)) == 0:
            positions.append(length - 1 - power)
    if len(positions) != expected:
        raise LocatorMismatchError(found=len(positions), expected=expected)
    return positions


def _correct_errors(
    block: Sequence[int],
    synd: Sequence[int],
    err_loc: Sequence[int],
    positions: Sequence[int],
) -> List[int]:
    """Apply Forney's formula at each located position."""

    nsym = len(synd)
    synd_poly = list(reversed(synd))
    err_eval = poly_mul(synd_poly, err_loc)[-nsym:]
    err_loc_prime = poly_formal_derivative(err_loc)

    corrected = list(block)
    for pos in positions:
        x = gf_pow(2, len(block) - 1 - pos)
        x_inv = gf_inverse(x)
        denominator = poly_eval(err_loc_prime, x_inv)
        if denominator == 0:
            raise UncorrectableError("Error locator derivative vanished at an error position")
        # First consecutive root is alpha^0, hence the extra factor X.
        magnitude = gf_mul(x, gf_div(poly_eval(err_eval, x_inv), denominator))
        corrected[pos] ^= magnitude
    return corrected


def rs_encode(message: bytes, level: LevelLike) -> bytes:
    """Return *message* followed by the parity symbols for *level*."""

    nsym = parity_bytes(level)
    data = bytes(message)
    if nsym == 0:
        return data
    if len(data) + nsym > MAX_BLOCK_SIZE:
        raise BlockTooLargeError(
            f"Data too long for RS({MAX_BLOCK_SIZE},{MAX_BLOCK_SIZE - nsym}): "
            f"{len(data)} bytes + {nsym} parity > {MAX_BLOCK_SIZE}"
        )
    return data + _parity(data, nsym)


def rs_decode_detailed(block: bytes, level: LevelLike) -> RSDecodeResult:
    """Correct *block* and return the message together with the fixed positions."""

    nsym = parity_bytes(level)
    data = bytes(block)
    if nsym == 0:
        return RSDecodeResult(message=data)
    if len(data) > MAX_BLOCK_SIZE:
        raise BlockTooLargeError(f"Block of {len(data)} symbols exceeds {MAX_BLOCK_SIZE}")
    if len(data) < nsym:
        raise TruncatedBlockError(
            f"Data too short: {len(data)} bytes but need at least {nsym} parity symbols"
        )

    synd = calc_syndromes(data, nsym)
    if not any(synd):
        return RSDecodeResult(message=data[: len(data) - nsym])

    err_loc = _find_error_locator(synd, nsym)
    positions = _find_error_positions(err_loc, len(data))
    corrected = _correct_errors(data, synd, err_loc, positions)

    if any(calc_syndromes(corrected, nsym)):
        raise VerificationFailedError("Correction failed: residual syndromes non-zero")

    logger.debug("Reed-Solomon corrected %d symbol(s) at %s", len(positions), sorted(positions))
    return RSDecodeResult(
        message=bytes(corrected[: len(corrected) - nsym]),
        error_positions=tuple(sorted(positions)),
    )


def rs_decode(block: bytes, level: LevelLike) -> bytes:
    """Correct *block* and return the message with the parity stripped."""

    return rs_decode_detailed(block, level).message


__all__ = [
    "MAX_BLOCK_SIZE",
    "RSDecodeResult",
    "calc_syndromes",
    "generator_poly",
    "max_correctable_errors",
    "parity_bytes",
    "rs_decode",
    "rs_decode_detailed",
    "rs_encode",
]
