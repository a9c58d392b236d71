"""Forward error correction: GF(2^8) arithmetic and Reed-Solomon codes."""

from .galois import gf_div, gf_inverse, gf_mul, gf_pow, gf_tables
from .polynomial import poly_eval, poly_mul, poly_scale
from .reed_solomon import (
    RSDecodeResult,
    calc_syndromes,
    generator_poly,
    max_correctable_errors,
    parity_bytes,
    rs_decode,
    rs_decode_detailed,
    rs_encode,
)

__all__ = [
    "RSDecodeResult",
    "calc_syndromes",
    "generator_poly",
    "gf_div",
    "gf_inverse",
    "gf_mul",
    "gf_pow",
    "gf_tables",
    "max_correctable_errors",
    "parity_bytes",
    "poly_eval",
    "poly_mul",
    "poly_scale",
    "rs_decode",
    "rs_decode_detailed",
    "rs_encode",
]
