import numpy as np
import pytest

from meshxt.exceptions import (
    BlockTooLargeError,
    FormatError,
    TruncatedBlockError,
    UncorrectableError,
    ValidationError,
)
from meshxt.fec import (
    calc_syndromes,
    generator_poly,
    max_correctable_errors,
    parity_bytes,
    rs_decode,
    rs_decode_detailed,
    rs_encode,
)
from meshxt.fec.galois import GF_EXP
from meshxt.fec.polynomial import poly_eval
from meshxt.types import FECLevel


def _corrupt(block: bytes, positions, rng) -> bytes:
    damaged = bytearray(block)
    for pos in positions:
        damaged[pos] ^= int(rng.integers(1, 256))
    return bytes(damaged)


def test_level_sizes():
    assert [parity_bytes(level) for level in FECLevel] == [0, 16, 32, 64]
    assert [max_correctable_errors(level) for level in FECLevel] == [0, 8, 16, 32]
    assert parity_bytes("medium") == 32
    assert max_correctable_errors(3) == 32
    with pytest.raises(ValidationError):
        parity_bytes("extreme")


@pytest.mark.parametrize("nsym", [2, 16, 32, 64])
def test_generator_has_consecutive_roots(nsym):
    gen = generator_poly(nsym)
    assert len(gen) == nsym + 1
    assert gen[0] == 1
    for i in range(nsym):
        assert poly_eval(gen, GF_EXP[i]) == 0


def test_encode_is_systematic():
    message = bytes([0x41] * 100)
    block = rs_encode(message, "medium")
    assert len(block) == 132
    assert block[:100] == message
    assert not any(calc_syndromes(block, 32))
    assert rs_decode(block, "medium") == message


def test_none_level_passes_through():
    assert rs_encode(b"abc", FECLevel.NONE) == b"abc"
    assert rs_decode(b"abc", FECLevel.NONE) == b"abc"


def test_clean_block_reports_no_corrections():
    block = rs_encode(b"hello mesh", "low")
    result = rs_decode_detailed(block, "low")
    assert result.message == b"hello mesh"
    assert result.errors_corrected == 0


def test_corrects_maximum_errors_at_low():
    message = bytes(range(20))
    block = rs_encode(message, "low")
    damaged = bytearray(block)
    positions = [0, 3, 7, 12, 19, 20, 28, 35]
    for pos in positions:
        damaged[pos] ^= 0xA5

    result = rs_decode_detailed(bytes(damaged), "low")
    assert result.message == message
    assert result.error_positions == tuple(positions)
    assert result.errors_corrected == 8


def test_rejects_one_error_too_many_at_low():
    message = bytes(range(20))
    block = rs_encode(message, "low")
    damaged = bytearray(block)
    for pos in [0, 3, 7, 12, 19, 20, 28, 33, 35]:
        damaged[pos] ^= 0x5A

    with pytest.raises(UncorrectableError):
        rs_decode(bytes(damaged), "low")


@pytest.mark.parametrize("level", [FECLevel.LOW, FECLevel.MEDIUM, FECLevel.HIGH])
def test_random_corruption_within_capacity(level):
    rng = np.random.default_rng(1234 + int(level))
    capacity = max_correctable_errors(level)
    for length in (1, 17, 60, 255 - parity_bytes(level)):
        message = rng.integers(0, 256, size=length, dtype=np.uint8).tobytes()
        block = rs_encode(message, level)
        for count in (1, capacity // 2, capacity):
            positions = sorted(rng.choice(len(block), size=count, replace=False).tolist())
            result = rs_decode_detailed(_corrupt(block, positions, rng), level)
            assert result.message == message
            assert list(result.error_positions) == positions


def test_random_corruption_beyond_capacity_is_rejected():
    rng = np.random.default_rng(99)
    message = rng.integers(0, 256, size=40, dtype=np.uint8).tobytes()
    block = rs_encode(message, "low")
    for _ in range(20):
        positions = rng.choice(len(block), size=9, replace=False).tolist()
        with pytest.raises(UncorrectableError):
            rs_decode(_corrupt(block, positions, rng), "low")


def test_parity_only_corruption_is_repaired():
    message = b"parity damage"
    block = bytearray(rs_encode(message, "medium"))
    for pos in range(len(message), len(message) + 16):
        block[pos] ^= 0xFF
    assert rs_decode(bytes(block), "medium") == message


def test_block_size_limits():
    assert len(rs_encode(bytes(239), "low")) == 255
    with pytest.raises(BlockTooLargeError):
        rs_encode(bytes(240), "low")
    with pytest.raises(BlockTooLargeError):
        rs_decode(bytes(256), "low")


def test_block_shorter_than_parity_is_truncated():
    with pytest.raises(TruncatedBlockError):
        rs_decode(bytes(10), "low")
    with pytest.raises(FormatError):
        rs_decode(bytes(31), "medium")


@pytest.mark.requires_reedsolo
def test_parity_matches_reference_codec():
    reedsolo = pytest.importorskip("reedsolo")
    rng = np.random.default_rng(7)
    for nsym, level in ((16, "low"), (32, "medium"), (64, "high")):
        codec = reedsolo.RSCodec(nsym)
        message = rng.integers(0, 256, size=50, dtype=np.uint8).tobytes()
        assert rs_encode(message, level) == bytes(codec.encode(message))


@pytest.mark.requires_reedsolo
def test_decodes_reference_codewords():
    reedsolo = pytest.importorskip("reedsolo")
    rng = np.random.default_rng(11)
    message = b"reference codeword"
    block = bytes(reedsolo.RSCodec(32).encode(message))
    positions = rng.choice(len(block), size=16, replace=False).tolist()
    assert rs_decode(_corrupt(block, positions, rng), "medium") == message
