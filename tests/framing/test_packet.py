import itertools

import pytest

from meshxt.exceptions import (
    CapacityError,
    FormatError,
    PacketTooLargeError,
    PacketTooSmallError,
    TruncatedBlockError,
    ValidationError,
)
from meshxt.framing import (
    HEADER_SIZE,
    MAX_PACKET_SIZE,
    PacketOptions,
    build_packet,
    parse_packet,
)
from meshxt.types import CompressionMode, FECLevel

TEXT = "On my way home now, be there in 20 minutes"


def test_minimal_packet():
    result = build_packet("Hello", PacketOptions(compression="substitution", fec="none"))
    assert result.packet[:2] == b"\x11\x00"
    parsed = parse_packet(result.packet)
    assert parsed.message == "Hello"
    assert parsed.stats.errors_corrected == 0
    assert parsed.template is None


@pytest.mark.parametrize(
    "compression, fec, flags",
    list(itertools.product(["none", "substitution"], list(FECLevel), [0, 1, 0xA, 0xF])),
)
def test_roundtrip_all_options(compression, fec, flags):
    result = build_packet(TEXT, PacketOptions(compression=compression, fec=fec, flags=flags))
    assert len(result.packet) <= MAX_PACKET_SIZE
    parsed = parse_packet(result.packet)
    assert parsed.message == TEXT
    assert parsed.header.compression is CompressionMode.parse(compression)
    assert parsed.header.fec is fec
    assert parsed.header.flags == flags


def test_encode_stats():
    result = build_packet(TEXT, PacketOptions(fec="medium"))
    stats = result.stats
    assert stats.original_size == len(TEXT)
    assert stats.fec_bytes == 32
    assert stats.header_bytes == HEADER_SIZE
    assert stats.total_size == len(result.packet) == HEADER_SIZE + stats.compressed_size + 32
    assert stats.compression_ratio < 1
    assert stats.overhead == stats.total_size - stats.original_size


def test_decode_stats():
    packet = build_packet(TEXT, PacketOptions(compression="none", fec="low")).packet
    stats = parse_packet(packet).stats
    assert stats.packet_size == len(packet)
    assert stats.payload_size == len(TEXT)
    assert stats.fec_bytes == 16


def test_codebook_with_explicit_template():
    options = PacketOptions(compression="codebook", fec="low", template="battery", params={"percent": 80})
    result = build_packet("", options)
    assert result.stats.compressed_size == 2
    parsed = parse_packet(result.packet)
    assert parsed.message == "Battery 80%"
    assert parsed.template.template == "battery"
    assert parsed.template.params == {"percent": 80}


def test_codebook_matches_fixed_phrase():
    result = build_packet("I'm OK", PacketOptions(compression="codebook", fec="none"))
    assert len(result.packet) == 3
    assert parse_packet(result.packet).message == "I'm OK"


def test_codebook_without_match_is_rejected():
    with pytest.raises(ValidationError):
        build_packet("Nothing like a template", PacketOptions(compression="codebook"))


def test_capacity_boundary():
    fits = build_packet("x" * 235, PacketOptions(compression="none", fec="none"))
    assert len(fits.packet) == MAX_PACKET_SIZE
    with pytest.raises(CapacityError):
        build_packet("x" * 236, PacketOptions(compression="none", fec="none"))
    with pytest.raises(CapacityError):
        build_packet("x" * 172, PacketOptions(compression="none", fec="high"))
    assert len(build_packet("x" * 171, PacketOptions(compression="none", fec="high")).packet) == 237


def test_empty_message_rejected():
    with pytest.raises(ValidationError):
        build_packet("", PacketOptions())
    with pytest.raises(ValidationError):
        build_packet(b"bytes", PacketOptions())


def test_options_validation():
    with pytest.raises(ValidationError):
        PacketOptions(compression="zip")
    with pytest.raises(ValidationError):
        PacketOptions(fec="maximum")
    with pytest.raises(ValidationError):
        PacketOptions(flags=16)
    with pytest.raises(ValidationError):
        PacketOptions(flags=True)
    with pytest.raises(ValidationError):
        PacketOptions(params=["percent", 5])


def test_options_from_dict():
    options = PacketOptions.from_dict({"compression": "smaz", "fec": "high", "flags": 1})
    assert options.compression is CompressionMode.SUBSTITUTION
    assert options.fec is FECLevel.HIGH
    assert PacketOptions.from_dict(options.to_dict()) == options
    assert PacketOptions.from_dict(None) == PacketOptions()
    with pytest.raises(ValidationError):
        PacketOptions.from_dict({"crc": "crc32"})


def test_parse_errors():
    with pytest.raises(PacketTooSmallError):
        parse_packet(b"\x11")
    with pytest.raises(TruncatedBlockError):
        parse_packet(b"\x11\x10" + bytes(5))
    with pytest.raises(FormatError):
        parse_packet(b"\x10\x00\xff\xfe")
    with pytest.raises(PacketTooLargeError):
        parse_packet(b"\x10\x00" + b"x" * 300)
    with pytest.raises(FormatError):
        parse_packet(b"\x10\x10" + bytes(300))
    with pytest.raises(ValidationError):
        parse_packet("1100")
