"""Two-byte bit-packed packet header.

Layout (most significant bit first)::

    byte 0: version (4 bits) | compression code (4 bits)
    byte 1: FEC level code (4 bits) | flags (4 bits)

Flag bit 0 marks a fragment; bits 1-3 are reserved and carried unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import (
    PacketTooSmallError,
    UnknownCompressionError,
    UnknownFECError,
    UnsupportedVersionError,
    ValidationError,
)
from ..types import CompressionMode, FECLevel

PACKET_VERSION = 1
HEADER_SIZE = 2
FLAG_FRAGMENT = 0x1
FLAGS_MASK = 0xF


@dataclass(frozen=True)
class PacketHeader:
    """Decoded header fields."""

    version: int
    compression: CompressionMode
    fec: FECLevel
    flags: int = 0

    @property
    def is_fragment(self) -> bool:
        return bool(self.flags & FLAG_FRAGMENT)

    def to_bytes(self) -> bytes:
        return encode_header(self.compression, self.fec, self.flags, version=self.version)


def _nibble(value: int, name: str) -> int:
    if not isinstance(value, int) or not 0 <= value <= 0xF:
        raise ValidationError(f"'{name}' must fit in 4 bits, got {value!r}")
    return value


def encode_header(
    compression: CompressionMode,
    fec: FECLevel,
    flags: int = 0,
    *,
    version: int = PACKET_VERSION,
) -> bytes:
    byte0 = (_nibble(version, "version") << 4) | _nibble(int(compression), "compression")
    byte1 = (_nibble(int(fec), "fec") << 4) | _nibble(flags, "flags")
    return bytes([byte0, byte1])


def decode_header(blob: bytes) -> PacketHeader:
    """Parse and validate the first :data:`HEADER_SIZE` bytes of *blob*."""

    if len(blob) < HEADER_SIZE:
        raise PacketTooSmallError(
            f"Packet too small: {len(blob)} byte(s), header needs {HEADER_SIZE}"
        )
    version = (blob[0] >> 4) & 0xF
    comp_code = blob[0] & 0xF
    fec_code = (blob[1] >> 4) & 0xF
    flags = blob[1] & FLAGS_MASK

    if version != PACKET_VERSION:
        raise UnsupportedVersionError(version=version, expected=PACKET_VERSION)
    try:
        compression = CompressionMode(comp_code)
    except ValueError:
        raise UnknownCompressionError(f"Unknown compression type: {comp_code}") from None
    try:
        fec = FECLevel(fec_code)
    except ValueError:
        raise UnknownFECError(f"Unknown FEC level: {fec_code}") from None

    return PacketHeader(version=version, compression=compression, fec=fec, flags=flags)


__all__ = [
    "FLAGS_MASK",
    "FLAG_FRAGMENT",
    "HEADER_SIZE",
    "PACKET_VERSION",
    "PacketHeader",
    "decode_header",
    "encode_header",
]
