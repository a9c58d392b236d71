"""Packet building and parsing.

Encoding runs compression, then optional Reed-Solomon protection of the
compressed payload, then prepends the two-byte header::

    +----------+---------------------+----------------+
    |  header  |  compressed payload | parity (0-64)  |
    +----------+---------------------+----------------+

The whole packet must fit in :data:`MAX_PACKET_SIZE` bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..compression.codebook import (
    DecodedTemplate,
    decode_template,
    encode_template,
    find_template,
)
from ..compression.substitution import compress, decompress
from ..exceptions import CapacityError, FormatError, PacketTooLargeError, ValidationError
from ..fec.reed_solomon import rs_decode_detailed, rs_encode
from ..types import CompressionMode, FECLevel
from .header import FLAGS_MASK, HEADER_SIZE, PACKET_VERSION, PacketHeader, decode_header

logger = logging.getLogger(__name__)

MAX_PACKET_SIZE = 237


@dataclass(frozen=True)
class PacketOptions:
    """Encoding options for :func:`build_packet`."""

    compression: CompressionMode = CompressionMode.SUBSTITUTION
    fec: FECLevel = FECLevel.MEDIUM
    flags: int = 0
    template: Optional[str] = None
    params: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:  # pragma: no cover - dataclass hook
        object.__setattr__(self, "compression", CompressionMode.parse(self.compression))
        object.__setattr__(self, "fec", FECLevel.parse(self.fec))
        if isinstance(self.flags, bool) or not isinstance(self.flags, int):
            raise ValidationError("'flags' must be an integer")
        if self.flags & ~FLAGS_MASK:
            raise ValidationError(f"'flags' must fit in 4 bits, got {self.flags}")
        if self.params is not None and not isinstance(self.params, Mapping):
            raise ValidationError("'params' must be a mapping when provided")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "compression": self.compression.label,
            "fec": self.fec.label,
            "flags": self.flags,
        }
        if self.template is not None:
            data["template"] = self.template
        if self.params is not None:
            data["params"] = dict(self.params)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PacketOptions":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValidationError("packet options must be a mapping")
        unknown = set(data) - {"compression", "fec", "flags", "template", "params"}
        if unknown:
            raise ValidationError(f"Unknown packet options: {', '.join(sorted(unknown))}")
        return cls(
            compression=data.get("compression", CompressionMode.SUBSTITUTION),
            fec=data.get("fec", FECLevel.MEDIUM),
            flags=data.get("flags", 0),
            template=data.get("template"),
            params=data.get("params"),
        )


@dataclass(frozen=True)
class EncodeStats:
    original_size: int
    compressed_size: int
    fec_bytes: int
    header_bytes: int
    total_size: int

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 0.0
        return self.compressed_size / self.original_size

    @property
    def overhead(self) -> int:
        return self.total_size - self.original_size


@dataclass(frozen=True)
class EncodedPacket:
    packet: bytes
    header: PacketHeader
    stats: EncodeStats


@dataclass(frozen=True)
class DecodeStats:
    packet_size: int
    payload_size: int
    fec_bytes: int
    header_bytes: int
    error_positions: Tuple[int, ...] = ()

    @property
    def errors_corrected(self) -> int:
        return len(self.error_positions)


@dataclass(frozen=True)
class ParsedPacket:
    """Representation of a parsed packet."""

    message: str
    header: PacketHeader
    stats: DecodeStats
    template: Optional[DecodedTemplate] = field(default=None)


def _compress_payload(text: str, options: PacketOptions) -> bytes:
    mode = options.compression
    if mode is CompressionMode.CODEBOOK:
        name = options.template or find_template(text)
        if name is None:
            raise ValidationError("Codebook compression requires a 'template' option")
        return encode_template(name, options.params)
    if not text:
        raise ValidationError("Message must not be empty")
    if mode is CompressionMode.SUBSTITUTION:
        return compress(text)
    if mode is CompressionMode.NONE:
        return text.encode("utf-8")
    raise ValidationError(f"Unsupported compression mode: {mode!r}")  # pragma: no cover


def _decompress_payload(
    payload: bytes, mode: CompressionMode
) -> Tuple[str, Optional[DecodedTemplate]]:
    if mode is CompressionMode.SUBSTITUTION:
        return decompress(payload), None
    if mode is CompressionMode.CODEBOOK:
        decoded = decode_template(payload)
        return decoded.text, decoded
    if mode is CompressionMode.NONE:
        try:
            return payload.decode("utf-8"), None
        except UnicodeDecodeError as exc:
            raise FormatError("Uncompressed payload is not valid UTF-8") from exc
    raise FormatError(f"Unsupported compression mode: {mode!r}")  # pragma: no cover


def build_packet(text: str, options: Optional[PacketOptions] = None) -> EncodedPacket:
    """Compress, protect and frame *text* into a single packet."""

    if not isinstance(text, str):
        raise ValidationError("message must be a string")
    options = options or PacketOptions()

    payload = _compress_payload(text, options)
    parity = options.fec.parity_bytes
    total = HEADER_SIZE + len(payload) + parity
    if total > MAX_PACKET_SIZE:
        raise CapacityError(
            f"Packet too large: {total} bytes (max {MAX_PACKET_SIZE}). "
            "Try shorter message, stronger compression, or lower FEC."
        )

    body = rs_encode(payload, options.fec) if options.fec is not FECLevel.NONE else payload
    header = PacketHeader(
        version=PACKET_VERSION,
        compression=options.compression,
        fec=options.fec,
        flags=options.flags,
    )
    packet = header.to_bytes() + body

    stats = EncodeStats(
        original_size=len(text.encode("utf-8")),
        compressed_size=len(payload),
        fec_bytes=len(body) - len(payload),
        header_bytes=HEADER_SIZE,
        total_size=len(packet),
    )
    logger.debug(
        "built packet: %s/%s, %d -> %d bytes",
        options.compression.label,
        options.fec.label,
        stats.original_size,
        stats.total_size,
    )
    return EncodedPacket(packet=packet, header=header, stats=stats)


def parse_packet(blob: bytes) -> ParsedPacket:
    """Parse a packet created by :func:`build_packet`, correcting errors if possible."""

    if not isinstance(blob, (bytes, bytearray, memoryview)):
        raise ValidationError("Packet blob must be bytes")
    blob = bytes(blob)
    if len(blob) > MAX_PACKET_SIZE:
        raise PacketTooLargeError(
            f"Packet too large: {len(blob)} bytes (max {MAX_PACKET_SIZE})"
        )

    header = decode_header(blob)
    body = blob[HEADER_SIZE:]

    error_positions: Tuple[int, ...] = ()
    if header.fec is not FECLevel.NONE:
        result = rs_decode_detailed(body, header.fec)
        payload = result.message
        error_positions = result.error_positions
    else:
        payload = body

    message, template = _decompress_payload(payload, header.compression)
    stats = DecodeStats(
        packet_size=len(blob),
        payload_size=len(payload),
        fec_bytes=header.fec.parity_bytes,
        header_bytes=HEADER_SIZE,
        error_positions=error_positions,
    )
    logger.debug(
        "parsed packet: %s/%s, %d byte(s), %d correction(s)",
        header.compression.label,
        header.fec.label,
        stats.packet_size,
        stats.errors_corrected,
    )
    return ParsedPacket(message=message, header=header, stats=stats, template=template)


__all__ = [
    "DecodeStats",
    "EncodeStats",
    "EncodedPacket",
    "MAX_PACKET_SIZE",
    "PacketOptions",
    "ParsedPacket",
    "build_packet",
    "parse_packet",
]
