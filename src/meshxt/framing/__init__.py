"""Framing utilities for meshxt packets."""

from .header import (
    FLAG_FRAGMENT,
    HEADER_SIZE,
    PACKET_VERSION,
    PacketHeader,
    decode_header,
    encode_header,
)
from .packet import (
    MAX_PACKET_SIZE,
    DecodeStats,
    EncodedPacket,
    EncodeStats,
    PacketOptions,
    ParsedPacket,
    build_packet,
    parse_packet,
)

__all__ = [
    "DecodeStats",
    "EncodeStats",
    "EncodedPacket",
    "FLAG_FRAGMENT",
    "HEADER_SIZE",
    "MAX_PACKET_SIZE",
    "PACKET_VERSION",
    "PacketHeader",
    "PacketOptions",
    "ParsedPacket",
    "build_packet",
    "decode_header",
    "encode_header",
    "parse_packet",
]
