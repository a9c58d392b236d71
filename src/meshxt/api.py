"""High level encode/decode API for meshxt packets."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .framing import EncodedPacket, PacketOptions, ParsedPacket, build_packet, parse_packet
from .types import CompressionMode, FECLevel


def encode_message(
    text: str,
    *,
    compression: Union[CompressionMode, str] = CompressionMode.SUBSTITUTION,
    fec: Union[FECLevel, str] = FECLevel.MEDIUM,
    flags: int = 0,
    template: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> EncodedPacket:
    """Encode *text* into a packet ready for transmission."""

    options = PacketOptions(
        compression=compression,
        fec=fec,
        flags=flags,
        template=template,
        params=params,
    )
    return build_packet(text, options)


def decode_message(packet: bytes) -> ParsedPacket:
    """Decode a received packet back into its message and header fields."""

    return parse_packet(packet)


def encode(text: str, **options: Any) -> bytes:
    """Return only the packet bytes for *text*; see :func:`encode_message`."""

    return encode_message(text, **options).packet


def decode(packet: bytes) -> str:
    """Return only the message text carried by *packet*."""

    return parse_packet(packet).message


__all__ = ["decode", "decode_message", "encode", "encode_message"]
