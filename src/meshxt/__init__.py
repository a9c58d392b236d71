"""Compression and forward error correction for small-payload radio packets."""

from .api import decode, decode_message, encode, encode_message
from .exceptions import (
    CapacityError,
    FormatError,
    MeshXTError,
    UncorrectableError,
    ValidationError,
)
from .framing import MAX_PACKET_SIZE, PACKET_VERSION, PacketOptions
from .types import CompressionMode, FECLevel

__all__ = [
    "CapacityError",
    "CompressionMode",
    "FECLevel",
    "FormatError",
    "MAX_PACKET_SIZE",
    "MeshXTError",
    "PACKET_VERSION",
    "PacketOptions",
    "UncorrectableError",
    "ValidationError",
    "decode",
    "decode_message",
    "encode",
    "encode_message",
]
