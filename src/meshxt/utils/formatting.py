"""Formatting helpers for command line output."""

from __future__ import annotations

import binascii

from ..exceptions import ValidationError


def to_hex(data: bytes) -> str:
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    """Parse a hex string, ignoring surrounding and embedded whitespace."""

    cleaned = "".join(text.split())
    if len(cleaned) % 2:
        raise ValidationError("Invalid hex string: odd length")
    try:
        return binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"Invalid hex string: {exc}") from exc


def format_bytes(count: int) -> str:
    return "1 byte" if count == 1 else f"{count} bytes"


def format_percent(ratio: float) -> str:
    return f"{ratio * 100:.1f}%"


def format_duration(ms: float) -> str:
    if ms < 1:
        return f"{ms * 1000:.1f} µs"
    if ms < 1000:
        return f"{ms:.1f} ms"
    return f"{ms / 1000:.2f} s"


__all__ = ["format_bytes", "format_duration", "format_percent", "from_hex", "to_hex"]
