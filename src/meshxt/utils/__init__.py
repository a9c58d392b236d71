"""Utility helpers for meshxt."""

from .formatting import format_bytes, format_duration, format_percent, from_hex, to_hex
from .logging import configure_logging, resolve_level

__all__ = [
    "configure_logging",
    "format_bytes",
    "format_duration",
    "format_percent",
    "from_hex",
    "resolve_level",
    "to_hex",
]
