"""Custom exception hierarchy for the meshxt packet codec."""
from __future__ import annotations

from dataclasses import dataclass


class MeshXTError(Exception):
    """Base class for all meshxt errors."""


class ValidationError(MeshXTError):
    """Raised when caller-supplied options or input are invalid."""


class BlockTooLargeError(ValidationError):
    """Raised when a Reed-Solomon block would exceed 255 symbols."""


class FormatError(MeshXTError):
    """Raised when received bytes do not follow the wire format."""


class PacketTooSmallError(FormatError):
    """Raised when a packet is shorter than its header."""


class PacketTooLargeError(FormatError):
    """Raised when a received packet exceeds the channel ceiling."""


@dataclass
class UnsupportedVersionError(FormatError):
    version: int
    expected: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Unsupported packet version: {self.version} (expected {self.expected})"


class UnknownCompressionError(FormatError):
    """Raised when the header carries an unknown compression code."""


class UnknownFECError(FormatError):
    """Raised when the header carries an unknown FEC level code."""


class TruncatedBlockError(FormatError):
    """Raised when a FEC block is shorter than its parity."""


class ReservedByteError(FormatError):
    """Raised when the reserved byte 0xFF appears in a compressed stream."""


class InvalidIndexError(FormatError):
    """Raised when a compressed stream references a missing dictionary entry."""


class TruncatedLiteralError(FormatError):
    """Raised when a literal run is cut short."""


class UncorrectableError(MeshXTError):
    """Raised when Reed-Solomon decoding cannot restore the message."""


@dataclass
class TooManyErrorsError(UncorrectableError):
    errors: int
    capacity: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Too many errors to correct: locator degree {self.errors} exceeds capacity {self.capacity}"


@dataclass
class LocatorMismatchError(UncorrectableError):
    found: int
    expected: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Could not locate all errors (found {self.found}, expected {self.expected})"


class VerificationFailedError(UncorrectableError):
    """Raised when syndromes remain non-zero after correction."""


class CapacityError(MeshXTError):
    """Raised when an assembled packet exceeds the channel ceiling."""


class GFZeroDivisionError(MeshXTError, ZeroDivisionError):
    """Raised on division by zero (or inversion of zero) in GF(2^8)."""


__all__ = [
    "BlockTooLargeError",
    "CapacityError",
    "FormatError",
    "GFZeroDivisionError",
    "InvalidIndexError",
    "LocatorMismatchError",
    "MeshXTError",
    "PacketTooLargeError",
    "PacketTooSmallError",
    "ReservedByteError",
    "TooManyErrorsError",
    "TruncatedBlockError",
    "TruncatedLiteralError",
    "UncorrectableError",
    "UnknownCompressionError",
    "UnknownFECError",
    "UnsupportedVersionError",
    "ValidationError",
    "VerificationFailedError",
]
