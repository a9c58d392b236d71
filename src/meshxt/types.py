"""Closed enumerations shared by the header codec and the packet pipeline."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from .exceptions import ValidationError


class CompressionMode(IntEnum):
    """Compression applied to the packet body; the value is the wire code."""

    NONE = 0
    SUBSTITUTION = 1
    CODEBOOK = 2

    @classmethod
    def parse(cls, value: Union["CompressionMode", str, int]) -> "CompressionMode":
        """Coerce a mode name, wire code or member into a :class:`CompressionMode`."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "smaz":
                return cls.SUBSTITUTION
            try:
                return cls[key.upper()]
            except KeyError:
                raise ValidationError(
                    f"Unknown compression: {value!r}. Use 'substitution', 'codebook', or 'none'."
                ) from None
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown compression code: {value!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower()


class FECLevel(IntEnum):
    """Reed-Solomon correction level; the value is the wire code."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def parse(cls, value: Union["FECLevel", str, int]) -> "FECLevel":
        """Coerce a level name, wire code or member into a :class:`FECLevel`."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValidationError(
                    f"Unknown FEC level: {value!r}. Use 'low', 'medium', 'high', or 'none'."
                ) from None
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown FEC level code: {value!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def parity_bytes(self) -> int:
        return _PARITY_BYTES[self]

    @property
    def max_correctable_errors(self) -> int:
        return _PARITY_BYTES[self] // 2


_PARITY_BYTES = {
    FECLevel.NONE: 0,
    FECLevel.LOW: 16,
    FECLevel.MEDIUM: 32,
    FECLevel.HIGH: 64,
}


__all__ = ["CompressionMode", "FECLevel"]
