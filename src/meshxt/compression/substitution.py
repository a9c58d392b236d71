"""Smaz-style substitution compressor for short text messages.

Text is UTF-8 encoded first and compressed as bytes. At each position the
longest table entry prefixing the remaining input is emitted as its one-byte
index; bytes that match nothing are gathered into literal runs::

    <index>                        one table entry (0x00-0xFD)
    0xFE <len> <len raw bytes>     literal run, 1 <= len <= 255
    0xFF                           reserved, never emitted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import (
    FormatError,
    InvalidIndexError,
    ReservedByteError,
    TruncatedLiteralError,
)
from .dictionary import (
    LITERAL_MARKER,
    MAX_LITERAL_RUN,
    RESERVED_BYTE,
    SUBSTITUTION_BYTES,
)

logger = logging.getLogger(__name__)


@dataclass
class _TrieNode:
    children: Dict[int, "_TrieNode"] = field(default_factory=dict)
    index: Optional[int] = None


def _build_trie(entries: Sequence[bytes]) -> _TrieNode:
    root = _TrieNode()
    for index, entry in enumerate(entries):
        node = root
        for byte in entry:
            node = node.children.setdefault(byte, _TrieNode())
        # Duplicate strings keep the lowest index.
        if node.index is None:
            node.index = index
    return root


_TRIE = _build_trie(SUBSTITUTION_BYTES)


@dataclass(frozen=True)
class Token:
    """One element of a compressed stream: a table index or a literal run."""

    index: Optional[int] = None
    literal: bytes = b""

    @property
    def is_literal(self) -> bool:
        return self.index is None

    def expand(self) -> bytes:
        if self.index is None:
            return self.literal
        return SUBSTITUTION_BYTES[self.index]


def _longest_match(data: bytes, pos: int) -> Tuple[Optional[int], int]:
    node = _TRIE
    best_index: Optional[int] = None
    best_len = 0
    for offset in range(pos, len(data)):
        child = node.children.get(data[offset])
        if child is None:
            break
        node = child
        if node.index is not None:
            best_index = node.index
            best_len = offset - pos + 1
    return best_index, best_len


def _flush_literals(out: bytearray, pending: bytearray) -> None:
    for start in range(0, len(pending), MAX_LITERAL_RUN):
        chunk = pending[start : start + MAX_LITERAL_RUN]
        out.append(LITERAL_MARKER)
        out.append(len(chunk))
        out.extend(chunk)
    pending.clear()


def compress_bytes(data: bytes) -> bytes:
    """Compress raw bytes with greedy longest-match substitution."""

    out = bytearray()
    pending = bytearray()
    pos = 0
    while pos < len(data):
        index, length = _longest_match(data, pos)
        if index is None:
            pending.append(data[pos])
            pos += 1
            continue
        _flush_literals(out, pending)
        out.append(index)
        pos += length
    _flush_literals(out, pending)
    return bytes(out)


def compress(text: str) -> bytes:
    """Compress *text*; multi-byte characters travel as literal bytes."""

    data = text.encode("utf-8")
    compressed = compress_bytes(data)
    logger.debug("substitution compressed %d -> %d bytes", len(data), len(compressed))
    return compressed


def iter_tokens(blob: bytes) -> Iterator[Token]:
    """Yield the tokens of a compressed stream, validating as it goes."""

    pos = 0
    while pos < len(blob):
        byte = blob[pos]
        if byte == LITERAL_MARKER:
            if pos + 1 >= len(blob):
                raise TruncatedLiteralError("Truncated literal marker")
            length = blob[pos + 1]
            if length == 0:
                raise FormatError("Empty literal run")
            start = pos + 2
            if start + length > len(blob):
                raise TruncatedLiteralError(
                    f"Truncated literal data: need {length} bytes, have {len(blob) - start}"
                )
            yield Token(literal=bytes(blob[start : start + length]))
            pos = start + length
        elif byte == RESERVED_BYTE:
            raise ReservedByteError(f"Reserved byte 0x{RESERVED_BYTE:02X} at offset {pos}")
        else:
            if byte >= len(SUBSTITUTION_BYTES):
                raise InvalidIndexError(f"Invalid dictionary index: 0x{byte:02X}")
            yield Token(index=byte)
            pos += 1


def decompress_bytes(blob: bytes) -> bytes:
    return b"".join(token.expand() for token in iter_tokens(blob))


def decompress(blob: bytes) -> str:
    """Invert :func:`compress`."""

    data = decompress_bytes(blob)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError("Decompressed payload is not valid UTF-8") from exc


def tokenize(text: str) -> List[Token]:
    """Return the token stream :func:`compress` would emit for *text*."""

    return list(iter_tokens(compress(text)))


__all__ = [
    "Token",
    "compress",
    "compress_bytes",
    "decompress",
    "decompress_bytes",
    "iter_tokens",
    "tokenize",
]
