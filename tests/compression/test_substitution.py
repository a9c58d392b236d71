import pytest

from meshxt.compression import substitution
from meshxt.compression.dictionary import SUBSTITUTION_BYTES, SUBSTITUTION_TABLE
from meshxt.compression.substitution import (
    compress,
    compress_bytes,
    decompress,
    decompress_bytes,
    iter_tokens,
    tokenize,
)
from meshxt.exceptions import (
    FormatError,
    InvalidIndexError,
    ReservedByteError,
    TruncatedLiteralError,
)

MESSAGES = [
    "Hello",
    "I'm OK",
    "Are you free for dinner Thursday?",
    "Need help at the old bridge",
    "The weather is looking good today",
    "Can you call me when you get this?",
    "On my way home now, be there in 20 minutes",
    "Thanks for letting me know",
    "Emergency! Need immediate assistance at the campsite",
    "Going to the store, do you need anything?",
    "Meeting at 3pm tomorrow in the usual spot",
    "Just checking in, everything okay?",
    "Roger that, heading to your location now",
    "Don't forget to bring the map",
    "The signal is weak here, moving to higher ground",
    "All clear, no issues found",
    "Copy. Standing by for further instructions.",
    "Heading north along the river trail",
    "Low battery, might lose contact soon",
    "Beautiful sunset from the hilltop",
]


def test_table_shape():
    assert len(SUBSTITUTION_TABLE) == 254
    assert all(entry.isascii() and entry for entry in SUBSTITUTION_TABLE)
    assert SUBSTITUTION_BYTES[0x0C] == b"the"


@pytest.mark.parametrize("message", MESSAGES)
def test_roundtrip(message):
    assert decompress(compress(message)) == message


def test_conversational_text_shrinks():
    message = "the weather is looking good today"
    assert len(compress(message)) < len(message)


def test_known_encodings():
    assert compress("the") == b"\x0c"
    assert compress(" the ") == b"\x79"
    assert compress("Hi") == b"\xfe\x01H\x05"


def test_every_entry_is_a_single_token():
    for entry in SUBSTITUTION_TABLE:
        compressed = compress(entry)
        # Repeated strings always resolve to their first index.
        assert compressed == bytes([SUBSTITUTION_TABLE.index(entry)])
        assert decompress(compressed) == entry


def test_duplicate_entries_use_lowest_index():
    assert compress("ple") == b"\x93"
    assert compress(" her") == b"\x4c"


def test_empty_and_single_character():
    assert compress("") == b""
    assert decompress(b"") == ""
    assert decompress(compress("a")) == "a"


def test_long_literal_runs_are_split():
    text = "Z" * 300
    compressed = compress(text)
    assert compressed == b"\xfe\xff" + b"Z" * 255 + b"\xfe\x2d" + b"Z" * 45
    assert decompress(compressed) == text


def test_multibyte_text_roundtrips():
    assert compress("é") == b"\xfe\x02\xc3\xa9"
    for text in ("héllo wörld ☃", "on my way 🚶", "é" * 200):
        assert decompress(compress(text)) == text


def test_literal_split_inside_a_character():
    # 400 UTF-8 bytes of literals; the 255-byte cut falls mid-character.
    text = "é" * 200
    tokens = tokenize(text)
    assert [len(token.literal) for token in tokens] == [255, 145]
    assert decompress(compress(text)) == text


def test_tokens_expand_to_input():
    text = "Roger that, heading to your location now"
    tokens = tokenize(text)
    assert b"".join(token.expand() for token in tokens) == text.encode("utf-8")
    assert any(token.is_literal for token in tokens)
    assert any(not token.is_literal for token in tokens)


def test_raw_bytes_roundtrip():
    data = bytes(range(256))
    assert decompress_bytes(compress_bytes(data)) == data


def test_reserved_byte_rejected():
    with pytest.raises(ReservedByteError):
        decompress(b"\x00\xff")


@pytest.mark.parametrize("blob", [b"\xfe", b"\x01\xfe", b"\xfe\x05ab"])
def test_truncated_literal_rejected(blob):
    with pytest.raises(TruncatedLiteralError):
        decompress(blob)


def test_empty_literal_run_rejected():
    with pytest.raises(FormatError):
        list(iter_tokens(b"\xfe\x00"))


def test_index_beyond_table_rejected(monkeypatch):
    # Every byte below 0xFE is a valid index in the full table; shrink it to
    # reach the guard that protects shorter tables.
    monkeypatch.setattr(substitution, "SUBSTITUTION_BYTES", SUBSTITUTION_BYTES[:16])
    with pytest.raises(InvalidIndexError):
        decompress(b"\x20")


def test_invalid_utf8_payload_rejected():
    with pytest.raises(FormatError):
        decompress(b"\xfe\x01\xff")
