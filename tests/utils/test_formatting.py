import logging

import pytest

from meshxt.exceptions import ValidationError
from meshxt.utils import (
    configure_logging,
    format_bytes,
    format_duration,
    format_percent,
    from_hex,
    resolve_level,
    to_hex,
)


def test_hex_roundtrip():
    assert to_hex(b"\x11\x20\xff") == "1120ff"
    assert from_hex("11 20\nFF") == b"\x11\x20\xff"


@pytest.mark.parametrize("text", ["abc", "zz", "0x11"])
def test_from_hex_rejects_garbage(text):
    with pytest.raises(ValidationError):
        from_hex(text)


def test_human_formats():
    assert format_bytes(1) == "1 byte"
    assert format_bytes(42) == "42 bytes"
    assert format_percent(0.25) == "25.0%"
    assert format_duration(0.5) == "500.0 µs"
    assert format_duration(56.58) == "56.6 ms"
    assert format_duration(2301.95) == "2.30 s"


def test_configure_logging_reads_environment(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("MESHXT_LOG_LEVEL", "debug")
    configure_logging()
    configure_logging("warning")
    monkeypatch.delenv("MESHXT_LOG_LEVEL")
    configure_logging()
    assert [call["level"] for call in calls] == [logging.DEBUG, logging.WARNING, logging.INFO]


def test_resolve_level():
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("nonsense") == logging.INFO
