"""Predefined message templates for ultra-compact packets.

A template packet is a single id byte, optionally followed by parameter
bytes. Ids ``0x00``-``0x3F`` are fixed phrases; ids from ``0x40`` carry
parameters.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..exceptions import FormatError, ValidationError

Params = Dict[str, Any]


@dataclass(frozen=True)
class Template:
    id: int
    name: str
    text: str
    param_names: Tuple[str, ...] = ()
    encode_params: Optional[Callable[[Mapping[str, Any]], bytes]] = None
    decode_params: Optional[Callable[[bytes, int], Tuple[Params, int]]] = None
    render: Optional[Callable[[Mapping[str, Any]], str]] = None

    @property
    def has_params(self) -> bool:
        return bool(self.param_names)

    def __post_init__(self) -> None:
        if self.param_names and None in (self.encode_params, self.decode_params, self.render):
            raise TypeError(f"Template {self.name!r} has params but no codec callables")


@dataclass(frozen=True)
class TemplateInfo:
    id: int
    name: str
    text: str
    has_params: bool
    param_names: Tuple[str, ...]


@dataclass(frozen=True)
class DecodedTemplate:
    template: str
    text: str
    params: Optional[Params]


WEATHER_CODES: Tuple[str, ...] = (
    "clear", "cloudy", "rain", "heavy rain", "drizzle", "snow",
    "sleet", "hail", "fog", "mist", "wind", "storm", "thunder",
    "tornado", "hurricane", "hot", "cold", "freezing", "mild", "warm",
)

SHORT_TEXT_MAX_BYTES = 32


def _finite(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"Expected a finite number, got {value!r}")
    return number


def _round_half_up(value: Any) -> int:
    return int(math.floor(_finite(value) + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _require(buf: bytes, offset: int, size: int, name: str) -> None:
    if offset + size > len(buf):
        raise FormatError(f"Truncated {name} params")


def _param(params: Mapping[str, Any], key: str) -> Any:
    try:
        return params[key]
    except KeyError:
        raise ValidationError(f"Missing template parameter {key!r}") from None


# Location: two big-endian float32 values.

def _encode_location(params: Mapping[str, Any]) -> bytes:
    lat = _finite(_param(params, "lat"))
    lon = _finite(_param(params, "lon"))
    try:
        return struct.pack(">ff", lat, lon)
    except (OverflowError, struct.error) as exc:
        raise ValidationError(f"Location out of float32 range: {lat}, {lon}") from exc


def _decode_location(buf: bytes, offset: int) -> Tuple[Params, int]:
    _require(buf, offset, 8, "location")
    lat, lon = struct.unpack_from(">ff", buf, offset)
    return {"lat": lat, "lon": lon}, 8


def _encode_byte(key: str, high: int = 255) -> Callable[[Mapping[str, Any]], bytes]:
    def encode(params: Mapping[str, Any]) -> bytes:
        return bytes([_clamp(_round_half_up(_param(params, key)), 0, high)])

    return encode


def _decode_byte(key: str) -> Callable[[bytes, int], Tuple[Params, int]]:
    def decode(buf: bytes, offset: int) -> Tuple[Params, int]:
        _require(buf, offset, 1, key)
        return {key: buf[offset]}, 1

    return decode


def _encode_weather(params: Mapping[str, Any]) -> bytes:
    kind = _param(params, "type")
    try:
        return bytes([WEATHER_CODES.index(kind)])
    except ValueError:
        raise ValidationError(f"Unknown weather type: {kind!r}") from None


def _decode_weather(buf: bytes, offset: int) -> Tuple[Params, int]:
    _require(buf, offset, 1, "weather")
    code = buf[offset]
    if code >= len(WEATHER_CODES):
        raise FormatError(f"Invalid weather code: {code}")
    return {"type": WEATHER_CODES[code]}, 1


def _encode_channel(params: Mapping[str, Any]) -> bytes:
    return bytes([_round_half_up(_param(params, "channel")) & 0xFF])


def _encode_heading(params: Mapping[str, Any]) -> bytes:
    bearing = _round_half_up(_param(params, "bearing")) & 0x1FF
    return bytes([(bearing >> 8) & 0xFF, bearing & 0xFF])


def _decode_heading(buf: bytes, offset: int) -> Tuple[Params, int]:
    _require(buf, offset, 2, "heading")
    return {"bearing": ((buf[offset] & 0x01) << 8) | buf[offset + 1]}, 2


def _encode_altitude(params: Mapping[str, Any]) -> bytes:
    metres = _round_half_up(_param(params, "metres"))
    try:
        return struct.pack(">h", metres)
    except struct.error as exc:
        raise ValidationError(f"Altitude out of range: {metres}") from exc


def _decode_altitude(buf: bytes, offset: int) -> Tuple[Params, int]:
    _require(buf, offset, 2, "altitude")
    (metres,) = struct.unpack_from(">h", buf, offset)
    return {"metres": metres}, 2


def _encode_short_text(params: Mapping[str, Any]) -> bytes:
    raw = str(_param(params, "text")).encode("utf-8")
    if len(raw) > SHORT_TEXT_MAX_BYTES:
        raise ValidationError(f"Short text max {SHORT_TEXT_MAX_BYTES} bytes")
    return bytes([len(raw)]) + raw


def _decode_short_text(buf: bytes, offset: int) -> Tuple[Params, int]:
    _require(buf, offset, 1, "short_text")
    length = buf[offset]
    _require(buf, offset + 1, length, "short_text")
    raw = bytes(buf[offset + 1 : offset + 1 + length])
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError("short_text is not valid UTF-8") from exc
    return {"text": text}, 1 + length


_SIMPLE: Tuple[Tuple[str, str], ...] = (
    ("ok", "I'm OK"),
    ("need_help", "Need help"),
    ("emergency", "Emergency!"),
    ("yes", "Yes"),
    ("no", "No"),
    ("maybe", "Maybe"),
    ("on_my_way", "On my way"),
    ("call_me", "Call me"),
    ("copy", "Copy"),
    ("roger", "Roger"),
    ("thanks", "Thanks"),
    ("please", "Please"),
    ("sorry", "Sorry"),
    ("hello", "Hello"),
    ("goodbye", "Goodbye"),
    ("good_morning", "Good morning"),
    ("good_night", "Good night"),
    ("safe", "I'm safe"),
    ("help_coming", "Help is coming"),
    ("stay_put", "Stay put"),
    ("move_out", "Move out"),
    ("all_clear", "All clear"),
    ("danger", "Danger"),
    ("stop", "Stop"),
    ("go", "Go"),
    ("wait", "Wait"),
    ("affirmative", "Affirmative"),
    ("negative", "Negative"),
    ("check_in", "Checking in"),
    ("heading_home", "Heading home"),
    ("arrived", "Arrived"),
    ("leaving_now", "Leaving now"),
    ("be_right_back", "Be right back"),
    ("brb", "BRB"),
    ("sos", "SOS"),
    ("mayday", "Mayday"),
    ("send_help", "Send help"),
    ("lost", "I'm lost"),
    ("found_it", "Found it"),
    ("send_coords", "Send coordinates"),
    ("low_battery", "Low battery"),
    ("charging", "Charging"),
    ("no_signal", "No signal"),
    ("weak_signal", "Weak signal"),
    ("strong_signal", "Strong signal"),
    ("rain", "Rain"),
    ("clear_sky", "Clear sky"),
    ("overcast", "Overcast"),
    ("windy", "Windy"),
    ("fog", "Fog"),
    ("snow", "Snow"),
    ("storm", "Storm"),
    ("understood", "Understood"),
    ("repeat", "Say again"),
    ("over_out", "Over and out"),
    ("standing_by", "Standing by"),
    ("busy", "Busy"),
    ("free", "Free"),
    ("meet_up", "Meet up?"),
    ("come_here", "Come here"),
    ("run", "Run!"),
    ("hide", "Hide"),
    ("quiet", "Be quiet"),
    ("listen", "Listen"),
)

_PARAMETERISED: Tuple[Template, ...] = (
    Template(
        0x40, "location", "At location", ("lat", "lon"),
        _encode_location, _decode_location,
        lambda p: f"At location [{p['lat']:.6f}, {p['lon']:.6f}]",
    ),
    Template(
        0x41, "eta", "ETA", ("minutes",),
        _encode_byte("minutes"), _decode_byte("minutes"),
        lambda p: f"ETA {p['minutes']} minutes",
    ),
    Template(
        0x42, "weather", "Weather", ("type",),
        _encode_weather, _decode_weather,
        lambda p: f"Weather: {p['type']}",
    ),
    Template(
        0x43, "switch_channel", "Switch channel", ("channel",),
        _encode_channel, _decode_byte("channel"),
        lambda p: f"Switch to channel {p['channel']}",
    ),
    Template(
        0x44, "heading", "Heading", ("bearing",),
        _encode_heading, _decode_heading,
        lambda p: f"Heading {p['bearing']}°",
    ),
    Template(
        0x45, "altitude", "Altitude", ("metres",),
        _encode_altitude, _decode_altitude,
        lambda p: f"Altitude {p['metres']}m",
    ),
    Template(
        0x46, "speed", "Speed", ("kmh",),
        _encode_byte("kmh"), _decode_byte("kmh"),
        lambda p: f"Speed {p['kmh']} km/h",
    ),
    Template(
        0x47, "battery", "Battery", ("percent",),
        _encode_byte("percent", high=100), _decode_byte("percent"),
        lambda p: f"Battery {p['percent']}%",
    ),
    Template(
        0x48, "headcount", "Headcount", ("count",),
        _encode_byte("count"), _decode_byte("count"),
        lambda p: f"{p['count']} people",
    ),
    Template(
        0x49, "short_text", "Short text", ("text",),
        _encode_short_text, _decode_short_text,
        lambda p: p["text"],
    ),
)

TEMPLATES: Tuple[Template, ...] = (
    tuple(Template(index, name, text) for index, (name, text) in enumerate(_SIMPLE))
    + _PARAMETERISED
)
BY_NAME: Dict[str, Template] = {tmpl.name: tmpl for tmpl in TEMPLATES}
BY_ID: Dict[int, Template] = {tmpl.id: tmpl for tmpl in TEMPLATES}
_BY_TEXT: Dict[str, Template] = {tmpl.text: tmpl for tmpl in TEMPLATES if not tmpl.has_params}


def encode_template(name: str, params: Optional[Mapping[str, Any]] = None) -> bytes:
    """Encode template *name* with its *params* into id byte plus parameter bytes."""

    tmpl = BY_NAME.get(name)
    if tmpl is None:
        raise ValidationError(f"Unknown template: {name!r}")
    if not tmpl.has_params:
        return bytes([tmpl.id])
    if params is None:
        raise ValidationError(
            f"Template {name!r} requires params: {', '.join(tmpl.param_names)}"
        )
    assert tmpl.encode_params is not None
    return bytes([tmpl.id]) + tmpl.encode_params(params)


def decode_template(blob: bytes) -> DecodedTemplate:
    """Decode a template packet body."""

    if not blob:
        raise FormatError("Empty codebook buffer")
    tmpl = BY_ID.get(blob[0])
    if tmpl is None:
        raise FormatError(f"Unknown template ID: 0x{blob[0]:02x}")
    if not tmpl.has_params:
        return DecodedTemplate(template=tmpl.name, text=tmpl.text, params=None)
    assert tmpl.decode_params is not None and tmpl.render is not None
    params, _ = tmpl.decode_params(bytes(blob), 1)
    return DecodedTemplate(template=tmpl.name, text=tmpl.render(params), params=params)


def find_template(text: str) -> Optional[str]:
    """Return the name of the fixed phrase whose text is exactly *text*."""

    tmpl = _BY_TEXT.get(text)
    return tmpl.name if tmpl is not None else None


def list_templates() -> List[TemplateInfo]:
    return [
        TemplateInfo(
            id=tmpl.id,
            name=tmpl.name,
            text=tmpl.text,
            has_params=tmpl.has_params,
            param_names=tmpl.param_names,
        )
        for tmpl in TEMPLATES
    ]


__all__ = [
    "BY_ID",
    "BY_NAME",
    "DecodedTemplate",
    "SHORT_TEXT_MAX_BYTES",
    "TEMPLATES",
    "Template",
    "TemplateInfo",
    "WEATHER_CODES",
    "decode_template",
    "encode_template",
    "find_template",
    "list_templates",
]
