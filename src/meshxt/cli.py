"""Command line interface for the meshxt packet codec."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .compression import compress, encode_template, find_template, list_templates
from .exceptions import MeshXTError, ValidationError
from .framing import MAX_PACKET_SIZE, PacketOptions, build_packet, parse_packet
from .radio import RadioConfig, range_estimate, recommend
from .types import CompressionMode, FECLevel
from .utils import (
    configure_logging,
    format_bytes,
    format_duration,
    format_percent,
    from_hex,
    to_hex,
)

console = Console()

KM_TO_MILES = 0.621


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
        default=None,
        help="Log level for this invocation (default: $MESHXT_LOG_LEVEL or INFO)",
    )


def _coerce_param(raw: str) -> Any:
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def _parse_params(pairs: Optional[Sequence[str]]) -> Optional[Dict[str, Any]]:
    if not pairs:
        return None
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(f"template parameter must look like key=value, got {pair!r}")
        params[key.strip()] = _coerce_param(value.strip())
    return params


def _savings(original: int, compressed: int) -> str:
    if original == 0:
        return "n/a"
    return format_percent(1 - compressed / original)


def _describe(rec: RadioConfig) -> str:
    return f"SF{rec.spreading_factor} BW{rec.bandwidth_khz}kHz CR4/{rec.coding_rate}"


def _handle_encode(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="meshxt encode", description="Encode a message into a packet.")
    parser.add_argument("message", help="Text message to encode")
    parser.add_argument(
        "--compress",
        dest="compression",
        choices=[mode.label for mode in CompressionMode] + ["smaz"],
        default="substitution",
        help="Compression mode (default: substitution)",
    )
    parser.add_argument(
        "--fec",
        choices=[level.label for level in FECLevel],
        default="medium",
        help="Reed-Solomon correction level (default: medium)",
    )
    parser.add_argument("--flags", type=int, default=0, help="Header flag bits (0-15)")
    parser.add_argument("--template", help="Codebook template name (codebook mode)")
    parser.add_argument(
        "--param",
        dest="params",
        action="append",
        metavar="KEY=VALUE",
        help="Codebook template parameter; repeat for several",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Print only the packet hex")
    _add_common(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    try:
        options = PacketOptions(
            compression=args.compression,
            fec=args.fec,
            flags=args.flags,
            template=args.template,
            params=_parse_params(args.params),
        )
        result = build_packet(args.message, options)
    except MeshXTError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    packet_hex = to_hex(result.packet)
    if args.quiet:
        console.print(packet_hex, soft_wrap=True)
        return 0

    stats = result.stats
    table = Table(title="MeshXT Encode", show_header=False)
    table.add_row("Original", format_bytes(stats.original_size))
    table.add_row(
        "Compressed",
        f"{format_bytes(stats.compressed_size)} ({_savings(stats.original_size, stats.compressed_size)} saved)",
    )
    table.add_row(f"FEC ({options.fec.label})", f"+{format_bytes(stats.fec_bytes)}")
    table.add_row("Header", f"+{format_bytes(stats.header_bytes)}")
    table.add_row("Total packet", f"{format_bytes(stats.total_size)} / {MAX_PACKET_SIZE} max")
    rec = recommend(stats.total_size)
    table.add_row("Recommended", _describe(rec))
    table.add_row(
        "Est. range",
        f"~{rec.range_km}km ({round(rec.range_km * KM_TO_MILES)}mi), airtime {format_duration(rec.airtime_ms)}",
    )
    console.print(table)
    console.print(f"Hex: {packet_hex}", soft_wrap=True)
    return 0


def _handle_decode(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="meshxt decode", description="Decode a hex packet.")
    parser.add_argument("hex", help="Packet bytes as hex ('-' reads stdin)")
    _add_common(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    raw = sys.stdin.read() if args.hex == "-" else args.hex
    try:
        parsed = parse_packet(from_hex(raw))
    except MeshXTError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    table = Table(title="MeshXT Decode", show_header=False)
    table.add_row("Message", escape(parsed.message))
    table.add_row("Compression", parsed.header.compression.label)
    table.add_row("FEC level", parsed.header.fec.label)
    table.add_row("Flags", f"0x{parsed.header.flags:X}")
    table.add_row("Errors fixed", str(parsed.stats.errors_corrected))
    if parsed.template is not None:
        table.add_row("Template", parsed.template.template)
    console.print(table)
    return 0


def _handle_bench(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="meshxt bench", description="Compare encodings of a message.")
    parser.add_argument("message", help="Text message to benchmark")
    _add_common(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    message: str = args.message
    original = len(message.encode("utf-8"))

    table = Table(title=f"MeshXT Benchmark: {escape(message)}")
    table.add_column("Encoding")
    table.add_column("Size", justify="right")
    table.add_column("Result")

    table.add_row("Original", format_bytes(original), "")
    compressed = compress(message)
    table.add_row("Substitution", format_bytes(len(compressed)), f"{_savings(original, len(compressed))} saved")
    template = find_template(message)
    if template is None:
        table.add_row("Codebook", "-", "no template match")
    else:
        encoded = encode_template(template)
        table.add_row("Codebook", format_bytes(len(encoded)), f"{_savings(original, len(encoded))} saved")

    for level in (FECLevel.LOW, FECLevel.MEDIUM, FECLevel.HIGH):
        label = f"Packet ({level.label})"
        try:
            result = build_packet(message, PacketOptions(fec=level))
        except MeshXTError as exc:
            table.add_row(label, "-", f"error - {escape(str(exc))}")
            continue
        rec = recommend(result.stats.total_size)
        table.add_row(label, format_bytes(result.stats.total_size), f"~{rec.range_km}km SF{rec.spreading_factor}")

    console.print(table)
    return 0


def _handle_range(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="meshxt range", description="Estimate LoRa range.")
    parser.add_argument("--sf", type=int, default=12, choices=range(7, 13), help="Spreading factor")
    parser.add_argument("--bw", type=int, default=125, choices=[125, 250, 500], help="Bandwidth in kHz")
    parser.add_argument("--power", type=float, default=14.0, help="Transmit power in dBm")
    parser.add_argument("--antenna", type=float, default=3.0, help="Antenna gain in dBi")
    _add_common(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    estimate = range_estimate(args.sf, args.bw, args.power, args.antenna)
    table = Table(title="MeshXT Range Estimate", show_header=False)
    table.add_row("SF", str(args.sf))
    table.add_row("Bandwidth", f"{args.bw} kHz")
    table.add_row("TX power", f"{args.power} dBm")
    table.add_row("Antenna gain", f"{args.antenna} dBi")
    table.add_row("Est. range", f"~{estimate.range_km}km ({round(estimate.range_km * KM_TO_MILES)}mi)")
    table.add_row("Link budget", f"{estimate.link_budget}dB")
    table.add_row("Sensitivity", f"{estimate.sensitivity}dBm")
    console.print(table)
    return 0


def _handle_codebook(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="meshxt codebook", description="List codebook templates.")
    _add_common(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    table = Table(title="MeshXT Codebook Templates")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Text")
    table.add_column("Params")
    for info in list_templates():
        table.add_row(f"0x{info.id:02X}", info.name, escape(info.text), ", ".join(info.param_names))
    console.print(table)
    return 0


_COMMANDS = {
    "encode": _handle_encode,
    "decode": _handle_decode,
    "bench": _handle_bench,
    "range": _handle_range,
    "codebook": _handle_codebook,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshxt",
        description="Compression and error correction for small-payload radio packets.",
    )
    subparsers = parser.add_subparsers(dest="command")
    for command in _COMMANDS:
        subparsers.add_parser(command)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args: List[str] = list(argv) if argv is not None else sys.argv[1:]
    if not args or args[0] in {"help", "-h", "--help"}:
        build_parser().print_help()
        return 0

    command, rest = args[0], args[1:]
    handler = _COMMANDS.get(command)
    if handler is None:
        console.print(f"[red]Error:[/red] unknown command '{escape(command)}'")
        build_parser().print_help()
        return 1
    return handler(rest)


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
