"""Entry point for the ``tmxreader`` command."""

from __future__ import annotations

import argparse
import sys

from tmxreader import config
from tmxreader.models import PlainText, TextPart, TranslationUnit
from tmxreader.parser import TmxParser


def _render(parts: tuple[TextPart, ...] | None) -> str:
    if parts is None:
        return "(none)"
    return "".join(
        p.text if isinstance(p, PlainText) else f"<{p.format_type}/>" for p in parts
    )


def _describe_unit(number: int, unit: TranslationUnit) -> str:
    lines = [
        f"#{number} [{unit.confirmation_level.label}]"
        + (f" domain={unit.domain}" if unit.domain else ""),
        f"  {unit.source_language or '?'}: {_render(unit.source)}",
        f"  {unit.target_language or '?'}: {_render(unit.target)}",
    ]
    return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmxreader",
        description="Print the header and translation units of a TMX file.",
    )
    parser.add_argument("file", help="TMX file to read")
    parser.add_argument(
        "--units", type=int, default=10, metavar="N",
        help="number of units to print (default: 10, -1 for all)",
    )
    parser.add_argument("--log-level", default=None, help="override the log_level setting")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config.configure_logging(args.log_level)

    tmx = TmxParser(args.file)
    if tmx.has_error:
        print(tmx.error_message, file=sys.stderr)
        return 1

    header = tmx.header
    print(f"File:     {tmx.file_path}")
    print(f"Source:   {header.source_language or '?'}")
    print(f"Target:   {header.target_language or '?'}")
    print(f"Domains:  {', '.join(header.domains) or '-'}")
    print(f"Author:   {header.author or '-'}")
    if header.creation_date is not None:
        print(f"Created:  {header.creation_date.isoformat()}")

    tmx.wait_until_loaded()
    if tmx.has_error:
        print(tmx.error_message, file=sys.stderr)
        return 1

    units = tmx.translation_units
    print(f"Units:    {len(units)}")
    shown = units if args.units < 0 else units[: args.units]
    for number, unit in enumerate(shown, start=1):
        print()
        print(_describe_unit(number, unit))
    return 0


if __name__ == "__main__":
    sys.exit(main())
