from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pydantic import ValidationError

from markdown_rtf.config import load_environment, resolve_settings
from markdown_rtf.converter import RtfConverter
from markdown_rtf.io_helpers import default_output_path, read_markdown, write_text_atomic
from markdown_rtf.settings import ParseErrorOutput, RtfSettings, dump_settings


def _load_settings_or_exit(settings_path: str | None, parse_errors: str | None) -> RtfSettings:
    try:
        return resolve_settings(settings_path, parse_errors)
    except ValidationError as e:
        print("\nSettings validation error:\n")
        print(e)
        raise SystemExit(1)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        raise SystemExit(1)


def run_convert(
    input_path: str,
    output_path: str | None = None,
    settings_path: str | None = None,
    parse_errors: str | None = None,
    strict: bool = False,
) -> int:
    md_file = Path(input_path)
    if not md_file.is_file():
        print(f"ERROR: input not found: {md_file}")
        return 2
    out_file = Path(output_path) if output_path else default_output_path(md_file)

    try:
        source = read_markdown(md_file)
    except UnicodeDecodeError as e:
        print(f"ERROR: input is not UTF-8 text: {md_file} ({e.reason})")
        return 2

    settings = _load_settings_or_exit(settings_path, parse_errors)
    converter = RtfConverter(settings, base_dir=md_file.resolve().parent)
    result = converter.convert(source)
    write_text_atomic(out_file, result.rtf)
    print(f"RTF generated: {out_file}")

    for message in result.errors:
        print(message)
    if strict and not result.ok:
        print(f"{len(result.diagnostics)} line(s) failed to convert.")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="markdown-rtf")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser("convert", help="Convert a Markdown file to RTF")
    convert_parser.add_argument("input", help="Markdown file to convert")
    convert_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Path of the RTF file to write (default: input path with .rtf suffix)",
    )
    convert_parser.add_argument(
        "--settings",
        default=None,
        help="Settings JSON file (default: MARKDOWN_RTF_SETTINGS env or built-in defaults)",
    )
    convert_parser.add_argument(
        "--parse-errors",
        default=None,
        choices=[policy.value for policy in ParseErrorOutput],
        help="What to emit for a line that fails to convert "
        "(default: MARKDOWN_RTF_PARSE_ERRORS env or error_text_and_raw_text)",
    )
    convert_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any line failed to convert.",
    )
    convert_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log list, table and image decisions.",
    )

    settings_parser = subparsers.add_parser("settings", help="Print effective settings as JSON")
    settings_parser.add_argument("--settings", default=None, help="Settings JSON file")

    args = parser.parse_args(argv)
    load_environment()

    if args.command == "convert":
        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        return run_convert(
            args.input,
            output_path=args.output,
            settings_path=args.settings,
            parse_errors=args.parse_errors,
            strict=args.strict,
        )

    if args.command == "settings":
        print(dump_settings(_load_settings_or_exit(args.settings, None)))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
