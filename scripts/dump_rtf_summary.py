from __future__ import annotations

import argparse
import json
import re
from pathlib import Path
from typing import Any

from striprtf.striprtf import rtf_to_text

# Control word -> summary key. Each pattern only matches the word itself,
# never a longer word sharing its prefix (\i vs \intbl).
_CONTROL_WORD_COUNTS = {
    "bold_spans": r"\\b ",
    "italic_spans": r"\\i ",
    "table_rows": r"\\trowd",
    "table_cells": r"\\cell(?![a-z])",
    "pictures": r"\\pict",
    "hyperlinks": r"HYPERLINK ",
    "paragraphs": r"\\par(?![a-z])",
    "code_lines": r"\\highlight[1-9][0-9]* ",
}


def summarize_rtf(rtf: str) -> dict[str, Any]:
    summary: dict[str, Any] = {
        key: len(re.findall(pattern, rtf)) for key, pattern in _CONTROL_WORD_COUNTS.items()
    }
    summary["text"] = rtf_to_text(rtf)
    return summary


def summarize_rtf_file(rtf_path: str | Path) -> dict[str, Any]:
    path = Path(rtf_path)
    summary = summarize_rtf(path.read_text(encoding="ascii"))
    summary["rtf_path"] = str(path)
    return summary


def assert_span_thresholds(
    summary: dict[str, Any],
    *,
    min_bold: int = 0,
    min_italic: int = 0,
    min_code: int = 0,
) -> None:
    failures: list[str] = []
    for key, minimum in (
        ("bold_spans", min_bold),
        ("italic_spans", min_italic),
        ("code_lines", min_code),
    ):
        if summary.get(key, 0) < minimum:
            failures.append(f"{key}={summary.get(key, 0)} is below required minimum {minimum}")
    if failures:
        raise AssertionError("; ".join(failures))


def assert_expected_substrings(summary: dict[str, Any], expected: list[str]) -> None:
    missing = [snippet for snippet in expected if snippet not in summary.get("text", "")]
    if missing:
        raise AssertionError(f"Missing expected substrings: {missing}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump and assert RTF styling counts.")
    parser.add_argument("rtf_path", help="Path to .rtf file")
    parser.add_argument("--min-bold", type=int, default=0, help="Minimum bold spans required")
    parser.add_argument(
        "--min-italic", type=int, default=0, help="Minimum italic spans required"
    )
    parser.add_argument("--min-code", type=int, default=0, help="Minimum code lines required")
    parser.add_argument(
        "--expect-substring",
        action="append",
        default=[],
        help="Substring expected in the plain text of the document (repeatable)",
    )
    args = parser.parse_args()

    summary = summarize_rtf_file(args.rtf_path)
    print(json.dumps(summary, indent=2, ensure_ascii=True))

    try:
        assert_span_thresholds(
            summary,
            min_bold=args.min_bold,
            min_italic=args.min_italic,
            min_code=args.min_code,
        )
        assert_expected_substrings(summary, args.expect_substring)
    except AssertionError as exc:
        print(f"ASSERTION FAILED: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
