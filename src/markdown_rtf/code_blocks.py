from __future__ import annotations

import re

from markdown_rtf.escaping import escape_text
from markdown_rtf.palette import BODY_FONT, CODE_FONT, Palette

CODE_INDENTS = ("\t", "    ")
CODE_MARGIN = 3
FENCE_INDENT = "    "
_FENCE_RE = re.compile(r"^ {0,3}(```|~~~)")


def is_code_line(line: str) -> bool:
    return line.startswith(CODE_INDENTS)


def rendered_width(line: str, tab_length: int) -> int:
    return sum(tab_length if ch == "\t" else 1 for ch in line)


def block_padding(lines: list[str], start: int, min_width: int, tab_length: int) -> int:
    """Width every line of the block starting at start is padded to, so the
    background highlight renders as one even rectangle."""
    widest = 0
    for line in lines[start:]:
        if not is_code_line(line):
            break
        widest = max(widest, rendered_width(line, tab_length))
    return max(widest, min_width) + CODE_MARGIN


def code_line(text: str, width: int, palette: Palette) -> str:
    return (
        palette.code_foreground.as_font_color()
        + CODE_FONT
        + palette.code_background.as_background_color()
        + text.ljust(width)
        + "\\highlight0 "
        + BODY_FONT
        + palette.text.as_font_color()
        + "\\par \n"
    )


def blank_code_line(padding: int, palette: Palette) -> str:
    return code_line("", padding, palette)


def render_code_line(line: str, padding: int, tab_length: int, palette: Palette) -> str:
    escaped, added = escape_text(line, raw=True)
    # A tab occupies tab_length columns but only one character.
    tab_extra = line.count("\t") * (tab_length - 1)
    return code_line(escaped, padding + added - tab_extra, palette)


def normalize_fenced_blocks(lines: list[str]) -> tuple[list[str], list[int]]:
    """Rewrite ``` / ~~~ fenced blocks as indented code lines.

    Fence lines are dropped. Returns the rewritten lines and, for each of
    them, the index of the source line it came from.
    """
    updated: list[str] = []
    source_index: list[int] = []
    fence: str | None = None
    for idx, line in enumerate(lines):
        match = _FENCE_RE.match(line)
        if match and (fence is None or match.group(1) == fence):
            fence = match.group(1) if fence is None else None
            continue
        updated.append(FENCE_INDENT + line if fence is not None else line)
        source_index.append(idx)
    return updated, source_index
