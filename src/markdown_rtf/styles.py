from __future__ import annotations

import re
from dataclasses import dataclass

from markdown_rtf.escaping import escape_literal, hex_escape, unicode_escape
from markdown_rtf.settings import RtfSettings

STYLE_CHARS = ("*", "_")
TEXT_SPAN = "text"
TAG_SPAN = "tag"

# Link and image targets are never styled: "](" up to the closing paren.
_LINK_TARGET_RE = re.compile(r"\]\([^)]*\)")
_BULLET_ASTERISK = "* "


@dataclass(frozen=True)
class Span:
    kind: str
    text: str


def escape_non_style_runs(line: str, chars: tuple[str, ...] = STYLE_CHARS) -> str:
    """Three or more style characters in a row are text, not markers."""
    for ch in chars:
        if ch * 3 not in line:
            continue
        literal = unicode_escape(ch)
        line = re.sub(
            re.escape(ch) + "{3,}",
            lambda match: literal * len(match.group(0)),
            line,
        )
    if line.startswith(_BULLET_ASTERISK):
        line = hex_escape("*") + line[1:]
    return line


def tokenize(line: str, tag: str) -> list[Span]:
    protected = [match.span() for match in _LINK_TARGET_RE.finditer(line)]
    spans: list[Span] = []
    text_start = 0
    i = 0
    while i < len(line):
        skip_to = _protected_end(protected, i)
        if skip_to is not None:
            i = skip_to
            continue
        if line.startswith(tag, i):
            if i > text_start:
                spans.append(Span(TEXT_SPAN, line[text_start:i]))
            spans.append(Span(TAG_SPAN, tag))
            i += len(tag)
            text_start = i
            continue
        i += 1
    if text_start < len(line):
        spans.append(Span(TEXT_SPAN, line[text_start:]))
    return spans


def _protected_end(protected: list[tuple[int, int]], index: int) -> int | None:
    for start, end in protected:
        if start <= index < end:
            return end
    return None


def apply_style(line: str, tag: str, control_word: str) -> str:
    """Pair occurrences of tag left to right into \\cw ... \\cw0 spans.

    An odd final occurrence has no partner and is written as its literal
    characters, so no unmatched control word reaches the output.
    """
    spans = tokenize(line, tag)
    remaining = sum(1 for span in spans if span.kind == TAG_SPAN)
    if remaining == 0:
        return line

    out: list[str] = []
    is_open = False
    for span in spans:
        if span.kind == TEXT_SPAN:
            out.append(span.text)
            continue
        if is_open:
            out.append(f"\\{control_word}0 ")
            is_open = False
        elif remaining >= 2:
            out.append(f"\\{control_word} ")
            is_open = True
        else:
            out.append(escape_literal(tag))
        remaining -= 1
    return "".join(out)


def apply_inline_styles(line: str, settings: RtfSettings) -> str:
    # Longer tags first so "**" is never read as two "*".
    line = escape_non_style_runs(line)
    line = apply_style(line, "**", "b")
    line = apply_style(line, "*", "i")
    if settings.allow_underscore_bold:
        line = apply_style(line, "__", "b")
    if settings.allow_underscore_italic:
        line = apply_style(line, "_", "i")
    return line
