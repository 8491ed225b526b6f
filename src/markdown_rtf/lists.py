from __future__ import annotations

import logging
import re

from markdown_rtf.escaping import hex_escape, unicode_escape
from markdown_rtf.palette import Palette
from markdown_rtf.settings import RtfSettings
from markdown_rtf.state import ConversionState

logger = logging.getLogger(__name__)

BULLET = unicode_escape(chr(0x2022))
MARKER_WIDTH = 4

# Prefix as it appears after escaping -> prefix the raw next line must carry.
_UNORDERED_PREFIXES = {
    "- ": "- ",
    "+ ": "+ ",
    hex_escape("*") + " ": "* ",
}
_ORDERED_MARKER_RE = re.compile(r"^([0-9]+)([.)])(?=\s|$)")


def _starts_with_digit(line: str) -> bool:
    return line[:1].isdigit() and line[:1].isascii()


def unordered_list_item(
    line: str, next_line: str, state: ConversionState, palette: Palette
) -> str:
    prefix = next((p for p in _UNORDERED_PREFIXES if line.startswith(p)), None)
    if prefix is None:
        if state.unordered_list_active:
            logger.debug("Ending unordered list before: %s", line)
        state.unordered_list_active = False
        return line

    next_matches = next_line.startswith(_UNORDERED_PREFIXES[prefix])
    if not next_matches and not state.unordered_list_active:
        return line

    if not state.unordered_list_active:
        logger.debug("Starting unordered list: %s", line)
    state.unordered_list_active = True
    return (
        palette.list_marker.as_font_color()
        + f" {BULLET}  "
        + palette.text.as_font_color()
        + line[len(prefix) :]
    )


def ordered_list_item(
    line: str, next_line: str, state: ConversionState, palette: Palette
) -> str:
    if not _starts_with_digit(line):
        if state.ordered_list_active:
            logger.debug("Ending ordered list before: %s", line)
        state.ordered_list_active = False
        return line

    # A lone numbered sentence is not a list.
    if not state.ordered_list_active and not _starts_with_digit(next_line):
        return line

    match = _ORDERED_MARKER_RE.match(line)
    if match is None:
        state.ordered_list_active = False
        return line

    if not state.ordered_list_active:
        logger.debug("Starting ordered list: %s", line)
        state.next_ordinal = 1
    state.ordered_list_active = True

    digits, delimiter = match.groups()
    marker = f"{state.next_ordinal}{delimiter}".rjust(len(digits) + 1).ljust(MARKER_WIDTH)
    state.next_ordinal += 1

    rest = line[match.end() :]
    if rest.startswith(" "):
        rest = rest[1:]
    return (
        palette.list_marker.as_font_color()
        + marker
        + palette.text.as_font_color()
        + rest
    )


def set_list_symbols(
    line: str,
    next_line: str,
    state: ConversionState,
    settings: RtfSettings,
    palette: Palette,
) -> str:
    updated = line
    if settings.allow_unordered_list:
        updated = unordered_list_item(line, next_line, state, palette)
    if updated != line:
        state.ordered_list_active = False
        return updated
    if settings.allow_ordered_list:
        return ordered_list_item(line, next_line, state, palette)
    return line
