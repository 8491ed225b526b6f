from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from markdown_rtf.blocks import heading_level, is_comment_only
from markdown_rtf.code_blocks import is_code_line


class LineKind(Enum):
    CODE = "code"
    HEADING = "heading"
    COMMENT = "comment"
    TABLE_ROW = "table_row"
    PLAIN = "plain"


def classify_line(line: str) -> LineKind:
    if is_code_line(line):
        return LineKind.CODE
    if is_comment_only(line):
        return LineKind.COMMENT
    stripped = line.lstrip()
    if stripped.startswith("#") and heading_level(stripped) > 0:
        return LineKind.HEADING
    if stripped.startswith("|"):
        return LineKind.TABLE_ROW
    return LineKind.PLAIN


@dataclass
class ConversionState:
    """Cross-line state of one conversion call. Never shared between calls."""

    code_block_active: bool = False
    code_padding: int = 0
    ordered_list_active: bool = False
    next_ordinal: int = 1
    unordered_list_active: bool = False
    column_widths: list[int] = field(default_factory=list)

    def end_lists(self) -> None:
        self.ordered_list_active = False
        self.unordered_list_active = False
