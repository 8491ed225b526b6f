from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Callable

from markdown_rtf.escaping import escape_text

logger = logging.getLogger(__name__)

MIN_TABLE_ROWS = 3  # header, separator, at least one data row
DEFAULT_COLUMN_STEP = 2000
ROW_GAP = 150
SEPARATOR_ROW = 1

_PIPE_RE = re.compile(r"(?<!\\)\|")


@dataclass(frozen=True)
class TableSpec:
    start: int
    rows: list[str]
    columns: int

    @property
    def end(self) -> int:
        return self.start + len(self.rows) - 1


def is_table_row(line: str) -> bool:
    return line.lstrip().startswith("|")


def find_table(lines: list[str], start: int) -> TableSpec | None:
    rows: list[str] = []
    for line in lines[start:]:
        if not is_table_row(line):
            break
        rows.append(line)
    if len(rows) < MIN_TABLE_ROWS:
        logger.debug("Only %d pipe rows at line %d, not a table", len(rows), start)
        return None
    columns = max(1, len(_PIPE_RE.findall(rows[0].strip())) - 1)
    return TableSpec(start=start, rows=rows, columns=columns)


def cell_boundaries(columns: int, widths: list[int]) -> list[int]:
    """Right edge of each cell in Twips."""
    if len(widths) >= columns:
        return list(itertools.accumulate(widths[:columns]))
    return [(idx + 1) * DEFAULT_COLUMN_STEP for idx in range(columns)]


def split_cells(row: str, columns: int) -> list[str]:
    text = row.strip()
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    cells = [cell.strip() for cell in _PIPE_RE.split(text)]
    if len(cells) < columns:
        cells = cells + [""] * (columns - len(cells))
    return cells[:columns]


def render_table(
    table: TableSpec, column_widths: list[int], render_cell: Callable[[str], str]
) -> str:
    boundaries = cell_boundaries(table.columns, column_widths)
    out: list[str] = []
    for offset, row in enumerate(table.rows):
        if offset == SEPARATOR_ROW:
            continue
        out.append(f"\\trowd\\trgaph{ROW_GAP}\n")
        for boundary in boundaries:
            out.append(f"\\cellx{boundary}\n")
        for cell in split_cells(row, table.columns):
            escaped, _ = escape_text(cell)
            out.append(render_cell(escaped))
            out.append("\\intbl\\cell\n")
        out.append("\\row \n")
    out.append("\\pard")
    return "".join(out)
