from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from markdown_rtf.blocks import has_comment, parse_column_widths, remove_comments, set_heading
from markdown_rtf.code_blocks import (
    blank_code_line,
    block_padding,
    is_code_line,
    normalize_fenced_blocks,
    render_code_line,
)
from markdown_rtf.escaping import escape_text
from markdown_rtf.images import ImageLoader, ImageResolver
from markdown_rtf.links import set_images, set_links
from markdown_rtf.lists import set_list_symbols
from markdown_rtf.palette import Palette, document_header
from markdown_rtf.settings import RtfSettings
from markdown_rtf.state import ConversionState, LineKind, classify_line
from markdown_rtf.styles import apply_inline_styles
from markdown_rtf.tables import find_table, render_table

logger = logging.getLogger(__name__)

PARSE_ERROR_TEXT = "PARSE ERROR"
PARAGRAPH_BREAK = "\\par \n"
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class ParseDiagnostic:
    line_index: int
    line: str
    output: str

    @property
    def message(self) -> str:
        return f"Parse error on line {self.line_index:>3}: {self.line}"


@dataclass
class ConversionResult:
    rtf: str
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [diagnostic.message for diagnostic in self.diagnostics]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def split_lines(source: str | Sequence[str]) -> list[str]:
    if isinstance(source, str):
        lines = _LINE_BREAK_RE.split(source)
        if lines and lines[-1] == "":
            lines.pop()
        return lines
    return list(source)


class RtfConverter:
    """Markdown to RTF converter.

    Holds only settings; every call to convert() runs in its own session
    with fresh state, so one instance can serve many documents.
    """

    def __init__(
        self,
        settings: RtfSettings | None = None,
        image_resolver: ImageResolver | None = None,
        base_dir: str | Path | None = None,
    ) -> None:
        self.settings = settings or RtfSettings()
        self.image_resolver = image_resolver
        self.base_dir = base_dir

    def convert(
        self,
        source: str | Sequence[str],
        *,
        image_resolver: ImageResolver | None = None,
        base_dir: str | Path | None = None,
    ) -> ConversionResult:
        resolver = image_resolver or self.image_resolver
        if resolver is None:
            resolver = ImageLoader(
                base_dir or self.base_dir, timeout_s=self.settings.image_timeout_s
            )
        session = _ConversionSession(self.settings, resolver)
        return session.run(split_lines(source))


def convert_markdown(
    source: str | Sequence[str],
    settings: RtfSettings | None = None,
    image_resolver: ImageResolver | None = None,
    base_dir: str | Path | None = None,
) -> ConversionResult:
    return RtfConverter(settings).convert(
        source, image_resolver=image_resolver, base_dir=base_dir
    )


class _ConversionSession:
    def __init__(self, settings: RtfSettings, resolver: ImageResolver) -> None:
        self.settings = settings
        self.resolver = resolver
        self.palette = Palette.from_settings(settings)
        self.sizes = settings.half_point_sizes()
        self.state = ConversionState()
        self.diagnostics: list[ParseDiagnostic] = []
        self.source_lines: list[str] = []
        self.lines: list[str] = []
        self.source_index: list[int] = []

    def run(self, source_lines: list[str]) -> ConversionResult:
        self.source_lines = source_lines
        self.lines, self.source_index = normalize_fenced_blocks(source_lines)

        out: list[str] = [
            document_header(self.settings, self.palette),
            "\n",
            self.palette.text.as_font_color(),
            f"\\fs{self.sizes[0]} ",
        ]
        i = 0
        while i < len(self.lines):
            if self.state.code_block_active and not is_code_line(self.lines[i]):
                out.append(self._close_code_block())
            try:
                chunk, i = self._convert_line(i)
            except Exception as err:
                chunk = self._recover(i, err)
            out.append(chunk)
            i += 1

        if self.state.code_block_active:
            out.append(self._close_code_block())
        out.append("}")
        return ConversionResult(rtf="".join(out), diagnostics=list(self.diagnostics))

    def _convert_line(self, i: int) -> tuple[str, int]:
        """Render line i. Returns the RTF and the index of the last source
        line consumed (tables consume several)."""
        line = self.lines[i]
        kind = classify_line(line)
        if kind is LineKind.CODE:
            return self._code_line(i, line), i

        if kind is LineKind.COMMENT:
            # Whole-line comments emit nothing, not even a paragraph break.
            self._apply_column_widths(line)
            return "", i

        if kind is LineKind.TABLE_ROW:
            table = find_table(self.lines, i)
            if table is not None:
                self.state.end_lists()
                body = render_table(table, self.state.column_widths, self._render_cell)
                body = set_links(body, self.palette)
                return body + "\n" + PARAGRAPH_BREAK, table.end

        next_line = self.lines[i + 1] if i + 1 < len(self.lines) else ""
        return self._prose_line(line, next_line, kind) + "\n" + PARAGRAPH_BREAK, i

    def _prose_line(self, line: str, next_line: str, kind: LineKind) -> str:
        heading = kind is LineKind.HEADING
        text, _ = escape_text(line)
        # Style pairing only sees visible text.
        if has_comment(text):
            self._apply_column_widths(text)
            text = remove_comments(text)
        if heading:
            text = set_heading(text, self.sizes, self.palette)
        text = apply_inline_styles(text, self.settings)
        text = set_images(text, self.resolver, self.palette, heading)
        text = set_list_symbols(text, next_line, self.state, self.settings, self.palette)
        return set_links(text, self.palette, heading)

    def _render_cell(self, text: str) -> str:
        text = apply_inline_styles(text, self.settings)
        return set_images(text, self.resolver, self.palette)

    def _code_line(self, i: int, line: str) -> str:
        chunks: list[str] = []
        self.state.end_lists()
        if not self.state.code_block_active:
            self.state.code_padding = block_padding(
                self.lines, i, self.settings.code_block_min_width, self.settings.tab_length
            )
            self.state.code_block_active = True
            chunks.append(blank_code_line(self.state.code_padding, self.palette))
        chunks.append(
            render_code_line(
                line, self.state.code_padding, self.settings.tab_length, self.palette
            )
        )
        return "".join(chunks)

    def _close_code_block(self) -> str:
        self.state.code_block_active = False
        return blank_code_line(self.state.code_padding, self.palette)

    def _apply_column_widths(self, line: str) -> None:
        widths = parse_column_widths(line)
        if widths:
            logger.debug("Table column widths set to %s", widths)
            self.state.column_widths = widths

    def _recover(self, i: int, err: Exception) -> str:
        policy = self.settings.parse_error_output
        source_line = self.source_lines[self.source_index[i]]
        parts: list[str] = []
        if policy.shows_error:
            parts.append(PARSE_ERROR_TEXT)
        if policy.shows_error and policy.shows_raw:
            parts.append(": ")
        if policy.shows_raw:
            parts.append(escape_text(source_line)[0])
        output = "".join(parts) + PARAGRAPH_BREAK
        diagnostic = ParseDiagnostic(self.source_index[i], source_line, output)
        logger.warning("%s (%s: %s)", diagnostic.message, type(err).__name__, err)
        self.diagnostics.append(diagnostic)
        return output
