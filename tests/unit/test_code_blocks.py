from __future__ import annotations

from markdown_rtf.code_blocks import (
    CODE_MARGIN,
    block_padding,
    blank_code_line,
    is_code_line,
    normalize_fenced_blocks,
    render_code_line,
    rendered_width,
)
from markdown_rtf.escaping import unescape_text
from markdown_rtf.palette import Palette
from markdown_rtf.settings import RtfSettings

PALETTE = Palette.from_settings(RtfSettings())


def test_code_lines_start_with_tab_or_four_spaces() -> None:
    assert is_code_line("\tx")
    assert is_code_line("    x")
    assert not is_code_line("   x")


def test_rendered_width_counts_tabs() -> None:
    assert rendered_width("\t\tab", 4) == 10


def test_block_padding_uses_widest_line_of_block() -> None:
    lines = ["text", "    " + "y" * 60, "    short", "plain", "    " + "z" * 90]
    assert block_padding(lines, 1, 50, 5) == 64 + CODE_MARGIN
    assert block_padding(lines, 2, 50, 5) == 50 + CODE_MARGIN


def test_blank_code_line_layout() -> None:
    assert blank_code_line(4, PALETTE) == (
        "\\cf3 \\f1 \\highlight4     \\highlight0 \\f0 \\cf1 \\par \n"
    )


def test_render_code_line_compensates_for_escapes_and_tabs() -> None:
    out = render_code_line("\t{}", 20, 5, PALETTE)
    text = out.split("\\highlight4 ", 1)[1].split("\\highlight0 ", 1)[0]
    assert text.startswith("\t\\'7b\\'7d")
    assert len(unescape_text(text).expandtabs(5)) == 20


def test_code_text_keeps_markdown_characters() -> None:
    out = render_code_line("    a *b* \\n", 20, 5, PALETTE)
    assert "    a *b* \\'5cn" in out


def test_normalize_fenced_blocks_indents_content() -> None:
    lines = ["intro", "```python", "def f():", "\treturn 1", "```", "outro"]
    updated, source_index = normalize_fenced_blocks(lines)
    assert updated == ["intro", "    def f():", "    \treturn 1", "outro"]
    assert source_index == [0, 2, 3, 5]


def test_fence_closes_only_with_same_marker() -> None:
    lines = ["~~~", "```", "x", "~~~", "y"]
    updated, source_index = normalize_fenced_blocks(lines)
    assert updated == ["    ```", "    x", "y"]
    assert source_index == [1, 2, 4]


def test_unclosed_fence_runs_to_end() -> None:
    updated, _ = normalize_fenced_blocks(["```", "a", "b"])
    assert updated == ["    a", "    b"]
