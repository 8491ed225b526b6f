from __future__ import annotations

from markdown_rtf.blocks import (
    heading_level,
    is_comment_only,
    parse_column_widths,
    remove_comments,
    set_heading,
)
from markdown_rtf.palette import Palette
from markdown_rtf.settings import RtfSettings
from markdown_rtf.state import LineKind, classify_line

SETTINGS = RtfSettings()
PALETTE = Palette.from_settings(SETTINGS)


def test_heading_level() -> None:
    assert heading_level("# a") == 1
    assert heading_level("  ### a") == 3
    assert heading_level("####### a") == 0
    assert heading_level("plain") == 0


def test_set_heading_wraps_in_color_and_size() -> None:
    out = set_heading("### Section", SETTINGS.half_point_sizes(), PALETTE)
    assert out == "\\cf2 \\fs30 Section\\fs20\\cf1 "


def test_set_heading_follows_custom_sizes() -> None:
    settings = RtfSettings(h1_point_size=30, default_point_size=12)
    out = set_heading("#Top", settings.half_point_sizes(), PALETTE)
    assert out == "\\cf2 \\fs60 Top\\fs24\\cf1 "


def test_remove_comments() -> None:
    assert remove_comments("a <!-- x --> b <!--y--> c") == "a  b  c"
    assert remove_comments("keep <!-- never closed") == "keep "


def test_is_comment_only() -> None:
    assert is_comment_only("  <!-- note -->  ")
    assert not is_comment_only("text <!-- note -->")
    assert not is_comment_only("plain")


def test_parse_column_widths() -> None:
    assert parse_column_widths("<!---CW:2000:4000:1000:-->") == [2000, 4000, 1000]
    assert parse_column_widths("<!---CW:abc:1500: 300 :-->") == [1500, 300]
    assert parse_column_widths("<!---CW:x:-->") == []
    assert parse_column_widths("<!-- 100:200 -->") == []


def test_column_widths_ignore_text_after_directive() -> None:
    assert parse_column_widths("<!---CW:100:--> 200:300") == [100]


def test_classify_line() -> None:
    assert classify_line("    code") is LineKind.CODE
    assert classify_line("<!-- c -->") is LineKind.COMMENT
    assert classify_line("## h") is LineKind.HEADING
    assert classify_line("| a |") is LineKind.TABLE_ROW
    assert classify_line("- a") is LineKind.PLAIN
    assert classify_line("text") is LineKind.PLAIN
