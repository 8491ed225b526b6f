from __future__ import annotations

from markdown_rtf.escaping import (
    escape_literal,
    escape_text,
    escape_unicode,
    unescape_text,
    unicode_escape,
)


def test_markdown_escapes_become_hex() -> None:
    text, added = escape_text(r"\*not italic\* and \# and \\")
    assert text == "\\'2anot italic\\'2a and \\'23 and \\'5c"
    assert added == len(text) - len(r"\*not italic\* and \# and \\")


def test_braces_and_lone_backslash_are_escaped() -> None:
    text, _ = escape_text("a{b}\\q")
    assert text == "a\\'7bb\\'7d\\'5cq"


def test_trailing_backslash_is_kept() -> None:
    assert escape_text("end\\")[0] == "end\\'5c"


def test_raw_mode_keeps_every_backslash() -> None:
    text, added = escape_text("path\\*x{", raw=True)
    assert text == "path\\'5c*x\\'7b"
    assert added == 6


def test_non_ascii_becomes_unicode_escape() -> None:
    assert escape_text("é")[0] == f"\\u{233}?"
    assert escape_unicode("aé") == f"a\\u{233}?"


def test_high_bmp_characters_are_signed() -> None:
    # U+FF01 is above 0x7FFF, so RTF wants it as a negative 16-bit value.
    assert unicode_escape(chr(0xFF01)) == f"\\u{0xFF01 - 0x10000}?"


def test_non_bmp_characters_become_surrogate_pairs() -> None:
    assert unicode_escape(chr(0x1F600)) == f"\\u{0xD83D - 0x10000}?\\u{0xDE00 - 0x10000}?"


def test_escape_literal_hex_escapes_each_char() -> None:
    assert escape_literal("**") == "\\'2a\\'2a"


def test_unescape_reverses_escapes() -> None:
    source = "images/a{1}\\b é " + chr(0x1F600)
    escaped, _ = escape_text(source, raw=True)
    assert unescape_text(escaped) == source


def test_escaped_output_is_ascii() -> None:
    text, _ = escape_text("naïve ☃ {x} " + chr(0x1F600))
    assert text.isascii()
