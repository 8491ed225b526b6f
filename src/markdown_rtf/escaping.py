from __future__ import annotations

import re

# Characters a Markdown backslash escape turns into literal text.
MARKDOWN_ESCAPABLE = frozenset("\\#*_[]{}`()+-.!|")
RTF_GROUP_CHARS = frozenset("{}")
MAX_ASCII = 0x7F

_ESCAPE_RE = re.compile(r"\\'([0-9a-fA-F]{2})|\\u(-?\d+)\?")


def hex_escape(ch: str) -> str:
    return f"\\'{ord(ch):02x}"


def escape_literal(text: str) -> str:
    return "".join(hex_escape(ch) for ch in text)


def unicode_escape(ch: str) -> str:
    """Return the RTF \\uN? form of one character.

    One escape is written per UTF-16 code unit, so characters outside the
    Basic Multilingual Plane become a surrogate pair of two escapes. N is a
    signed 16-bit value as RTF readers expect.
    """
    encoded = ch.encode("utf-16-le", "surrogatepass")
    parts: list[str] = []
    for offset in range(0, len(encoded), 2):
        unit = int.from_bytes(encoded[offset : offset + 2], "little")
        if unit > 0x7FFF:
            unit -= 0x10000
        parts.append(f"\\u{unit}?")
    return "".join(parts)


def escape_unicode(text: str) -> str:
    return "".join(ch if ord(ch) <= MAX_ASCII else unicode_escape(ch) for ch in text)


def escape_text(line: str, raw: bool = False) -> tuple[str, int]:
    """Make a source line safe to embed in RTF.

    Prose mode resolves Markdown backslash escapes into hex escapes, then
    escapes leftover backslashes, braces and non-ASCII characters. Raw mode
    (code blocks) skips Markdown escapes so every backslash survives
    literally. Returns the escaped text and the number of characters the
    escaping added.
    """
    out: list[str] = []
    i = 0
    length = len(line)
    while i < length:
        ch = line[i]
        if ch == "\\":
            nxt = line[i + 1] if i + 1 < length else ""
            if not raw and nxt in MARKDOWN_ESCAPABLE:
                out.append(hex_escape(nxt))
                i += 2
                continue
            out.append(hex_escape(ch))
        elif ch in RTF_GROUP_CHARS:
            out.append(hex_escape(ch))
        elif ord(ch) > MAX_ASCII:
            out.append(unicode_escape(ch))
        else:
            out.append(ch)
        i += 1
    text = "".join(out)
    return text, len(text) - len(line)


def unescape_text(text: str) -> str:
    """Reverse hex and Unicode escapes, for values handed back to callers
    (image URLs) rather than to an RTF reader."""

    def _decode(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return chr(int(match.group(1), 16))
        value = int(match.group(2))
        if value < 0:
            value += 0x10000
        return chr(value)

    decoded = _ESCAPE_RE.sub(_decode, text)
    return decoded.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")
