from __future__ import annotations

from markdown_rtf.palette import Palette

HEADING_MARK = "#"
MAX_HEADING_LEVEL = 6

COMMENT_START = "<!--"
COMMENT_END = "-->"
# <!---CW:2000:4000:1000:--> sets the Twip width of each column of the
# tables that follow, until the next directive.
COLUMN_WIDTH_DIRECTIVE = "<!---CW:"


def heading_level(line: str) -> int:
    stripped = line.lstrip()
    level = len(stripped) - len(stripped.lstrip(HEADING_MARK))
    if level > MAX_HEADING_LEVEL:
        return 0
    return level


def set_heading(line: str, half_point_sizes: list[int], palette: Palette) -> str:
    level = heading_level(line)
    if level == 0:
        return line
    text = line.lstrip()[level:]
    if text.startswith(" "):
        text = text[1:]
    return (
        palette.heading.as_font_color()
        + f"\\fs{half_point_sizes[level]} "
        + text
        + f"\\fs{half_point_sizes[0]}"
        + palette.text.as_font_color()
    )


def has_comment(line: str) -> bool:
    return COMMENT_START in line


def remove_comments(line: str) -> str:
    while COMMENT_START in line:
        start = line.index(COMMENT_START)
        end = line.find(COMMENT_END, start + len(COMMENT_START))
        if end == -1:
            return line[:start]
        line = line[:start] + line[end + len(COMMENT_END) :]
    return line


def is_comment_only(line: str) -> bool:
    return has_comment(line) and not remove_comments(line).strip()


def parse_column_widths(line: str) -> list[int]:
    start = line.find(COLUMN_WIDTH_DIRECTIVE)
    if start == -1:
        return []
    end = line.find(COMMENT_END, start + len(COLUMN_WIDTH_DIRECTIVE))
    directive = line[start + len(COLUMN_WIDTH_DIRECTIVE) : end if end != -1 else None]
    widths: list[int] = []
    for token in directive.split(":"):
        token = token.strip()
        if token.isdigit() and token.isascii():
            widths.append(int(token))
    return widths
