from __future__ import annotations

import logging
import re

from markdown_rtf.escaping import unescape_text, unicode_escape
from markdown_rtf.images import ImageLoadError, ImageResolver, embed_image
from markdown_rtf.palette import Palette

logger = logging.getLogger(__name__)

# The closing bracket must be immediately followed by "(".
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]*)\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")
PLACEHOLDER_GLYPH = unicode_escape(chr(0x25A1))


def hyperlink_field(url: str, display: str, palette: Palette) -> str:
    target = url.strip().replace('"', "%22")
    return (
        '{\\field{\\*\\fldinst{HYPERLINK "'
        + target
        + '"}}{\\fldrslt{'
        + palette.link.as_font_color()
        + "\\ul "
        + display
        + "\\ul0 }}}"
    )


def _restore_color(palette: Palette, heading: bool) -> str:
    return (palette.heading if heading else palette.text).as_font_color()


def set_links(line: str, palette: Palette, heading: bool = False) -> str:
    if "](" not in line:
        return line

    def _link(match: re.Match[str]) -> str:
        title, url = match.group(1), match.group(2)
        return hyperlink_field(url, title or url, palette) + _restore_color(palette, heading)

    return _LINK_RE.sub(_link, line)


def image_placeholder(title: str, url: str, palette: Palette, heading: bool = False) -> str:
    label = title or url
    return (
        hyperlink_field(url, f"{PLACEHOLDER_GLYPH} {label}", palette)
        + _restore_color(palette, heading)
        + f" {label} ({url})"
    )


def render_image(
    title: str,
    url: str,
    resolver: ImageResolver | None,
    palette: Palette,
    heading: bool = False,
) -> str:
    if resolver is None:
        return image_placeholder(title, url, palette, heading)
    target = unescape_text(url.strip())
    try:
        data = resolver(target)
        if not data:
            raise ImageLoadError(f"No image data for {target}")
        return embed_image(data).to_rtf()
    except ImageLoadError as err:
        logger.debug("Image unavailable, using placeholder: %s", err)
    except Exception as err:  # resolvers are caller-supplied
        logger.warning("Image resolver failed for %s: %s", target, err)
    return image_placeholder(title, url, palette, heading)


def set_images(
    line: str,
    resolver: ImageResolver | None,
    palette: Palette,
    heading: bool = False,
) -> str:
    if "![" not in line:
        return line
    return _IMAGE_RE.sub(
        lambda match: render_image(match.group(1), match.group(2), resolver, palette, heading),
        line,
    )
