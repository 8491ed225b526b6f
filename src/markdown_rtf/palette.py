from __future__ import annotations

from dataclasses import dataclass

from markdown_rtf.settings import RtfSettings

RTF_PREAMBLE = "{\\rtf1\\ansi\\deff0 "
BODY_FONT = "\\f0 "
CODE_FONT = "\\f1 "


@dataclass(frozen=True)
class ColorSlot:
    rgb: tuple[int, int, int]
    index: int

    def as_font_color(self) -> str:
        return f"\\cf{self.index} "

    def as_background_color(self) -> str:
        return f"\\highlight{self.index} "

    def table_entry(self) -> str:
        red, green, blue = self.rgb
        return f"\\red{red}\\green{green}\\blue{blue};"


@dataclass(frozen=True)
class Palette:
    """Color table slots. RTF refers to colors by position only, so the field
    order here is the order of the emitted \\colortbl."""

    text: ColorSlot
    heading: ColorSlot
    code_foreground: ColorSlot
    code_background: ColorSlot
    list_marker: ColorSlot
    link: ColorSlot

    @classmethod
    def from_settings(cls, settings: RtfSettings) -> Palette:
        colors = (
            settings.text_color,
            settings.heading_color,
            settings.code_color,
            settings.code_background_color,
            settings.list_marker_color,
            settings.link_color,
        )
        return cls(*(ColorSlot(tuple(rgb), index) for index, rgb in enumerate(colors, start=1)))

    def slots(self) -> list[ColorSlot]:
        return [
            self.text,
            self.heading,
            self.code_foreground,
            self.code_background,
            self.list_marker,
            self.link,
        ]

    def color_table(self) -> str:
        # The leading ';' is the "auto" color at index 0.
        return "{\\colortbl;" + "".join(slot.table_entry() for slot in self.slots()) + "}"


def font_table(settings: RtfSettings) -> str:
    return (
        "{\\fonttbl"
        + settings.body_font.table_entry(0)
        + settings.code_font.table_entry(1)
        + "}"
    )


def document_header(settings: RtfSettings, palette: Palette) -> str:
    return RTF_PREAMBLE + font_table(settings) + palette.color_table() + "\\pard"
