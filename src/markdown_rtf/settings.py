from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from markdown_rtf.escaping import escape_text

Channel = Annotated[int, Field(ge=0, le=255)]
RGB = tuple[Channel, Channel, Channel]

_COLOR_FIELDS = (
    "text_color",
    "heading_color",
    "code_color",
    "code_background_color",
    "list_marker_color",
    "link_color",
)
_FONT_FAMILIES = r"^(nil|roman|swiss|modern|script|decor|tech|bidi)$"


class ParseErrorOutput(str, Enum):
    NONE = "none"
    RAW_TEXT = "raw_text"
    ERROR_TEXT = "error_text"
    ERROR_TEXT_AND_RAW_TEXT = "error_text_and_raw_text"

    @property
    def shows_error(self) -> bool:
        return self in (ParseErrorOutput.ERROR_TEXT, ParseErrorOutput.ERROR_TEXT_AND_RAW_TEXT)

    @property
    def shows_raw(self) -> bool:
        return self in (ParseErrorOutput.RAW_TEXT, ParseErrorOutput.ERROR_TEXT_AND_RAW_TEXT)


class FontSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    family: str = Field(default="nil", pattern=_FONT_FAMILIES)
    # ";" ends a font table entry.
    name: str = Field(min_length=1, pattern=r"^[^;]+$")

    def table_entry(self, number: int) -> str:
        name, _ = escape_text(self.name, raw=True)
        return f"{{\\f{number}\\f{self.family} {name}; }}"


class RtfSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    text_color: RGB = (0, 0, 0)
    heading_color: RGB = (70, 130, 180)
    code_color: RGB = (47, 79, 79)
    code_background_color: RGB = (230, 230, 250)
    list_marker_color: RGB = (0, 0, 255)
    link_color: RGB = (5, 99, 193)

    body_font: FontSpec = FontSpec(family="swiss", name="Segoe UI")
    code_font: FontSpec = FontSpec(family="modern", name="Courier New")

    default_point_size: int = Field(default=10, ge=1, le=1638)
    h1_point_size: int = Field(default=24, ge=1, le=1638)
    h2_point_size: int = Field(default=18, ge=1, le=1638)
    h3_point_size: int = Field(default=15, ge=1, le=1638)
    h4_point_size: int = Field(default=13, ge=1, le=1638)
    h5_point_size: int = Field(default=11, ge=1, le=1638)
    h6_point_size: int = Field(default=10, ge=1, le=1638)

    code_block_min_width: int = Field(default=50, ge=0)
    tab_length: int = Field(default=5, ge=1)

    allow_underscore_bold: bool = True
    allow_underscore_italic: bool = True
    allow_ordered_list: bool = True
    allow_unordered_list: bool = True

    parse_error_output: ParseErrorOutput = ParseErrorOutput.ERROR_TEXT_AND_RAW_TEXT
    image_timeout_s: float = Field(default=30.0, gt=0)

    @field_validator(*_COLOR_FIELDS, mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected a #rrggbb color, got {value!r}")
        try:
            return tuple(int(text[pos : pos + 2], 16) for pos in (0, 2, 4))
        except ValueError as err:
            raise ValueError(f"Expected a #rrggbb color, got {value!r}") from err

    def point_sizes(self) -> list[int]:
        return [
            self.default_point_size,
            self.h1_point_size,
            self.h2_point_size,
            self.h3_point_size,
            self.h4_point_size,
            self.h5_point_size,
            self.h6_point_size,
        ]

    def half_point_sizes(self) -> list[int]:
        # \fsN takes half-points.
        return [size * 2 for size in self.point_sizes()]


def load_settings(path: str | Path) -> RtfSettings:
    settings_file = Path(path)
    if not settings_file.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_file}")
    payload = json.loads(settings_file.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Settings file must contain a JSON object: {settings_file}")
    return RtfSettings(**payload)


def dump_settings(settings: RtfSettings) -> str:
    return json.dumps(settings.model_dump(mode="json"), indent=2, ensure_ascii=False)
