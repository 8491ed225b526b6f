from __future__ import annotations

import io
import logging
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

ImageResolver = Callable[[str], Optional[bytes]]

HTTP_SCHEMES = ("http", "https")
FTP_SCHEME = "ftp"
DEFAULT_DPI = 96.0
TWIPS_PER_INCH = 1440
HEX_LINE_WIDTH = 128
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


class ImageLoadError(Exception):
    pass


class ImageLoader:
    """Default image resolver: http(s) and ftp URLs are fetched, anything
    else is read from disk relative to the document's directory."""

    def __init__(
        self,
        base_dir: str | Path | None = None,
        *,
        timeout_s: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_dir = Path(base_dir) if base_dir else None
        self.timeout_s = timeout_s
        self._client = client

    def __call__(self, url: str) -> bytes:
        scheme = urlsplit(url).scheme.lower()
        if scheme in HTTP_SCHEMES:
            return self._fetch_http(url)
        if scheme == FTP_SCHEME:
            return self._fetch_ftp(url)
        return self._read_file(url)

    def _fetch_http(self, url: str) -> bytes:
        logger.debug("Fetching image %s", url)
        try:
            if self._client is not None:
                response = self._client.get(url)
            else:
                response = httpx.get(url, timeout=self.timeout_s, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as err:
            raise ImageLoadError(f"Failed to fetch {url}: {err}") from err
        return response.content

    def _fetch_ftp(self, url: str) -> bytes:
        logger.debug("Fetching image %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.timeout_s) as response:
                return response.read()
        except (OSError, ValueError) as err:
            raise ImageLoadError(f"Failed to fetch {url}: {err}") from err

    def _read_file(self, url: str) -> bytes:
        path = self.resolve_path(url)
        logger.debug("Reading image %s", path)
        try:
            return path.read_bytes()
        except OSError as err:
            raise ImageLoadError(f"Failed to read {path}: {err}") from err

    def resolve_path(self, url: str) -> Path:
        parts = urlsplit(url)
        if parts.scheme == "file":
            path = Path(url2pathname(parts.path))
        else:
            path = Path(unquote(url))
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path


@dataclass(frozen=True)
class EmbeddedImage:
    png: bytes
    width: int
    height: int
    dpi: tuple[float, float] = (DEFAULT_DPI, DEFAULT_DPI)

    @property
    def goal_width(self) -> int:
        return round(self.width * TWIPS_PER_INCH / self.dpi[0])

    @property
    def goal_height(self) -> int:
        return round(self.height * TWIPS_PER_INCH / self.dpi[1])

    def to_rtf(self) -> str:
        data = self.png.hex()
        hex_lines = "\n".join(
            data[pos : pos + HEX_LINE_WIDTH] for pos in range(0, len(data), HEX_LINE_WIDTH)
        )
        return (
            f"{{\\pict\\pngblip\\picw{self.width}\\pich{self.height}"
            f"\\picwgoal{self.goal_width}\\pichgoal{self.goal_height}\n"
            f"{hex_lines}}}"
        )


def _dpi_of(image: Image.Image) -> tuple[float, float]:
    raw = image.info.get("dpi")
    if not raw:
        return DEFAULT_DPI, DEFAULT_DPI
    try:
        dpi_x, dpi_y = (float(value) for value in raw)
    except (TypeError, ValueError):
        return DEFAULT_DPI, DEFAULT_DPI
    return (dpi_x if dpi_x > 0 else DEFAULT_DPI, dpi_y if dpi_y > 0 else DEFAULT_DPI)


def embed_image(data: bytes) -> EmbeddedImage:
    """Decode image bytes of any format Pillow reads and re-encode as PNG."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width, height = image.size
            dpi = _dpi_of(image)
            converted = image if image.mode in _PNG_MODES else image.convert("RGBA")
            buffer = io.BytesIO()
            converted.save(buffer, format="PNG")
    except (OSError, ValueError, Image.DecompressionBombError) as err:
        raise ImageLoadError(f"Unreadable image data: {err}") from err
    return EmbeddedImage(png=buffer.getvalue(), width=width, height=height, dpi=dpi)
