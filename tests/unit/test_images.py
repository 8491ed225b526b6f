from __future__ import annotations

import io
from pathlib import Path

import httpx
import pytest
from PIL import Image

from markdown_rtf.images import EmbeddedImage, ImageLoader, ImageLoadError, embed_image
from markdown_rtf.links import image_placeholder, render_image, set_images, set_links
from markdown_rtf.palette import Palette
from markdown_rtf.settings import RtfSettings

PALETTE = Palette.from_settings(RtfSettings())


def _image_bytes(size: tuple[int, int], mode: str = "RGB", fmt: str = "PNG", **save) -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size).save(buffer, format=fmt, **save)
    return buffer.getvalue()


def test_http_images_are_fetched_with_httpx() -> None:
    payload = _image_bytes((1, 1))

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://example.com/pic.png"
        return httpx.Response(200, content=payload)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    loader = ImageLoader(client=client)
    assert loader("https://example.com/pic.png") == payload


def test_http_errors_raise_image_load_error() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    loader = ImageLoader(client=client)
    with pytest.raises(ImageLoadError):
        loader("http://example.com/missing.png")


def test_relative_paths_resolve_against_base_dir(tmp_path: Path) -> None:
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "a b.png").write_bytes(b"data")
    loader = ImageLoader(tmp_path)
    assert loader("img/a b.png") == b"data"
    assert loader("img/a%20b.png") == b"data"
    assert loader((tmp_path / "img" / "a b.png").as_uri()) == b"data"


def test_missing_file_raises_image_load_error(tmp_path: Path) -> None:
    with pytest.raises(ImageLoadError):
        ImageLoader(tmp_path)("nope.png")


def test_embed_image_reencodes_as_png() -> None:
    image = embed_image(_image_bytes((4, 2), fmt="JPEG"))
    assert image.png.startswith(b"\x89PNG")
    assert (image.width, image.height) == (4, 2)


def test_embed_image_converts_modes_png_cannot_store() -> None:
    image = embed_image(_image_bytes((3, 3), mode="CMYK", fmt="JPEG"))
    assert image.png.startswith(b"\x89PNG")


def test_embed_image_rejects_garbage() -> None:
    with pytest.raises(ImageLoadError):
        embed_image(b"not an image")


def test_goal_size_uses_dpi() -> None:
    image = embed_image(_image_bytes((144, 72), dpi=(144, 144)))
    assert (image.goal_width, image.goal_height) == (1440, 720)


def test_picture_hex_is_wrapped() -> None:
    rtf = EmbeddedImage(png=bytes(range(100)), width=1, height=1).to_rtf()
    body = rtf.split("\n", 1)[1]
    assert body.endswith("}")
    assert [len(line) for line in body[:-1].split("\n")] == [128, 72]


def test_image_placeholder_layout() -> None:
    out = image_placeholder("Logo", "a.png", PALETTE)
    assert out.startswith('{\\field{\\*\\fldinst{HYPERLINK "a.png"}}{\\fldrslt{\\cf6 \\ul ')
    assert out.endswith("\\ul0 }}}\\cf1  Logo (a.png)")


def test_render_image_without_resolver_is_placeholder() -> None:
    assert render_image("", "u.png", None, PALETTE).endswith(" u.png (u.png)")


def test_render_image_unescapes_url_for_resolver() -> None:
    seen: list[str] = []

    def resolver(url: str) -> bytes:
        seen.append(url)
        return _image_bytes((1, 1))

    out = set_images("x ![i](dir/caf\\'e9\\'7b1\\'7d.png) y", resolver, PALETTE)
    assert seen == ["dir/café{1}.png"]
    assert out.startswith("x {\\pict\\pngblip\\picw1\\pich1")
    assert out.endswith("} y")


def test_set_links_uses_url_when_title_is_empty() -> None:
    out = set_links("[](http://a.b)", PALETTE)
    assert "{\\fldrslt{\\cf6 \\ul http://a.b\\ul0 }}}\\cf1 " in out


def test_set_links_leaves_plain_brackets() -> None:
    assert set_links("[not a link] (x)", PALETTE) == "[not a link] (x)"
