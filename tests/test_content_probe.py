from datetime import datetime

import pytest
from PIL import Image

from conftest import build_gif, build_png

from virtualclipboard.exceptions import InvalidPayloadError
from virtualclipboard.models import GifItem, ImageItem, Kind, SvgItem, TextItem, UrlItem
from virtualclipboard.probe.content_probe import (
    probe_file,
    probe_gif,
    probe_gif_bytes,
    probe_image,
    probe_text,
    unwrap_internet_shortcut,
)

SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"><rect/></svg>'


def test_plain_text():
    item = probe_text("hello world")

    assert isinstance(item, TextItem)
    assert item.kind is Kind.TEXT
    assert item.content == "hello world"


def test_empty_text_is_a_text_item():
    item = probe_text("")

    assert item.kind is Kind.TEXT
    assert item.size_in_bytes == 0


def test_svg_text():
    item = probe_text(SVG)

    assert isinstance(item, SvgItem)
    assert item.content == SVG


def test_svg_with_leading_whitespace_and_prolog():
    text = '\n  <?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"></svg>\n'
    assert probe_text(text).kind is Kind.SVG


def test_malformed_svg_falls_back_to_text():
    item = probe_text("<svg><g></svg>")
    assert item.kind is Kind.TEXT


def test_html_containing_svg_is_not_svg():
    text = "<div><svg></svg></div>"
    assert probe_text(text).kind is Kind.TEXT


def test_url_with_scheme():
    item = probe_text("https://Example.com/path?q=1")

    assert isinstance(item, UrlItem)
    assert item.domain == "example.com"
    assert item.protocol == "https"


def test_url_without_scheme_gets_http():
    item = probe_text("example.org/docs")

    assert item.kind is Kind.URL
    assert item.domain == "example.org"
    assert item.protocol == "http"


def test_text_with_spaces_is_not_a_url():
    assert probe_text("see example.com for details").kind is Kind.TEXT


def test_internet_shortcut_is_unwrapped():
    shortcut = "[InternetShortcut]\r\nURL=https://example.com/page\r\nIconIndex=0\r\n"

    assert unwrap_internet_shortcut(shortcut) == "https://example.com/page"
    item = probe_text(shortcut)
    assert item.kind is Kind.URL
    assert item.content == "https://example.com/page"


def test_shortcut_without_url_line_is_left_alone():
    text = "[InternetShortcut] nothing here"
    assert unwrap_internet_shortcut(text) == text


def test_identity_can_be_supplied():
    created = datetime(2024, 1, 2, 3, 4, 5)
    item = probe_text("abc", item_id="i_fixed", created_at=created)

    assert item.item_id == "i_fixed"
    assert item.created_at == created


def test_none_text_is_rejected():
    with pytest.raises(InvalidPayloadError):
        probe_text(None)


def test_probe_gif_computes_metadata(animated_gif):
    item = probe_gif(animated_gif, 1, 1)

    assert isinstance(item, GifItem)
    assert item.frame_count == 3
    assert item.duration_ms == 170
    assert item.size_in_bytes == len(animated_gif)


def test_probe_gif_keeps_undecodable_bytes():
    item = probe_gif(b"GIF89a-broken", 16, 16)

    assert item.frame_count == 0
    assert item.duration_ms == 0
    assert item.raw_bytes == b"GIF89a-broken"


def test_probe_gif_rejects_none():
    with pytest.raises(InvalidPayloadError):
        probe_gif(None, 1, 1)


def test_probe_gif_bytes_reads_dimensions(animated_gif):
    item = probe_gif_bytes(animated_gif)

    assert (item.width, item.height) == (1, 1)
    assert probe_gif_bytes(b"junk") is None


def test_probe_image():
    raster = Image.new("RGB", (20, 10))
    item = probe_image(raster)

    assert isinstance(item, ImageItem)
    assert item.raster is raster
    assert (item.width, item.height) == (20, 10)


def test_probe_file_by_extension(tmp_path):
    gif_path = tmp_path / "anim.GIF"
    gif_path.write_bytes(build_gif([4, 4]))
    png_path = tmp_path / "pic.png"
    png_path.write_bytes(build_png((8, 4)))
    svg_path = tmp_path / "logo.svg"
    svg_path.write_text(SVG, encoding="utf-8")
    txt_path = tmp_path / "notes.txt"
    txt_path.write_text("just some notes", encoding="utf-8")

    assert probe_file(gif_path).kind is Kind.GIF
    assert probe_file(png_path).kind is Kind.IMAGE
    assert probe_file(svg_path).kind is Kind.SVG
    assert probe_file(txt_path).kind is Kind.TEXT


def test_probe_file_unreadable(tmp_path):
    binary = tmp_path / "blob.bin"
    binary.write_bytes(b"\xff\xfe\x00\x80")

    assert probe_file(tmp_path) is None
    assert probe_file(tmp_path / "missing.txt") is None
    assert probe_file(binary) is None
