import dataclasses

import pytest
from PIL import Image

from virtualclipboard.exceptions import InvalidPayloadError
from virtualclipboard.models import (
    GifItem,
    ImageItem,
    Kind,
    SvgItem,
    TextItem,
    UrlItem,
    format_duration,
    format_size,
)


def test_format_size():
    assert format_size(0) == "0 B"
    assert format_size(900) == "900 B"
    assert format_size(1023) == "1023 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"


def test_format_duration():
    assert format_duration(170) == "170 ms"
    assert format_duration(2500) == "2.5 s"


def test_text_items_compare_by_content():
    first = TextItem("same")
    second = TextItem("same")

    assert first.item_id != second.item_id
    assert first == second
    assert hash(first) == hash(second)
    assert TextItem("same") != TextItem("other")


def test_items_of_different_kinds_are_not_equal():
    assert TextItem("example.com") != UrlItem("example.com")


def test_url_metadata_does_not_affect_equality():
    assert UrlItem("example.com", domain="example.com") == UrlItem("example.com")


def test_items_are_immutable():
    item = TextItem("frozen")
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.content = "changed"


def test_item_ids_are_prefixed():
    assert TextItem("x").item_id.startswith("i_")


def test_text_statistics():
    item = TextItem("one two\nthree\n\nfour")

    assert item.word_count == 4
    assert item.line_count == 4
    assert item.character_count == len("one two\nthree\n\nfour")
    assert item.is_textual
    assert item.aspect_ratio == "N/A"
    assert item.formatted_duration == "N/A"


def test_size_in_bytes_is_utf8_length():
    assert TextItem("héllo").size_in_bytes == 6
    assert SvgItem("<svg/>").size_in_bytes == 6


def test_text_layout_hints():
    assert (TextItem("short").rows, TextItem("short").cols) == (1, 1)
    assert TextItem("x" * 200).cols == 2
    assert TextItem("x" * 600).rows == 2
    assert TextItem("\n".join("line" for _ in range(12))).rows == 2


def test_textual_items_reject_none():
    with pytest.raises(InvalidPayloadError):
        TextItem(None)


def test_gif_equality_uses_bytes_and_dimensions():
    first = GifItem(b"GIF89a", 10, 10, frame_count=3)
    second = GifItem(b"GIF89a", 10, 10, frame_count=7)

    assert first == second
    assert hash(first) == hash(second)
    assert first != GifItem(b"GIF89a", 10, 20)
    assert first != GifItem(b"GIF87a", 10, 10)


def test_gif_statistics():
    item = GifItem(b"x" * 1536, 1920, 1080, frame_count=3, duration_ms=170)

    assert item.formatted_size == "1.5 KB"
    assert item.aspect_ratio == "16:9"
    assert item.formatted_duration == "170 ms"
    assert not item.is_textual
    assert item.word_count == 0


def test_gif_contract_violations():
    with pytest.raises(InvalidPayloadError):
        GifItem(None, 1, 1)
    with pytest.raises(InvalidPayloadError):
        GifItem(b"GIF89a", 0, 1)


def test_image_equality_is_identity_of_raster():
    raster = Image.new("RGB", (4, 4))
    same_pixels = Image.new("RGB", (4, 4))

    assert ImageItem(raster) == ImageItem(raster)
    assert hash(ImageItem(raster)) == hash(ImageItem(raster))
    assert ImageItem(raster) != ImageItem(same_pixels)


def test_image_statistics():
    item = ImageItem(Image.new("RGB", (30, 10)))

    assert item.kind is Kind.IMAGE
    assert (item.width, item.height) == (30, 10)
    assert item.size_in_bytes == 30 * 10 * 4
    assert item.aspect_ratio == "3:1"
    assert item.formatted_duration == "N/A"


def test_raster_layout_hints():
    assert ImageItem(Image.new("RGB", (10, 30))).rows == 2
    assert ImageItem(Image.new("RGB", (50, 10))).cols == 2
    large = ImageItem(Image.new("RGB", (801, 601)))
    assert (large.rows, large.cols) == (2, 2)
    assert (ImageItem(Image.new("RGB", (20, 20))).rows, ImageItem(Image.new("RGB", (20, 20))).cols) == (1, 1)


def test_image_rejects_none():
    with pytest.raises(InvalidPayloadError):
        ImageItem(None)
