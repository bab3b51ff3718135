from PIL import Image

from virtualclipboard.models import ClipboardRecord, GifItem, Kind, TextItem, UrlItem, to_record
from virtualclipboard.probe.content_probe import item_from_record, probe_gif, probe_image, probe_text
from virtualclipboard.probe.imaging import images_equal


def test_text_record_carries_statistics():
    item = TextItem("two words")
    record = to_record(item)

    assert record.itemId == item.item_id
    assert record.kind is Kind.TEXT
    assert record.content == "two words"
    assert record.payload is None
    assert record.metadata["words"] == 2
    assert record.metadata["formatted_size"] == "9 B"


def test_record_json_uses_camel_case_and_kind_value():
    payload = to_record(TextItem("x")).model_dump(mode="json")

    assert payload["kind"] == "text"
    assert "itemId" in payload
    assert "sizeInBytes" in payload


def test_record_survives_json_round_trip():
    record = to_record(probe_text("https://example.com/a"))
    restored = ClipboardRecord.model_validate_json(record.model_dump_json())

    assert restored == record


def test_url_parts_are_recomputed_on_restore():
    record = to_record(probe_text("https://example.com/a"))
    record.metadata["domain"] = "tampered.invalid"

    item = item_from_record(record)

    assert isinstance(item, UrlItem)
    assert item.domain == "example.com"
    assert item.protocol == "https"
    assert item.item_id == record.itemId
    assert item.created_at == record.creation


def test_gif_metadata_is_recomputed_on_restore(animated_gif):
    record = to_record(probe_gif(animated_gif, 1, 1))
    assert record.mime == "image/gif"
    record.metadata["frames"] = 99

    item = item_from_record(record)

    assert isinstance(item, GifItem)
    assert item.frame_count == 3
    assert item.duration_ms == 170
    assert item.raw_bytes == animated_gif


def test_image_record_is_png():
    raster = Image.new("RGB", (6, 3), (5, 6, 7))
    record = to_record(probe_image(raster))

    assert record.mime == "image/png"
    assert (record.width, record.height) == (6, 3)
    assert record.metadata["aspect_ratio"] == "2:1"

    item = item_from_record(record)
    assert item.kind is Kind.IMAGE
    assert images_equal(item.raster, raster)


def test_svg_record_mime():
    record = to_record(probe_text('<svg xmlns="http://www.w3.org/2000/svg"/>'))

    assert record.kind is Kind.SVG
    assert record.mime == "image/svg+xml"
    assert item_from_record(record).kind is Kind.SVG
