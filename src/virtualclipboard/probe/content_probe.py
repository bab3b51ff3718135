"""Turn raw clipboard payloads into classified ``ClipboardItem`` records.

Parsing problems never reject a payload: a malformed SVG falls through to
URL/text, an unreadable URL keeps ``N/A`` metadata and an unreadable GIF
keeps zero frames. Only contract violations (``None`` payloads) raise.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from PIL import Image

from virtualclipboard.exceptions import InvalidPayloadError
from virtualclipboard.models.clipboard_item import (
    ClipboardItem,
    GifItem,
    ImageItem,
    Kind,
    SvgItem,
    TextItem,
    UrlItem,
)
from virtualclipboard.models.record import ClipboardRecord
from virtualclipboard.probe.gif_metadata import extract_gif_metadata
from virtualclipboard.probe.imaging import decode_image
from virtualclipboard.probe.svg import is_svg
from virtualclipboard.probe.url import looks_like_url, parse_url_parts

logger = logging.getLogger(__name__)

SHORTCUT_MARKER = "[InternetShortcut]"
RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp"}


def _identity(item_id: Optional[str], created_at: Optional[datetime]) -> Dict[str, Any]:
    identity: Dict[str, Any] = {}
    if item_id is not None:
        identity["item_id"] = item_id
    if created_at is not None:
        identity["created_at"] = created_at
    return identity


def unwrap_internet_shortcut(text: str) -> str:
    """Return the target of a ``.url`` shortcut file, or ``text`` unchanged."""
    if SHORTCUT_MARKER not in text or "URL=" not in text:
        return text
    for line in text.splitlines():
        if line.strip().startswith("URL="):
            return line[line.index("=") + 1:].strip()
    return text


def probe_text(
    text: str,
    *,
    item_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> ClipboardItem:
    """Classify clipboard text as SVG, URL or plain text, in that order."""
    if text is None:
        raise InvalidPayloadError("probe_text requires a string, got None")

    content = unwrap_internet_shortcut(text)
    identity = _identity(item_id, created_at)

    if is_svg(content):
        return SvgItem(content, **identity)

    if looks_like_url(content):
        parts = parse_url_parts(content)
        return UrlItem(content, domain=parts.domain, protocol=parts.protocol, **identity)

    return TextItem(content, **identity)


def probe_gif(
    raw_bytes: bytes,
    width: int,
    height: int,
    *,
    item_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> GifItem:
    if raw_bytes is None:
        raise InvalidPayloadError("probe_gif requires GIF bytes, got None")

    metadata = extract_gif_metadata(raw_bytes)
    return GifItem(
        raw_bytes,
        width,
        height,
        frame_count=metadata.frame_count,
        duration_ms=metadata.duration_ms,
        **_identity(item_id, created_at),
    )


def probe_gif_bytes(raw_bytes: bytes) -> Optional[GifItem]:
    """Build a GIF item when the first frame decodes; ``None`` otherwise."""
    first_frame = decode_image(raw_bytes)
    if first_frame is None:
        return None
    width, height = first_frame.size
    return probe_gif(raw_bytes, width, height)


def probe_image(
    raster: Image.Image,
    *,
    item_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> ImageItem:
    return ImageItem(raster, **_identity(item_id, created_at))


def probe_file(path: Union[str, Path]) -> Optional[ClipboardItem]:
    """Classify a file by extension, the way dropped or pasted files are handled.

    Returns ``None`` for directories and files that cannot be read.
    """
    path = Path(path)
    if path.is_dir():
        return None

    suffix = path.suffix.lower()
    try:
        if suffix == ".gif":
            return probe_gif_bytes(path.read_bytes())
        if suffix in RASTER_EXTENSIONS:
            raster = decode_image(path.read_bytes())
            return probe_image(raster) if raster is not None else None
        return probe_text(path.read_bytes().decode("utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return None


def item_from_record(record: ClipboardRecord) -> ClipboardItem:
    """Rebuild an item from its record.

    Stored derived fields are ignored: URL parts and GIF frame metadata are
    recomputed from the raw payload exactly as at first construction.
    """
    identity = {"item_id": record.itemId, "created_at": record.creation}

    if record.kind is Kind.TEXT:
        return TextItem(record.content, **identity)
    if record.kind is Kind.SVG:
        return SvgItem(record.content, **identity)
    if record.kind is Kind.URL:
        parts = parse_url_parts(record.content or "")
        return UrlItem(record.content, domain=parts.domain, protocol=parts.protocol, **identity)

    payload = record.payload_bytes()
    if record.kind is Kind.GIF:
        width, height = record.width, record.height
        if not width or not height:
            first_frame = decode_image(payload)
            if first_frame is None:
                raise InvalidPayloadError(f"Record {record.itemId} holds an undecodable GIF")
            width, height = first_frame.size
        return probe_gif(payload, width, height, item_id=record.itemId, created_at=record.creation)

    raster = decode_image(payload)
    if raster is None:
        raise InvalidPayloadError(f"Record {record.itemId} holds an undecodable image")
    return probe_image(raster, item_id=record.itemId, created_at=record.creation)
