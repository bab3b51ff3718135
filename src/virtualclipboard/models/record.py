import base64
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from virtualclipboard.models.clipboard_item import (
    ClipboardItem,
    GifItem,
    ImageItem,
    Kind,
    UrlItem,
    new_item_id,
)
from virtualclipboard.probe.imaging import encode_png


class ClipboardRecord(BaseModel):  # export shape, payload is base64 for binary kinds
    itemId: str = Field(default_factory=new_item_id)
    kind: Kind
    content: Optional[str] = None
    payload: Optional[str] = None
    mime: str = "text/plain"
    width: Optional[int] = None
    height: Optional[int] = None
    sizeInBytes: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
    creation: datetime = Field(default_factory=datetime.now)

    def payload_bytes(self) -> bytes:
        if not self.payload:
            return b""
        return base64.b64decode(self.payload)


def to_record(item: ClipboardItem) -> ClipboardRecord:
    """Snapshot ``item`` as a serialisable record, derived stats included as metadata."""
    metadata: Dict[str, Any] = {"formatted_size": item.formatted_size}
    fields: Dict[str, Any] = {
        "itemId": item.item_id,
        "kind": item.kind,
        "sizeInBytes": item.size_in_bytes,
        "creation": item.created_at,
    }

    if item.is_textual:
        fields["content"] = item.content
        fields["mime"] = "image/svg+xml" if item.kind is Kind.SVG else "text/plain"
        metadata.update(
            words=item.word_count,
            lines=item.line_count,
            characters=item.character_count,
        )
        if isinstance(item, UrlItem):
            metadata.update(domain=item.domain, protocol=item.protocol)
    elif isinstance(item, GifItem):
        fields["payload"] = base64.b64encode(item.raw_bytes).decode("ascii")
        fields["mime"] = "image/gif"
        metadata.update(
            frames=item.frame_count,
            duration_ms=item.duration_ms,
            duration=item.formatted_duration,
        )
    elif isinstance(item, ImageItem):
        fields["payload"] = base64.b64encode(encode_png(item.raster)).decode("ascii")
        fields["mime"] = "image/png"

    if not item.is_textual:
        fields["width"] = item.width
        fields["height"] = item.height
        metadata["aspect_ratio"] = item.aspect_ratio

    return ClipboardRecord(metadata=metadata, **fields)
