"""Immutable, classified clipboard records.

Each kind of clipboard content is its own frozen dataclass, so an item only
ever carries the payload that matches its kind. Counts, ratios and formatted
sizes are derived on demand from that payload.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import gcd
from typing import ClassVar, Union

import ulid
from PIL import Image

from virtualclipboard.exceptions import InvalidPayloadError

NOT_AVAILABLE = "N/A"

_SIZE_UNITS = "KMGTPE"


class Kind(Enum):
    TEXT = "text"
    URL = "url"
    SVG = "svg"
    GIF = "gif"
    IMAGE = "image"


def new_item_id() -> str:
    return f"i_{ulid.new()}"


def format_size(size_in_bytes: int) -> str:
    """Binary-prefixed size, e.g. ``900 B`` or ``1.5 KB``."""
    if size_in_bytes < 1024:
        return f"{size_in_bytes} B"
    value = float(size_in_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS):
        value /= 1024
        exponent += 1
    return f"{value:.1f} {_SIZE_UNITS[exponent - 1]}B"


def format_duration(duration_ms: int) -> str:
    if duration_ms < 1000:
        return f"{duration_ms} ms"
    return f"{duration_ms / 1000:.1f} s"


class ClipboardItem:
    """Behaviour shared by every item kind."""

    kind: ClassVar[Kind]

    @property
    def is_textual(self) -> bool:
        return False

    @property
    def fingerprint(self) -> Union[str, bytes, Image.Image]:
        """The value the monitor compares to decide "same content as before"."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Text statistics
    # ------------------------------------------------------------------
    @property
    def word_count(self) -> int:
        return 0

    @property
    def line_count(self) -> int:
        return 0

    @property
    def character_count(self) -> int:
        return 0

    # ------------------------------------------------------------------
    # Raster statistics
    # ------------------------------------------------------------------
    @property
    def aspect_ratio(self) -> str:
        return NOT_AVAILABLE

    @property
    def formatted_duration(self) -> str:
        return NOT_AVAILABLE

    @property
    def formatted_size(self) -> str:
        return format_size(self.size_in_bytes)

    # ------------------------------------------------------------------
    # Layout hints for card grids (rows, cols in {1, 2})
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return 1

    @property
    def cols(self) -> int:
        return 1


@dataclass(frozen=True)
class _TextualItem(ClipboardItem):
    content: str
    item_id: str = field(default_factory=new_item_id, compare=False)
    created_at: datetime = field(default_factory=datetime.now, compare=False)
    size_in_bytes: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if self.content is None:
            raise InvalidPayloadError(f"{type(self).__name__} requires text content, got None")
        object.__setattr__(self, "size_in_bytes", len(self.content.encode("utf-8")))

    @property
    def is_textual(self) -> bool:
        return True

    @property
    def fingerprint(self) -> str:
        return self.content

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def line_count(self) -> int:
        return len(self.content.splitlines())

    @property
    def character_count(self) -> int:
        return len(self.content)

    @property
    def rows(self) -> int:
        if self.character_count > 500 or self.line_count > 10:
            return 2
        return 1

    @property
    def cols(self) -> int:
        if self.character_count > 150 or self.line_count > 4:
            return 2
        return 1


@dataclass(frozen=True)
class TextItem(_TextualItem):
    kind: ClassVar[Kind] = Kind.TEXT


@dataclass(frozen=True)
class SvgItem(_TextualItem):
    kind: ClassVar[Kind] = Kind.SVG


@dataclass(frozen=True)
class UrlItem(_TextualItem):
    kind: ClassVar[Kind] = Kind.URL

    domain: str = field(default=NOT_AVAILABLE, compare=False)
    protocol: str = field(default=NOT_AVAILABLE, compare=False)


class _RasterMixin:
    width: int
    height: int

    @property
    def aspect_ratio(self) -> str:
        if self.width <= 0 or self.height <= 0:
            return NOT_AVAILABLE
        common = gcd(self.width, self.height)
        return f"{self.width // common}:{self.height // common}"

    def _is_large(self) -> bool:
        return self.width > 800 and self.height > 600

    @property
    def rows(self) -> int:
        if self.height > 0 and self.width / self.height < 0.5:
            return 2
        return 2 if self._is_large() else 1

    @property
    def cols(self) -> int:
        if self.height > 0 and self.width / self.height > 4.0:
            return 2
        return 2 if self._is_large() else 1


@dataclass(frozen=True)
class GifItem(_RasterMixin, ClipboardItem):
    """Animated GIF kept as its original bytes; equal only on an exact byte match."""

    kind: ClassVar[Kind] = Kind.GIF

    raw_bytes: bytes
    width: int
    height: int
    frame_count: int = field(default=0, compare=False)
    duration_ms: int = field(default=0, compare=False)
    item_id: str = field(default_factory=new_item_id, compare=False)
    created_at: datetime = field(default_factory=datetime.now, compare=False)
    size_in_bytes: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if self.raw_bytes is None:
            raise InvalidPayloadError("GifItem requires raw GIF bytes, got None")
        if self.width <= 0 or self.height <= 0:
            raise InvalidPayloadError(
                f"GifItem requires positive dimensions, got {self.width}x{self.height}"
            )
        object.__setattr__(self, "raw_bytes", bytes(self.raw_bytes))
        object.__setattr__(self, "size_in_bytes", len(self.raw_bytes))

    @property
    def fingerprint(self) -> bytes:
        return self.raw_bytes

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration_ms)


@dataclass(frozen=True, eq=False)
class ImageItem(_RasterMixin, ClipboardItem):
    """Decoded raster image.

    Equality is identity of the decoded buffer: two rasters decoded
    separately are different items even when their pixels match. Use
    ``images_equal`` for a pixel comparison.
    """

    kind: ClassVar[Kind] = Kind.IMAGE

    raster: Image.Image
    item_id: str = field(default_factory=new_item_id)
    created_at: datetime = field(default_factory=datetime.now)
    width: int = field(init=False)
    height: int = field(init=False)
    size_in_bytes: int = field(init=False)

    def __post_init__(self) -> None:
        if self.raster is None:
            raise InvalidPayloadError("ImageItem requires a decoded raster, got None")
        width, height = self.raster.size
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        # approximate RGBA footprint
        object.__setattr__(self, "size_in_bytes", width * height * 4)

    @property
    def fingerprint(self) -> Image.Image:
        return self.raster

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageItem):
            return NotImplemented
        return self.raster is other.raster

    def __hash__(self) -> int:
        return hash((Kind.IMAGE, id(self.raster)))
