"""Pillow-backed image codec helpers.

Everything here treats codec failures as "nothing decoded" and returns
``None``; clipboard content that Pillow cannot read is never fatal.
"""

import io
import logging
from typing import Iterator, List, Optional, Tuple

from PIL import Image, ImageSequence

logger = logging.getLogger(__name__)

_DECODE_ERRORS = (
    OSError,
    ValueError,
    EOFError,
    SyntaxError,
    Image.DecompressionBombError,
)


def decode_image(data: bytes) -> Optional[Image.Image]:
    """Decode the first frame of ``data`` into a fully loaded raster."""
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return image.copy()
    except _DECODE_ERRORS as exc:
        logger.debug("Could not decode image payload (%d bytes): %s", len(data), exc)
        return None


def enumerate_frame_delays(data: bytes) -> Optional[List[int]]:
    """Per-frame delays of an animated image, in hundredths of a second.

    Pillow exposes the delay as ``info["duration"]`` in milliseconds; frames
    without timing metadata report 0.
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as image:
            delays = []
            for frame in ImageSequence.Iterator(image):
                duration_ms = frame.info.get("duration") or 0
                delays.append(int(duration_ms) // 10)
            return delays
    except _DECODE_ERRORS as exc:
        logger.debug("Could not enumerate frames (%d bytes): %s", len(data), exc)
        return None


def encode_png(image: Image.Image) -> bytes:
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


def _sample_points(width: int, height: int) -> Iterator[Tuple[int, int]]:
    yield 0, 0
    yield width // 2, height // 2
    yield width - 1, height - 1
    yield width // 4, height // 4


def _as_rgba(image: Image.Image) -> Image.Image:
    if image.mode == "RGBA":
        return image
    return image.convert("RGBA")


def images_equal(first: Optional[Image.Image], second: Optional[Image.Image]) -> bool:
    """Pixel-for-pixel comparison used for clipboard change detection.

    Dimensions are compared first, then four sample points, and only then
    every pixel in row-major order.
    """
    if first is second:
        return True
    if first is None or second is None:
        return False
    if first.size != second.size:
        return False

    width, height = first.size
    if width == 0 or height == 0:
        return True

    first = _as_rgba(first)
    second = _as_rgba(second)

    for point in _sample_points(width, height):
        if first.getpixel(point) != second.getpixel(point):
            return False

    return first.tobytes() == second.tobytes()
