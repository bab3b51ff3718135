import logging
from typing import NamedTuple

from virtualclipboard.probe.imaging import enumerate_frame_delays

logger = logging.getLogger(__name__)

# Browsers render a zero delay as 2/100 s, so a zero never becomes a zero-length frame.
ZERO_DELAY_HUNDREDTHS = 2


class GifMetadata(NamedTuple):
    frame_count: int
    duration_ms: int


EMPTY_METADATA = GifMetadata(frame_count=0, duration_ms=0)


def extract_gif_metadata(data: bytes) -> GifMetadata:
    """Frame count and total animation time of a GIF.

    Any failure while walking the frames yields ``(0, 0)`` for the whole
    payload rather than a partial count.
    """
    delays = enumerate_frame_delays(data)
    if delays is None:
        logger.debug("No frame metadata for GIF payload of %d bytes", len(data or b""))
        return EMPTY_METADATA

    total_ms = 0
    for delay in delays:
        if delay == 0:
            delay = ZERO_DELAY_HUNDREDTHS
        total_ms += delay * 10

    return GifMetadata(frame_count=len(delays), duration_ms=total_ms)
