"""Format sniffing helpers used to classify clipboard payloads.

The classification entry points live in ``virtualclipboard.probe.content_probe``.
"""

from virtualclipboard.probe.gif_metadata import GifMetadata, extract_gif_metadata
from virtualclipboard.probe.imaging import decode_image, images_equal
from virtualclipboard.probe.svg import is_svg
from virtualclipboard.probe.url import UrlParts, looks_like_url, parse_url_parts

__all__ = [
    'GifMetadata',
    'UrlParts',
    'decode_image',
    'extract_gif_metadata',
    'images_equal',
    'is_svg',
    'looks_like_url',
    'parse_url_parts',
]
