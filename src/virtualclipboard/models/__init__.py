from virtualclipboard.models.clipboard_item import (
    ClipboardItem,
    GifItem,
    ImageItem,
    Kind,
    SvgItem,
    TextItem,
    UrlItem,
    format_duration,
    format_size,
)
from virtualclipboard.models.record import ClipboardRecord, to_record

__all__ = [
    'ClipboardItem',
    'ClipboardRecord',
    'GifItem',
    'ImageItem',
    'Kind',
    'SvgItem',
    'TextItem',
    'UrlItem',
    'format_duration',
    'format_size',
    'to_record',
]
