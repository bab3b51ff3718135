"""Watch the system clipboard and turn each change into a classified item."""

from virtualclipboard.detection import detect_language, label_item
from virtualclipboard.models import ClipboardItem, Kind
from virtualclipboard.services import ClipboardHistory, ClipboardMonitor

__version__ = "0.1.0"

__all__ = [
    'ClipboardHistory',
    'ClipboardItem',
    'ClipboardMonitor',
    'Kind',
    'detect_language',
    'label_item',
]
