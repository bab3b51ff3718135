from typing import Optional

from virtualclipboard.detection.code_detector import detect_language
from virtualclipboard.models.clipboard_item import ClipboardItem, Kind


def label_item(item: ClipboardItem) -> Optional[str]:
    """Programming language of a plain-text item, ``None`` for anything else."""
    if item.kind is not Kind.TEXT:
        return None
    return detect_language(item.content)


__all__ = [
    'detect_language',
    'label_item',
]
