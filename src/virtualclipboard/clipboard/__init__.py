from virtualclipboard.clipboard.base import ClipboardBackend, ClipboardSnapshot
from virtualclipboard.clipboard.factory import get_clipboard_backend, get_clipboard_class

__all__ = [
    'ClipboardBackend',
    'ClipboardSnapshot',
    'get_clipboard_backend',
    'get_clipboard_class',
]
