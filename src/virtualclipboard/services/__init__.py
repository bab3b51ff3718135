"""Service layer for virtualclipboard."""

from .clipboard_monitor import ClipboardMonitor
from .history import ClipboardHistory

__all__ = ["ClipboardMonitor", "ClipboardHistory"]
