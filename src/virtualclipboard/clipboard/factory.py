import importlib
import platform
from typing import Dict, Tuple, Type

from virtualclipboard.clipboard.base import ClipboardBackend

# platform.system() -> (module, class); modules import lazily so a missing
# platform library only matters on the platform that needs it
_BACKENDS: Dict[str, Tuple[str, str]] = {
    "Windows": ("virtualclipboard.clipboard.windows", "WindowsClipboard"),
    "Linux": ("virtualclipboard.clipboard.linux", "LinuxClipboard"),
    "Darwin": ("virtualclipboard.clipboard.macos", "MacOSClipboard"),
}


def get_clipboard_class() -> Type[ClipboardBackend]:
    system = platform.system()
    try:
        module_name, class_name = _BACKENDS[system]
    except KeyError:
        raise NotImplementedError(f"Platform '{system}' is not supported") from None
    return getattr(importlib.import_module(module_name), class_name)


def get_clipboard_backend() -> ClipboardBackend:
    """Clipboard backend for the running platform."""
    return get_clipboard_class()()
