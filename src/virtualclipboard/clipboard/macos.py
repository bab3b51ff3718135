from pathlib import Path
from typing import List, Optional

from PIL import Image, ImageGrab

try:
    from AppKit import NSPasteboard, NSPasteboardTypePNG, NSPasteboardTypeString
    from Foundation import NSURL, NSData
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from virtualclipboard.clipboard.base import ClipboardBackend, ClipboardSnapshot
from virtualclipboard.exceptions import ClipboardUnavailableError
from virtualclipboard.probe.imaging import encode_png


class MacOSClipboard(ClipboardBackend):

    def _pasteboard(self):
        if not HAS_APPKIT:
            raise ClipboardUnavailableError("pyobjc (AppKit) is not installed")
        return NSPasteboard.generalPasteboard()

    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        pasteboard = self._pasteboard()

        files: List[Path] = []
        file_urls = pasteboard.readObjectsForClasses_options_([NSURL], None) or []
        for url in file_urls:
            if url.isFileURL():
                files.append(Path(url.path()))

        text = pasteboard.stringForType_(NSPasteboardTypeString)
        if text is not None:
            text = str(text)

        image: Optional[Image.Image] = None
        if text is None and not files:
            grabbed = ImageGrab.grabclipboard()
            if isinstance(grabbed, Image.Image):
                image = grabbed

        return ClipboardSnapshot(files=files, text=text, image=image)

    def _set_text(self, text: str) -> bool:
        pasteboard = self._pasteboard()
        pasteboard.clearContents()
        return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))

    def _set_image(self, image: Image.Image) -> bool:
        payload = encode_png(image)
        pasteboard = self._pasteboard()
        pasteboard.clearContents()
        data = NSData.dataWithBytes_length_(payload, len(payload))
        return bool(pasteboard.setData_forType_(data, NSPasteboardTypePNG))
