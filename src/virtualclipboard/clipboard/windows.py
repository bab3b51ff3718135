import io
import os
import time
from pathlib import Path
from typing import List, Optional

import win32clipboard as wc
import win32con
from PIL import Image, ImageGrab

from virtualclipboard.clipboard.base import ClipboardBackend, ClipboardSnapshot
from virtualclipboard.exceptions import ClipboardUnavailableError


class WindowsClipboard(ClipboardBackend):
    _OPEN_ATTEMPTS = 3

    def _open(self) -> bool:
        for _ in range(self._OPEN_ATTEMPTS):
            try:
                wc.OpenClipboard()
                return True
            except Exception:
                time.sleep(0.05)
        return False

    def _close(self) -> None:
        try:
            wc.CloseClipboard()
        except Exception:
            pass

    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        files: List[Path] = []
        image: Optional[Image.Image] = None

        grabbed = ImageGrab.grabclipboard()
        if isinstance(grabbed, (list, tuple)):
            files = [Path(os.path.normpath(path)) for path in grabbed if path]
        elif isinstance(grabbed, Image.Image):
            image = grabbed

        if not self._open():
            raise ClipboardUnavailableError("Clipboard is locked by another process")

        text: Optional[str] = None
        try:
            if wc.IsClipboardFormatAvailable(wc.CF_UNICODETEXT):
                text = wc.GetClipboardData(wc.CF_UNICODETEXT)
        finally:
            self._close()

        if text is not None:
            image = None
        return ClipboardSnapshot(files=files, text=text, image=image)

    def _set_text(self, text: str) -> bool:
        if not self._open():
            return False
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(wc.CF_UNICODETEXT, text)
            return True
        finally:
            self._close()

    def _set_image(self, image: Image.Image) -> bool:
        if image.mode == "RGBA":
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        elif image.mode != "RGB":
            image = image.convert("RGB")

        output = io.BytesIO()
        image.save(output, "BMP")
        bmp_data = output.getvalue()
        if len(bmp_data) <= 14:
            return False

        if not self._open():
            return False
        try:
            wc.EmptyClipboard()
            # CF_DIB is the BMP payload without its 14-byte file header
            wc.SetClipboardData(win32con.CF_DIB, bmp_data[14:])
            return True
        finally:
            self._close()
