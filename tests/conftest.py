import io
import struct
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

# Make src importable
REPO_ROOT = Path(__file__).resolve().parent.parent
SRC = REPO_ROOT / "src"
sys.path.insert(0, str(SRC))

from virtualclipboard.clipboard.base import ClipboardBackend, ClipboardSnapshot  # noqa: E402


def build_gif(delays: List[int]) -> bytes:
    """A 1x1 GIF with one frame per entry of ``delays`` (hundredths of a second)."""
    header = b"GIF89a" + struct.pack("<HHBBB", 1, 1, 0x80, 0, 0)
    palette = b"\x00\x00\x00\xff\xff\xff"
    frames = b""
    for delay in delays:
        control = b"\x21\xf9\x04\x00" + struct.pack("<H", delay) + b"\x00\x00"
        descriptor = b"\x2c" + struct.pack("<HHHH", 0, 0, 1, 1) + b"\x00"
        pixels = b"\x02\x02\x44\x01\x00"
        frames += control + descriptor + pixels
    return header + palette + frames + b"\x3b"


def build_png(size=(4, 2), color=(255, 0, 0)) -> bytes:
    output = io.BytesIO()
    Image.new("RGB", size, color).save(output, format="PNG")
    return output.getvalue()


class FakeBackend(ClipboardBackend):
    """In-memory clipboard; assign ``snapshot`` or ``error`` between polls."""

    def __init__(self) -> None:
        self.snapshot: Optional[ClipboardSnapshot] = None
        self.error: Optional[Exception] = None
        self.written: List[object] = []
        self.reads = 0

    def put_text(self, text: str) -> None:
        self.snapshot = ClipboardSnapshot(text=text)

    def put_image(self, image: Image.Image) -> None:
        self.snapshot = ClipboardSnapshot(image=image)

    def put_files(self, *paths: Path, text: Optional[str] = None) -> None:
        self.snapshot = ClipboardSnapshot(files=list(paths), text=text)

    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.snapshot

    def _set_text(self, text: str) -> bool:
        self.written.append(text)
        self.put_text(text)
        return True

    def _set_image(self, image: Image.Image) -> bool:
        self.written.append(image)
        self.put_image(image)
        return True


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def animated_gif() -> bytes:
    return build_gif([0, 5, 10])


@pytest.fixture
def emitted():
    return []
