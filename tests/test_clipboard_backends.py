from pathlib import Path

import pytest

from conftest import FakeBackend, build_png

from virtualclipboard.clipboard import ClipboardSnapshot, factory
from virtualclipboard.clipboard.linux import LinuxClipboard
from virtualclipboard.exceptions import ClipboardUnavailableError


def reader_for(contents):
    requested = []

    def reader(target):
        requested.append(target)
        return contents.get(target)

    reader.requested = requested
    return reader


def test_linux_prefers_utf8_text_target():
    reader = reader_for({"UTF8_STRING": "héllo".encode("utf-8"), "STRING": b"h?llo"})
    snapshot = LinuxClipboard()._extract_from_types(["TARGETS", "STRING", "UTF8_STRING"], reader)

    assert snapshot.text == "héllo"
    assert snapshot.image is None


def test_linux_reads_copied_files():
    reader = reader_for({
        "x-special/gnome-copied-files": b"copy\nfile:///tmp/My%20Logo.svg\n",
        "text/plain": b"/tmp/My Logo.svg",
    })
    snapshot = LinuxClipboard()._extract_from_types(
        ["x-special/gnome-copied-files", "text/plain"], reader)

    assert snapshot.files == [Path("/tmp/My Logo.svg")]
    assert snapshot.text == "/tmp/My Logo.svg"


def test_linux_image_only_without_text():
    reader = reader_for({"image/png": build_png((3, 2))})
    snapshot = LinuxClipboard()._extract_from_types(["image/png"], reader)

    assert snapshot.image.size == (3, 2)


def test_linux_skips_image_when_text_is_present():
    reader = reader_for({"image/png": build_png(), "text/plain": b"caption"})
    snapshot = LinuxClipboard()._extract_from_types(["image/png", "text/plain"], reader)

    assert snapshot.text == "caption"
    assert snapshot.image is None
    assert "image/png" not in reader.requested


def test_linux_without_tools_is_unavailable(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda name: None)

    with pytest.raises(ClipboardUnavailableError):
        LinuxClipboard().current_contents()
    assert not LinuxClipboard().set_text("nothing to write with")


def test_empty_snapshot_reads_as_none():
    backend = FakeBackend()
    backend.snapshot = ClipboardSnapshot()

    assert backend.current_contents() is None


def test_backend_errors_become_unavailable():
    backend = FakeBackend()
    backend.error = OSError("display closed")

    with pytest.raises(ClipboardUnavailableError):
        backend.current_contents()


def test_factory_picks_platform_backend(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Linux")
    assert factory.get_clipboard_class() is LinuxClipboard

    monkeypatch.setattr(factory.platform, "system", lambda: "Plan9")
    with pytest.raises(NotImplementedError):
        factory.get_clipboard_backend()
