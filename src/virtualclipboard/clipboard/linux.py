import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote, urlparse

from PIL import Image

from virtualclipboard.clipboard.base import ClipboardBackend, ClipboardSnapshot
from virtualclipboard.exceptions import ClipboardUnavailableError
from virtualclipboard.probe.imaging import decode_image, encode_png

Reader = Callable[[str], Optional[bytes]]


class LinuxClipboard(ClipboardBackend):
    _FILE_TARGETS = {"x-special/gnome-copied-files", "text/uri-list"}
    _IMAGE_TARGETS = {
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/bmp",
        "image/x-ms-bmp",
        "image/webp",
        "image/gif",
    }
    _TEXT_TARGETS = (
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "text/plain",
        "string",
    )

    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-paste"):
            return self._from_wayland()
        if shutil.which("xclip"):
            return self._from_xclip()
        raise ClipboardUnavailableError("Neither wl-paste nor xclip is available")

    def _from_wayland(self) -> Optional[ClipboardSnapshot]:
        types = self._parse_type_list(
            self._run_command(["wl-paste", "--list-types"], timeout=1.5)
        )

        def reader(target: str) -> Optional[bytes]:
            command = ["wl-paste", "--type", target]
            if target.lower().startswith("text/"):
                command.append("--no-newline")
            return self._run_command(command, timeout=1.5)

        return self._extract_from_types(types, reader)

    def _from_xclip(self) -> Optional[ClipboardSnapshot]:
        types = self._parse_type_list(
            self._run_command(
                ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                timeout=1.5,
            )
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["xclip", "-selection", "clipboard", "-t", target, "-o"],
                timeout=1.5,
            )

        return self._extract_from_types(types, reader)

    def _extract_from_types(self, types: List[str], reader: Reader) -> Optional[ClipboardSnapshot]:
        if not types:
            return None
        lowered = {target.lower(): target for target in types}

        files: List[Path] = []
        for target_lower, target in lowered.items():
            if target_lower in self._FILE_TARGETS:
                data = reader(target)
                if data:
                    files = self._parse_paths(data)
                    break

        text: Optional[str] = None
        for candidate in self._TEXT_TARGETS:
            if candidate in lowered:
                data = reader(lowered[candidate])
                if data is not None:
                    text = data.decode("utf-8", errors="replace")
                    break

        image: Optional[Image.Image] = None
        if text is None and not files:
            for target_lower, target in lowered.items():
                if target_lower in self._IMAGE_TARGETS:
                    data = reader(target)
                    image = decode_image(data) if data else None
                    if image is not None:
                        break

        return ClipboardSnapshot(files=files, text=text, image=image)

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _parse_paths(self, data: bytes) -> List[Path]:
        text = data.decode("utf-8", errors="ignore")
        lines = [line.strip() for line in text.replace(
            "\r", "\n").split("\n") if line.strip() and not line.startswith("#")]
        if lines and lines[0].lower() in {"copy", "cut"}:
            lines = lines[1:]

        paths: List[Path] = []
        for entry in lines:
            parsed = urlparse(entry)
            if parsed.scheme == "file":
                candidate = Path(unquote(parsed.path))
            else:
                candidate = Path(unquote(entry))
            paths.append(candidate)

        return paths

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def _write_command(self, command: List[str], data: bytes) -> bool:
        try:
            subprocess.run(
                command,
                input=data,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=2.0,
            )
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def _copy_command(self, mime: str) -> Optional[List[str]]:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return ["wl-copy", "--type", mime]
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard", "-t", mime]
        return None

    def _set_text(self, text: str) -> bool:
        command = self._copy_command("text/plain;charset=utf-8")
        if command is None:
            return False
        return self._write_command(command, text.encode("utf-8"))

    def _set_image(self, image: Image.Image) -> bool:
        command = self._copy_command("image/png")
        if command is None:
            return False
        return self._write_command(command, encode_png(image))
