"""Clipboard change detection.

The monitor owns the only piece of mutable state, the last content it has
observed. Every read or write of that state happens on the monitor's single
worker thread: polls, external re-seeds and resets are all queued as
commands and executed one at a time, so a poll can never overlap another
poll or race a consumer that just wrote to the clipboard itself.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from virtualclipboard.clipboard import ClipboardBackend, get_clipboard_backend
from virtualclipboard.exceptions import ClipboardUnavailableError
from virtualclipboard.models.clipboard_item import ClipboardItem
from virtualclipboard.probe.content_probe import probe_gif_bytes, probe_image, probe_text
from virtualclipboard.probe.imaging import images_equal

logger = logging.getLogger(__name__)

Observed = Union[str, bytes, Image.Image]


@dataclass(frozen=True)
class _PollCommand:
    pass


@dataclass(frozen=True)
class _SeedCommand:
    content: Optional[Observed]


@dataclass(frozen=True)
class _ResetCommand:
    item: ClipboardItem


@dataclass(frozen=True)
class _StopCommand:
    pass


def same_content(current: Optional[Observed], last: Optional[Observed]) -> bool:
    """Dedup rule: value equality for text and GIF bytes, pixels for rasters."""
    if current is None or last is None:
        return current is None and last is None
    if isinstance(current, Image.Image):
        return isinstance(last, Image.Image) and images_equal(current, last)
    return type(current) is type(last) and current == last


class ClipboardMonitor:
    """Polls the system clipboard and emits one item per genuine change."""

    def __init__(
        self,
        on_new_item: Callable[[ClipboardItem], None],
        backend: Optional[ClipboardBackend] = None,
        poll_interval: float = 0.5,
    ) -> None:
        self._on_new_item = on_new_item
        self._backend = backend or get_clipboard_backend()
        self.poll_interval = poll_interval

        self._commands: "queue.Queue[object]" = queue.Queue()
        self._last_observed: Optional[Observed] = None
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._poll_pending = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._ticker: Optional[threading.Thread] = None
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def last_observed(self) -> Optional[Observed]:
        return self._last_observed

    # ---------------------------------------------------------------------
    # Lifecycle management
    # ---------------------------------------------------------------------
    def start(self) -> None:
        with self._lock:
            if self._is_running:
                logger.debug("ClipboardMonitor already running")
                return

            logger.info("Starting ClipboardMonitor (interval=%ss)", self.poll_interval)
            # per-run events: a worker left over from an earlier run never sees this run as live
            self._stop_event = threading.Event()
            self._poll_pending = threading.Event()
            self._is_running = True
            args = (self._commands, self._stop_event, self._poll_pending)
            self._worker = threading.Thread(
                target=self._run_worker, args=args, name="clipboard-monitor", daemon=True)
            self._ticker = threading.Thread(
                target=self._run_ticker, args=args, name="clipboard-monitor-ticker", daemon=True)
            self._worker.start()
            self._ticker.start()

    def stop(self) -> None:
        """Cancel future polls; a poll already running is allowed to finish.

        Safe to call from ``on_new_item``: the worker then exits as soon as
        the callback returns.
        """
        with self._lock:
            if not self._is_running or self._stop_event.is_set():
                return

            logger.info("Stopping ClipboardMonitor")
            self._stop_event.set()
            self._commands.put(_StopCommand())
            # commands sent from now on belong to the next run
            self._commands = queue.Queue()
            threads = (self._ticker, self._worker)

        current = threading.current_thread()
        for thread in threads:
            if thread is not None and thread is not current:
                thread.join()

        with self._lock:
            self._ticker = None
            self._worker = None
            self._is_running = False

    def run_forever(self) -> None:
        try:
            self.start()
            while not self._stop_event.wait(timeout=self.poll_interval):
                continue
        except KeyboardInterrupt:
            logger.info("ClipboardMonitor interrupted by user")
        finally:
            self.stop()

    def __enter__(self) -> "ClipboardMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ---------------------------------------------------------------------
    # Commands from consumers
    # ---------------------------------------------------------------------
    def notify_external_copy(self, content: Union[Observed, ClipboardItem, None]) -> None:
        """Record content the consumer itself just put on the clipboard.

        The next poll then treats that content as already seen.
        """
        if isinstance(content, ClipboardItem):
            content = content.fingerprint
        with self._lock:
            self._commands.put(_SeedCommand(content))

    def reset_if_current(self, item: ClipboardItem) -> None:
        """Forget the last observed content if it is ``item``'s content."""
        with self._lock:
            self._commands.put(_ResetCommand(item))

    def poll_once(self) -> None:
        """Run queued commands and one poll on the calling thread.

        Only valid while the background worker is not running.
        """
        if self._is_running:
            raise RuntimeError("poll_once() cannot be used while the monitor is running")
        self._drain_commands()
        self._poll()

    # ---------------------------------------------------------------------
    # Worker side
    # ---------------------------------------------------------------------
    def _run_ticker(self, commands: "queue.Queue[object]", stop_event: threading.Event,
                    poll_pending: threading.Event) -> None:
        while not stop_event.is_set():
            if not poll_pending.is_set():
                poll_pending.set()
                commands.put(_PollCommand())
            stop_event.wait(self.poll_interval)

    def _run_worker(self, commands: "queue.Queue[object]", stop_event: threading.Event,
                    poll_pending: threading.Event) -> None:
        while True:
            command = commands.get()
            if isinstance(command, _StopCommand):
                return
            try:
                if isinstance(command, _PollCommand):
                    try:
                        if not stop_event.is_set():
                            self._poll()
                    finally:
                        poll_pending.clear()
                else:
                    self._execute(command)
            except Exception:
                logger.exception("Clipboard monitor command %s failed", type(command).__name__)

    def _drain_commands(self) -> None:
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return
            if isinstance(command, (_SeedCommand, _ResetCommand)):
                self._execute(command)

    def _execute(self, command: object) -> None:
        if isinstance(command, _SeedCommand):
            self._last_observed = command.content
        elif isinstance(command, _ResetCommand):
            if same_content(command.item.fingerprint, self._last_observed):
                logger.debug("Forgetting last observed %s content", command.item.kind.value)
                self._last_observed = None

    def _poll(self) -> None:
        try:
            snapshot = self._backend.current_contents()
        except (ClipboardUnavailableError, OSError) as exc:
            logger.debug("Clipboard not readable this cycle: %s", exc)
            return

        if snapshot is None:
            return

        if snapshot.files and self._handle_file(snapshot.files[0]):
            return

        if snapshot.text is not None:
            self._handle_text(snapshot.text)
        elif snapshot.image is not None:
            self._handle_image(snapshot.image)

    def _handle_file(self, path: Path) -> bool:
        """Handle a copied ``.svg`` or ``.gif`` file; ``False`` lets other flavors run."""
        suffix = path.suffix.lower()
        if suffix == ".svg":
            try:
                svg_text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Could not read SVG file %s: %s", path, exc)
                return False
            if not same_content(svg_text, self._last_observed):
                self._last_observed = svg_text
                self._emit(probe_text(svg_text))
            return True

        if suffix == ".gif":
            try:
                gif_bytes = path.read_bytes()
            except OSError as exc:
                logger.debug("Could not read GIF file %s: %s", path, exc)
                return False
            if not same_content(gif_bytes, self._last_observed):
                self._last_observed = gif_bytes
                item = probe_gif_bytes(gif_bytes)
                if item is None:
                    logger.debug("GIF file %s could not be decoded", path)
                else:
                    self._emit(item)
            return True

        return False

    def _handle_text(self, text: str) -> None:
        if same_content(text, self._last_observed):
            return
        self._last_observed = text
        self._emit(probe_text(text))

    def _handle_image(self, image: Image.Image) -> None:
        if same_content(image, self._last_observed):
            return
        self._last_observed = image
        self._emit(probe_image(image))

    def _emit(self, item: ClipboardItem) -> None:
        logger.info("New %s item detected (%s)", item.kind.value, item.formatted_size)
        try:
            self._on_new_item(item)
        except Exception:
            logger.exception("Error while calling on_new_item")

