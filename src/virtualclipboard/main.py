#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
import time
from typing import List, Optional

from virtualclipboard.clipboard import ClipboardBackend, get_clipboard_backend
from virtualclipboard.config import MonitorConfig
from virtualclipboard.detection import label_item
from virtualclipboard.models import ClipboardItem, GifItem, UrlItem, to_record
from virtualclipboard.probe.content_probe import probe_file
from virtualclipboard.services import ClipboardHistory, ClipboardMonitor

logger = logging.getLogger(__name__)


def describe(item: ClipboardItem, language: Optional[str] = None) -> str:
    parts = [item.kind.value.upper(), item.formatted_size]
    if item.is_textual:
        parts.append(
            f"{item.word_count} words, {item.line_count} lines, {item.character_count} chars")
        if isinstance(item, UrlItem):
            parts.append(f"{item.protocol}://{item.domain}")
        if language:
            parts.append(f"code: {language}")
        preview = item.content.strip().replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        parts.append(repr(preview))
    else:
        parts.append(f"{item.width}x{item.height} ({item.aspect_ratio})")
        if isinstance(item, GifItem):
            parts.append(f"{item.frame_count} frames, {item.formatted_duration}")
    return " | ".join(parts)


class VirtualClipboardApp:

    def __init__(
        self,
        config: MonitorConfig,
        backend: Optional[ClipboardBackend] = None,
        as_json: bool = False,
    ):
        self.config = config
        self.as_json = as_json
        self.backend = backend or get_clipboard_backend()
        self.monitor = ClipboardMonitor(
            on_new_item=self._on_new_item,
            backend=self.backend,
            poll_interval=config.poll_interval,
        )
        self.history = ClipboardHistory(max_items=config.max_history)
        self.running = False

    def _on_new_item(self, item: ClipboardItem) -> None:
        if not self.history.add(item):
            return

        language = label_item(item) if self.config.detect_code else None
        if self.as_json:
            record = to_record(item)
            if language:
                record.metadata["language"] = language
            print(record.model_dump_json(), flush=True)
        else:
            print(describe(item, language), flush=True)

    def copy_text(self, text: str) -> bool:
        """Put ``text`` on the system clipboard without reporting it as a new copy."""
        if not self.backend.set_text(text):
            logger.warning("Could not write text to the clipboard")
            return False
        self.monitor.notify_external_copy(text)
        return True

    def delete(self, item: ClipboardItem) -> None:
        self.history.remove(item)
        self.monitor.reset_if_current(item)

    def start(self):
        if self.running:
            return
        self.running = True
        self.monitor.start()
        print("Virtual clipboard running. Press Ctrl+C to stop", file=sys.stderr)

    def stop(self):
        if not self.running:
            return
        self.running = False
        self.monitor.stop()
        logger.info("Stopped with %d items in history", len(self.history))

    def run_forever(self):
        self.start()

        try:
            while self.running:
                time.sleep(1.0)
        except KeyboardInterrupt:
            print("\nStopping...", file=sys.stderr)
        finally:
            self.stop()


def probe_paths(paths: List[str], detect_code: bool) -> int:
    status = 0
    for path in paths:
        item = probe_file(path)
        if item is None:
            print(f"{path}: unreadable", file=sys.stderr)
            status = 1
            continue
        language = label_item(item) if detect_code else None
        print(f"{path}: {describe(item, language)}")
    return status


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than 0")
    return number


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than 0")
    return number


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Virtual Clipboard - watch the system clipboard and classify each copy"
    )

    parser.add_argument(
        "-i", "--poll-interval",
        type=positive_float,
        default=None,
        help="Clipboard polling interval in seconds (default: VCLIP_POLL_INTERVAL or 0.5)"
    )

    parser.add_argument(
        "-m", "--max-history",
        type=positive_int,
        default=None,
        help="Number of items kept in history (default: VCLIP_MAX_HISTORY or 100)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print each new item as a JSON record"
    )

    parser.add_argument(
        "--no-code",
        action="store_true",
        help="Disable programming-language detection for text items"
    )

    parser.add_argument(
        "--seed",
        metavar="TEXT",
        default=None,
        help="Copy TEXT to the clipboard at startup without reporting it"
    )

    parser.add_argument(
        "--probe",
        nargs="+",
        metavar="FILE",
        default=None,
        help="Classify the given files and exit"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    config = MonitorConfig.from_env()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO),
        format="[%(levelname)s] %(message)s",
    )

    config = MonitorConfig(
        poll_interval=config.poll_interval if args.poll_interval is None else args.poll_interval,
        max_history=config.max_history if args.max_history is None else args.max_history,
        log_level=config.log_level,
        detect_code=config.detect_code and not args.no_code,
    )

    if args.probe:
        sys.exit(probe_paths(args.probe, config.detect_code))

    try:
        app = VirtualClipboardApp(config, as_json=args.json)
    except NotImplementedError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.seed is not None:
        app.copy_text(args.seed)

    def signal_handler(signum, frame):
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        app.run_forever()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
