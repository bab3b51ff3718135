import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from PIL import Image

from virtualclipboard.exceptions import ClipboardUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClipboardSnapshot:
    """Flavors the system clipboard exposed at one instant."""

    files: List[Path] = field(default_factory=list)
    text: Optional[str] = None
    image: Optional[Image.Image] = None

    @property
    def is_empty(self) -> bool:
        return not self.files and self.text is None and self.image is None


class ClipboardBackend(ABC):

    @abstractmethod
    def _read_snapshot(self) -> Optional[ClipboardSnapshot]:
        pass

    @abstractmethod
    def _set_text(self, text: str) -> bool:
        pass

    @abstractmethod
    def _set_image(self, image: Image.Image) -> bool:
        pass

    def current_contents(self) -> Optional[ClipboardSnapshot]:
        """Read the clipboard.

        Raises ``ClipboardUnavailableError`` when the clipboard cannot be
        read right now; callers are expected to retry later.
        """
        try:
            snapshot = self._read_snapshot()
        except ClipboardUnavailableError:
            raise
        except Exception as exc:
            raise ClipboardUnavailableError(str(exc)) from exc

        if snapshot is None or snapshot.is_empty:
            return None
        return snapshot

    def set_text(self, text: str) -> bool:
        try:
            return self._set_text(text)
        except Exception:
            logger.debug("Failed to write text to the clipboard", exc_info=True)
            return False

    def set_image(self, image: Image.Image) -> bool:
        try:
            return self._set_image(image)
        except Exception:
            logger.debug("Failed to write image to the clipboard", exc_info=True)
            return False
