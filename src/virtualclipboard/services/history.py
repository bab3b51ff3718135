import logging
import threading
from typing import Callable, List, Optional

from virtualclipboard.models.clipboard_item import ClipboardItem, Kind

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 100


class ClipboardHistory:
    """Bounded, newest-first list of clipboard items kept in memory only."""

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS,
                 on_evict: Optional[Callable[[ClipboardItem], None]] = None) -> None:
        if max_items <= 0:
            raise ValueError(f"max_items must be positive, got {max_items}")
        self.max_items = max_items
        self._on_evict = on_evict
        self._items: List[ClipboardItem] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self):
        return iter(self.items())

    def items(self) -> List[ClipboardItem]:
        with self._lock:
            return list(self._items)

    @property
    def latest(self) -> Optional[ClipboardItem]:
        with self._lock:
            return self._items[0] if self._items else None

    def add(self, item: ClipboardItem) -> bool:
        """Insert ``item`` at the top; ``False`` when it equals the current top item."""
        with self._lock:
            if self._items and self._items[0] == item:
                return False
            self._items.insert(0, item)
            evicted = self._items[self.max_items:]
            del self._items[self.max_items:]

        for old in evicted:
            logger.debug("Evicted %s item %s from history", old.kind.value, old.item_id)
            if self._on_evict is not None:
                self._on_evict(old)
        return True

    def remove(self, item: ClipboardItem) -> bool:
        with self._lock:
            for index, existing in enumerate(self._items):
                if existing is item or existing == item:
                    del self._items[index]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def resize(self, max_items: int) -> None:
        if max_items <= 0:
            raise ValueError(f"max_items must be positive, got {max_items}")
        with self._lock:
            self.max_items = max_items
            del self._items[max_items:]

    def search(self, query: str) -> List[ClipboardItem]:
        """Text items whose content contains ``query``, ignoring case."""
        needle = query.lower()
        with self._lock:
            if not needle:
                return list(self._items)
            return [
                item for item in self._items
                if item.kind is Kind.TEXT and needle in item.content.lower()
            ]

    def filter(self, kind: Kind) -> List[ClipboardItem]:
        with self._lock:
            return [item for item in self._items if item.kind is kind]

    def sort_by_date(self) -> None:
        with self._lock:
            self._items.sort(key=lambda item: item.created_at, reverse=True)
