"""Session-scoped line history with a navigation cursor."""

from __future__ import annotations

import enum
import logging

from rawline.config import DEFAULT_HISTORY_MAX_LEN

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    PREV = "prev"
    NEXT = "next"


class History:
    """Ordered log of lines, oldest first, bounded with FIFO eviction.

    ``current`` is the index of the entry being shown while navigating. While
    a line is being edited the newest entry is a placeholder holding the
    in-progress text, so moving away from it and back loses nothing.
    """

    def __init__(self, max_len: int = DEFAULT_HISTORY_MAX_LEN) -> None:
        self._entries: list[str] = []
        self._max_len = max(0, max_len)
        self.current: int = 0

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def max_len(self) -> int:
        return self._max_len

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def add(self, entry: str) -> None:
        """Append *entry*, evicting the oldest entries past the bound."""
        if self._max_len == 0:
            return
        self._entries.append(entry)
        self._evict()

    def pop(self) -> str | None:
        """Remove and return the newest entry (``None`` if empty)."""
        if not self._entries:
            return None
        entry = self._entries.pop()
        self._clamp_current()
        return entry

    def set_max_len(self, max_len: int) -> None:
        """Change the bound; shrinking drops the oldest entries."""
        self._max_len = max(0, max_len)
        self._evict()

    def navigate(self, direction: Direction, live: str) -> str | None:
        """Store *live* at ``current``, step in *direction*, return the entry.

        Stepping past either end leaves ``current`` where it is. Returns
        ``None`` only when the history is empty.
        """
        if not self._entries:
            return None

        self._entries[self.current] = live
        if direction is Direction.PREV:
            if self.current > 0:
                self.current -= 1
        elif self.current < len(self._entries) - 1:
            self.current += 1
        return self._entries[self.current]

    def _evict(self) -> None:
        overflow = len(self._entries) - self._max_len
        if overflow > 0:
            del self._entries[:overflow]
            logger.debug("evicted %d history entries", overflow)
        self._clamp_current()

    def _clamp_current(self) -> None:
        self.current = max(0, min(self.current, len(self._entries) - 1))
