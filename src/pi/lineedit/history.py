"""Submitted-line history and per-session navigation over it."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class History:
    """Append-ordered store of submitted lines.

    Owned by the application and shared read-only with every session that
    is bound to it. Mutate it only between sessions.
    """

    def __init__(self, lines: list[str] | None = None) -> None:
        self._lines: list[str] = list(lines or [])

    def push(self, line: str) -> None:
        """Append a submitted line. Duplicates are kept."""
        self._lines.append(line)

    def get(self, idx: int) -> str | None:
        """Entry at *idx*, oldest first, or ``None`` when out of range."""
        if 0 <= idx < len(self._lines):
            return self._lines[idx]
        return None

    def remove(self, idx: int) -> str | None:
        """Remove and return the entry at *idx*; ``None`` when out of range."""
        if 0 <= idx < len(self._lines):
            return self._lines.pop(idx)
        return None

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(list(self._lines))


LIVE = -1


class HistoryCursor:
    """Position of one session inside a :class:`History`.

    The offset counts back from the newest entry: ``-1`` is the line being
    edited, ``0`` the most recent submission, ``len(history) - 1`` the oldest.
    The cursor must not outlive the history it was created for.
    """

    def __init__(self, history: History) -> None:
        self._history = history
        self._offset = LIVE

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def is_live(self) -> bool:
        return self._offset == LIVE

    def incr(self) -> bool:
        """Step to an older entry. Returns ``False`` at the oldest one."""
        if self._offset + 1 >= len(self._history):
            return False
        self._offset += 1
        logger.debug("history cursor moved back to offset %d", self._offset)
        return True

    def decr(self) -> bool:
        """Step to a newer entry, ending at the live line. ``False`` when already live."""
        if self._offset == LIVE:
            return False
        self._offset -= 1
        logger.debug("history cursor moved forward to offset %d", self._offset)
        return True

    def get(self) -> str | None:
        """Text of the entry under the cursor, ``None`` at the live position."""
        if self._offset == LIVE:
            return None
        return self._history.get(len(self._history) - 1 - self._offset)
