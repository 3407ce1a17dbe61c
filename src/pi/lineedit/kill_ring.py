"""Bounded ring of killed text for Ctrl-K/Ctrl-U/Ctrl-W and Ctrl-Y."""

from __future__ import annotations

from collections import deque


class KillRing:
    """Keeps the most recent kills, newest last.

    Consecutive kills can be merged into one entry, prepending for backward
    kills and appending for forward ones. The oldest entries fall off once
    ``maxlen`` is reached.
    """

    def __init__(self, maxlen: int = 32) -> None:
        self._ring: deque[str] = deque(maxlen=maxlen)

    def kill(self, text: str, *, backward: bool, accumulate: bool = False) -> None:
        """Record killed text.

        Args:
            text: The removed text. Empty kills are ignored.
            backward: The kill went towards the start of the line (Ctrl-U, Ctrl-W),
                so an accumulated entry grows at its front.
            accumulate: Merge with the most recent entry instead of adding a new one.
        """
        if not text:
            return
        if accumulate and self._ring:
            last = self._ring.pop()
            text = text + last if backward else last + text
        self._ring.append(text)

    def yank(self) -> str | None:
        """Most recent entry, or ``None`` when nothing was killed yet."""
        return self._ring[-1] if self._ring else None

    def __len__(self) -> int:
        return len(self._ring)
