"""Bounded undo stack of buffer snapshots."""

from __future__ import annotations

from collections import deque

from pi.lineedit.buffer import BufferSnapshot


class UndoStack:
    """Snapshots taken before each content change; the oldest fall off first."""

    def __init__(self, limit: int = 100) -> None:
        self._stack: deque[BufferSnapshot] = deque(maxlen=limit)

    def push(self, snapshot: BufferSnapshot) -> None:
        """Record the state to return to on the next undo."""
        # identical content is one undo step
        if self._stack and self._stack[-1].content == snapshot.content:
            return
        self._stack.append(snapshot)

    def pop(self) -> BufferSnapshot | None:
        """Most recent snapshot, removed from the stack; ``None`` when empty."""
        return self._stack.pop() if self._stack else None

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
