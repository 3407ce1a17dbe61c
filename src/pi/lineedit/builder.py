"""Assembles small escape-code sequences for the terminal."""

from __future__ import annotations

_ASK_CURSOR_POS = "\x1b[6n"
_INVERT_COLOR = "\x1b[7m"
_RESET_COLOR = "\x1b[0m"


class Builder:
    """Accumulates text and escape codes, then encodes them in one write."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._parts: list[str] = []
        self._encoding = encoding

    def ask_cursor_pos(self) -> Builder:
        self._parts.append(_ASK_CURSOR_POS)
        return self

    def invert_color(self) -> Builder:
        self._parts.append(_INVERT_COLOR)
        return self

    def reset_color(self) -> Builder:
        self._parts.append(_RESET_COLOR)
        return self

    def append(self, text: str) -> Builder:
        self._parts.append(text)
        return self

    def build(self) -> bytes:
        return "".join(self._parts).encode(self._encoding, errors="replace")
