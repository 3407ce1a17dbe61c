"""The line being edited and its cursor.

Python strings are sequences of code points, so the cursor is a plain
character index into the content and is always in ``[0, len(content)]``.
Byte widths never leak into cursor arithmetic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import wcwidth as _wcwidth

# SGR and simple CSI sequences inside a prompt take no columns.
_PROMPT_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_ERASE_TO_EOL = "\x1b[0K"
_CURSOR_FORWARD_FMT = "\x1b[{}C"

# ---------------------------------------------------------------------------
# Character classes for word motions
# ---------------------------------------------------------------------------

_SPACE = 0
_WORD = 1
_PUNCT = 2


def _char_class(char: str) -> int:
    if char.isspace():
        return _SPACE
    if char.isalnum() or char == "_":
        return _WORD
    return _PUNCT


def _ws_class(char: str) -> int:
    return _SPACE if char.isspace() else _WORD


def display_width(text: str, wide_chars: bool = False) -> int:
    """Number of terminal columns *text* occupies, escape codes excluded."""
    plain = _PROMPT_ESCAPE_RE.sub("", text)
    if not wide_chars:
        return len(plain)
    width = _wcwidth.wcswidth(plain)
    # wcswidth reports -1 for non-printables; fall back to one column each
    return width if width >= 0 else len(plain)


@dataclass
class BufferSnapshot:
    content: str
    cursor: int


class Buffer:
    """Single-line edit buffer with a held-aside copy for history browsing."""

    def __init__(self, content: str = "") -> None:
        self._content = content
        self._cursor = len(content)
        self._held = ""

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._content)

    def __str__(self) -> str:
        return self._content

    def to_string(self) -> str:
        return self._content

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot(self._content, self._cursor)

    def restore(self, snapshot: BufferSnapshot) -> None:
        self._content = snapshot.content
        self._cursor = min(snapshot.cursor, len(snapshot.content))

    # -- plain motions ------------------------------------------------------

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self) -> None:
        if self._cursor < len(self._content):
            self._cursor += 1

    def move_start(self) -> None:
        self._cursor = 0

    def move_end(self) -> None:
        self._cursor = len(self._content)

    # -- word motions -------------------------------------------------------

    def _word_right(self, classify) -> None:
        text = self._content
        i = self._cursor
        if i < len(text) and classify(text[i]) != _SPACE:
            cls = classify(text[i])
            while i < len(text) and classify(text[i]) == cls:
                i += 1
        while i < len(text) and classify(text[i]) == _SPACE:
            i += 1
        self._cursor = i

    def _word_left(self, classify) -> None:
        text = self._content
        i = self._cursor
        while i > 0 and classify(text[i - 1]) == _SPACE:
            i -= 1
        if i > 0:
            cls = classify(text[i - 1])
            while i > 0 and classify(text[i - 1]) == cls:
                i -= 1
        self._cursor = i

    def _end_of_word_right(self, classify) -> None:
        text = self._content
        i = self._cursor + 1
        while i < len(text) and classify(text[i]) == _SPACE:
            i += 1
        if i >= len(text):
            return
        cls = classify(text[i])
        while i + 1 < len(text) and classify(text[i + 1]) == cls:
            i += 1
        self._cursor = i

    def move_word_right(self) -> None:
        """Move to the first character of the next word."""
        self._word_right(_char_class)

    def move_word_left(self) -> None:
        """Move to the first character of the current or previous word."""
        self._word_left(_char_class)

    def move_end_of_word_right(self) -> None:
        """Move to the last character of the current or next word."""
        self._end_of_word_right(_char_class)

    def move_ws_word_right(self) -> None:
        self._word_right(_ws_class)

    def move_ws_word_left(self) -> None:
        self._word_left(_ws_class)

    def move_end_of_ws_word_right(self) -> None:
        self._end_of_word_right(_ws_class)

    # -- find-char motions --------------------------------------------------

    def move_char_right(self, char: str) -> None:
        """``f``: land on the next occurrence of *char*."""
        idx = self._content.find(char, self._cursor + 1)
        if idx != -1:
            self._cursor = idx

    def move_char_left(self, char: str) -> None:
        """``F``: land on the previous occurrence of *char*."""
        idx = self._content.rfind(char, 0, self._cursor)
        if idx != -1:
            self._cursor = idx

    def move_before_char_right(self, char: str) -> None:
        """``t``: land just before the next occurrence of *char*."""
        idx = self._content.find(char, self._cursor + 1)
        if idx != -1:
            self._cursor = idx - 1

    def move_before_char_left(self, char: str) -> None:
        """``T``: land just after the previous occurrence of *char*."""
        idx = self._content.rfind(char, 0, self._cursor)
        if idx != -1:
            self._cursor = idx + 1

    # -- edits --------------------------------------------------------------

    def delete_char_left_of_cursor(self) -> None:
        if self._cursor > 0:
            self._content = self._content[: self._cursor - 1] + self._content[self._cursor :]
            self._cursor -= 1

    def delete_char_right_of_cursor(self) -> None:
        if self._cursor < len(self._content):
            self._content = self._content[: self._cursor] + self._content[self._cursor + 1 :]

    def delete_char_right_of_cursor_or_eof(self) -> bool:
        """Like :meth:`delete_char_right_of_cursor`; ``False`` means end of file.

        End of file is signalled only when the buffer is already empty.
        """
        if not self._content:
            return False
        self.delete_char_right_of_cursor()
        return True

    def _cut(self, start: int, end: int) -> str:
        removed = self._content[start:end]
        self._content = self._content[:start] + self._content[end:]
        self._cursor = start
        return removed

    def delete_to_start(self) -> str:
        return self._cut(0, self._cursor)

    def delete_to_end(self) -> str:
        return self._cut(self._cursor, len(self._content))

    def delete_word_left(self) -> str:
        end = self._cursor
        self.move_word_left()
        return self._cut(self._cursor, end)

    def delete_word_right(self) -> str:
        start = self._cursor
        self.move_word_right()
        return self._cut(start, self._cursor)

    def insert_at_cursor(self, text: str) -> None:
        self._content = self._content[: self._cursor] + text + self._content[self._cursor :]
        self._cursor += len(text)

    def replace_at_cursor(self, text: str) -> None:
        """Overwrite ``len(text)`` characters at the cursor, growing the line if needed."""
        end = self._cursor + len(text)
        self._content = self._content[: self._cursor] + text + self._content[end:]
        self._cursor = end

    def substitute(self) -> None:
        """Remove the character under the cursor (Vi ``s``)."""
        self.delete_char_right_of_cursor()

    def transpose_chars(self) -> None:
        """Swap the two characters around the cursor and step past them."""
        text = self._content
        if len(text) < 2 or self._cursor == 0:
            return
        pos = min(self._cursor, len(text) - 1)
        self._content = text[: pos - 1] + text[pos] + text[pos - 1] + text[pos + 1 :]
        self._cursor = pos + 1

    def replace(self, text: str) -> None:
        """Replace the whole content, leaving the cursor at the end."""
        self._content = text
        self._cursor = len(text)

    def swap(self) -> None:
        """Exchange the live content with the held-aside copy."""
        self._content, self._held = self._held, self._content
        self._cursor = len(self._content)

    # -- rendering ----------------------------------------------------------

    def get_line(self, prompt: str, wide_chars: bool = False) -> str:
        """Render *prompt* and the content, then place the terminal cursor."""
        column = display_width(prompt, wide_chars) + display_width(
            self._content[: self._cursor], wide_chars
        )
        line = "\r" + prompt + self._content + _ERASE_TO_EOL + "\r"
        if column > 0:
            line += _CURSOR_FORWARD_FMT.format(column)
        return line
