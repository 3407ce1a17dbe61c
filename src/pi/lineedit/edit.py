"""Edit session state machine.

:class:`EditCtx` is an in-memory value holding everything one
``read_line`` call needs: the buffer, a cursor into the shared history,
the Vi mode state and the bytes of a partially received token. It does no
I/O. A host feeds it input with :meth:`EditCtx.fill` and asks what to do
next with :meth:`EditCtx.step`, which returns either :class:`Cont` (write
these bytes, then read more input) or :class:`Halt` (the session is over).
The blocking driver in :mod:`pi.lineedit.run` is one such host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from pi.lineedit.buffer import Buffer
from pi.lineedit.config import MAX_REPEAT_COUNT, LineEditConfig
from pi.lineedit.errors import Cancelled, EndOfFile, InvalidUTF8, LineEditError
from pi.lineedit.history import History, HistoryCursor
from pi.lineedit.instr import (
    VI_DELETE,
    VI_INSERT,
    VI_NORMAL,
    VI_REPLACE,
    EditMode,
    Instr,
    ViMode,
    interpret_token,
)
from pi.lineedit.kill_ring import KillRing
from pi.lineedit.parser import Key, Meta, NamedKey, Token, parse
from pi.lineedit.undo_stack import UndoStack

logger = logging.getLogger(__name__)

_CLEAR_SCREEN = "\x1b[2J\x1b[H"


@dataclass(frozen=True)
class Cont:
    """Write ``output`` to the terminal, then supply more input."""

    output: bytes


@dataclass(frozen=True)
class Halt:
    """Terminal state: either the finished ``line`` or the ``error`` that ended it."""

    line: str | None = None
    error: LineEditError | None = None

    def unwrap(self) -> str:
        """Return the submitted line, or raise the error that ended the session."""
        if self.error is not None:
            raise self.error
        return self.line or ""


EditResult = Union[Cont, Halt]

_BUFFER_OPS: dict[str, Callable[[Buffer], None]] = {
    "moveCursorLeft": Buffer.move_left,
    "moveCursorRight": Buffer.move_right,
    "moveCursorStart": Buffer.move_start,
    "moveCursorEnd": Buffer.move_end,
    "moveWordLeft": Buffer.move_word_left,
    "moveWordRight": Buffer.move_word_right,
    "moveEndOfWordRight": Buffer.move_end_of_word_right,
    "moveWsWordLeft": Buffer.move_ws_word_left,
    "moveWsWordRight": Buffer.move_ws_word_right,
    "moveEndOfWsWordRight": Buffer.move_end_of_ws_word_right,
    "deleteCharLeftOfCursor": Buffer.delete_char_left_of_cursor,
    "deleteCharRightOfCursor": Buffer.delete_char_right_of_cursor,
    "transposeChars": Buffer.transpose_chars,
}

_CHAR_MOTIONS: dict[str, Callable[[Buffer, str], None]] = {
    "moveCharLeft": Buffer.move_char_left,
    "moveCharRight": Buffer.move_char_right,
    "moveBeforeCharLeft": Buffer.move_before_char_left,
    "moveBeforeCharRight": Buffer.move_before_char_right,
}

# Instructions a Vi count prefix repeats.
_REPEATABLE = frozenset(
    {
        "moveCursorLeft",
        "moveCursorRight",
        "moveWordLeft",
        "moveWordRight",
        "moveEndOfWordRight",
        "moveWsWordLeft",
        "moveWsWordRight",
        "moveEndOfWsWordRight",
        "moveCharLeft",
        "moveCharRight",
        "moveBeforeCharLeft",
        "moveBeforeCharRight",
        "deleteCharLeftOfCursor",
        "deleteCharRightOfCursor",
        "historyPrev",
        "historyNext",
    }
)

_KILLS = frozenset({"deleteWordLeft", "deleteWordRight", "deleteToStart", "deleteToEnd", "changeToEnd"})

_HISTORY = frozenset({"historyPrev", "historyNext"})


class EditCtx:
    """State of one line editing session. Single use: once halted, it stays halted.

    The session only reads *history*; the history must outlive it.
    """

    def __init__(
        self,
        prompt: str,
        history: History,
        encoding: str = "utf-8",
        edit_mode: EditMode = "emacs",
        *,
        wide_chars: bool = False,
        max_repeat_count: int = MAX_REPEAT_COUNT,
        kill_ring_size: int = 32,
        undo_limit: int = 100,
    ) -> None:
        self.prompt = prompt
        self.encoding = encoding
        self._edit_mode: EditMode = edit_mode
        self._vi_mode = VI_INSERT
        self._buffer = Buffer()
        self._history_cursor = HistoryCursor(history)
        self._wide_chars = wide_chars
        self._max_repeat_count = max(1, max_repeat_count)
        self._count = 0
        self._seq = bytearray()
        self._halt: Halt | None = None
        self._clear_pending = False
        self._kill_ring = KillRing(max(0, kill_ring_size))
        self._undo_stack = UndoStack(max(0, undo_limit))
        self._last_kind: str | None = None

    @classmethod
    def from_config(cls, prompt: str, history: History, config: LineEditConfig) -> EditCtx:
        """Start a session with every option taken from *config*."""
        return cls(
            prompt,
            history,
            config.encoding,
            config.edit_mode,
            wide_chars=config.wide_chars,
            max_repeat_count=config.max_repeat_count,
            kill_ring_size=config.kill_ring_size,
            undo_limit=config.undo_limit,
        )

    # -- properties ---------------------------------------------------------

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def edit_mode(self) -> EditMode:
        return self._edit_mode

    @property
    def vi_mode(self) -> ViMode:
        return self._vi_mode

    @property
    def repeat_count(self) -> int:
        """The pending Vi count prefix, 0 when none was typed."""
        return self._count

    @property
    def halted(self) -> bool:
        return self._halt is not None

    # -- driven interface ---------------------------------------------------

    def fill(self, byte: int) -> None:
        """Feed one input byte, applying the instruction it completes, if any."""
        if self._halt is not None:
            return
        self._seq.append(byte)
        result = parse(self._seq)
        if result.status == "incomplete":
            return
        self._seq.clear()
        if result.status == "error" or result.token is None:
            self._finish(error=InvalidUTF8())
            return
        self.apply_token(result.token)

    def feed(self, data: bytes) -> None:
        """Feed several bytes; same as calling :meth:`fill` for each."""
        for byte in data:
            self.fill(byte)

    def close_input(self) -> None:
        """The input stream ended; halts with :class:`EndOfFile` unless already halted."""
        if self._halt is None:
            self._finish(error=EndOfFile())

    def step(self) -> EditResult:
        """What the host should do next.

        Returns:
            :class:`Cont` with the rendered prompt line while the session runs,
            the same :class:`Halt` on every call once it has ended.
        """
        if self._halt is not None:
            return self._halt
        line = self._buffer.get_line(self.prompt, self._wide_chars)
        if self._clear_pending:
            line = _CLEAR_SCREEN + line
            self._clear_pending = False
        return Cont(line.encode(self.encoding, errors="replace"))

    # -- applying instructions ----------------------------------------------

    def apply_token(self, token: Token) -> None:
        """Interpret *token* under the current mode and apply the result."""
        if isinstance(token, Meta) and self._edit_mode == "vi":
            # Esc followed quickly by a key: leave insert mode, then the key.
            self.apply(interpret_token(NamedKey(Key.escape), "vi", self._vi_mode))
            token = token.key
        if self._halt is None:
            self.apply(interpret_token(token, self._edit_mode, self._vi_mode))

    def apply(self, instr: Instr) -> None:
        """Apply one instruction, honouring a pending Vi repeat count."""
        if self._halt is not None:
            return
        if instr.kind == "digit":
            if instr.value != 0 or self._count != 0:
                self._count = min(self._count * 10 + instr.value, self._max_repeat_count)
                return
            # a leading 0 is the start-of-line motion
            instr = Instr("moveCursorStart")

        repeat = max(self._count, 1) if instr.kind in _REPEATABLE else 1
        if instr.kind != "moveCharMode":
            self._count = 0

        before = self._buffer.snapshot()
        for _ in range(repeat):
            if instr.kind in _HISTORY:
                # duplicate entries leave the buffer unchanged, so count cursor moves
                if not self._navigate_history(older=instr.kind == "historyPrev"):
                    break
                continue
            previous = self._buffer.snapshot()
            self._execute(instr)
            if self._halt is not None or self._buffer.snapshot() == previous:
                break

        if (
            instr.kind != "undo"
            and instr.kind not in _HISTORY
            and self._buffer.to_string() != before.content
        ):
            self._undo_stack.push(before)
        self._last_kind = instr.kind

    def _execute(self, instr: Instr) -> None:
        kind = instr.kind
        buf = self._buffer

        if kind in _BUFFER_OPS:
            _BUFFER_OPS[kind](buf)
            return

        if kind in _CHAR_MOTIONS:
            _CHAR_MOTIONS[kind](buf, instr.text)
            self._set_vi_mode(VI_NORMAL)
            return

        if kind == "insertAtCursor":
            buf.insert_at_cursor(instr.text)
        elif kind == "replaceAtCursor":
            buf.replace_at_cursor(instr.text)
            self._set_vi_mode(VI_NORMAL)
        elif kind == "substitute":
            buf.substitute()
            self._set_vi_mode(VI_INSERT)
        elif kind == "deleteCharRightOfCursorOrEOF":
            if not buf.delete_char_right_of_cursor_or_eof():
                self._finish(error=EndOfFile())
        elif kind in _KILLS:
            self._kill(kind)
        elif kind == "yank":
            text = self._kill_ring.yank()
            if text:
                buf.insert_at_cursor(text)
        elif kind == "undo":
            snapshot = self._undo_stack.pop()
            if snapshot is not None:
                buf.restore(snapshot)
        elif kind == "insertMode":
            self._set_vi_mode(VI_INSERT)
        elif kind == "insertStart":
            buf.move_start()
            self._set_vi_mode(VI_INSERT)
        elif kind == "appendMode":
            buf.move_right()
            self._set_vi_mode(VI_INSERT)
        elif kind == "appendEnd":
            buf.move_end()
            self._set_vi_mode(VI_INSERT)
        elif kind == "normalMode":
            self._set_vi_mode(VI_NORMAL)
        elif kind == "replaceMode":
            self._set_vi_mode(VI_REPLACE)
        elif kind == "moveCharMode" and instr.char_move is not None:
            self._set_vi_mode(ViMode.move_char(instr.char_move))
        elif kind == "deleteMode":
            self._set_vi_mode(VI_DELETE)
        elif kind == "clear":
            self._clear_pending = True
        elif kind == "done":
            self._finish(line=buf.to_string())
        elif kind == "cancel":
            self._finish(error=Cancelled())

    def _kill(self, kind: str) -> None:
        buf = self._buffer
        accumulate = self._last_kind in _KILLS
        if kind == "deleteWordLeft":
            self._kill_ring.kill(buf.delete_word_left(), backward=True, accumulate=accumulate)
        elif kind == "deleteToStart":
            self._kill_ring.kill(buf.delete_to_start(), backward=True, accumulate=accumulate)
        elif kind == "deleteWordRight":
            self._kill_ring.kill(buf.delete_word_right(), backward=False, accumulate=accumulate)
        else:
            self._kill_ring.kill(buf.delete_to_end(), backward=False, accumulate=accumulate)
            if kind == "changeToEnd":
                self._set_vi_mode(VI_INSERT)

    def _navigate_history(self, older: bool) -> bool:
        """Step the history cursor one entry and load it into the buffer.

        Args:
            older: Move towards the oldest entry instead of back to the live line.

        Returns:
            Whether the cursor moved. Undo snapshots belong to the line they were
            taken from, so every move starts a fresh undo stack.
        """
        cursor = self._history_cursor
        was_live = cursor.is_live
        if not (cursor.incr() if older else cursor.decr()):
            return False
        self._undo_stack.clear()
        if was_live or cursor.is_live:
            # park the draft, or bring it back
            self._buffer.swap()
        if not cursor.is_live:
            self._buffer.replace(cursor.get() or "")
        return True

    def _set_vi_mode(self, mode: ViMode) -> None:
        if self._edit_mode != "vi" or mode == self._vi_mode:
            return
        logger.debug("vi mode %s -> %s", self._vi_mode.kind, mode.kind)
        self._vi_mode = mode

    def _finish(self, line: str | None = None, error: LineEditError | None = None) -> None:
        self._halt = Halt(line=line, error=error)
        logger.debug("edit session halted: %s", error if error is not None else "done")
