"""Library facade: read lines from a terminal with editing and history."""

from __future__ import annotations

import contextlib
import logging

from pi.lineedit.config import LineEditConfig
from pi.lineedit.edit import EditCtx
from pi.lineedit.errors import TerminalIOError, UnsupportedTerm
from pi.lineedit.history import History
from pi.lineedit.instr import EditMode
from pi.lineedit.run import run
from pi.lineedit.terminal import FdTerminal

logger = logging.getLogger(__name__)


class LineEditor:
    """Reads edited lines from ``input_fd`` and echoes to ``output_fd``.

    Keeps one :class:`History` across calls. Add submitted lines to it with
    :meth:`add_history`; nothing is added automatically.
    """

    def __init__(
        self,
        input_fd: int = 0,
        output_fd: int = 1,
        config: LineEditConfig | None = None,
        history: History | None = None,
    ) -> None:
        self._term = FdTerminal(input_fd, output_fd)
        self._config = config or LineEditConfig()
        self._history = history if history is not None else History()

    @property
    def config(self) -> LineEditConfig:
        return self._config

    @property
    def edit_mode(self) -> EditMode:
        return self._config.edit_mode

    @edit_mode.setter
    def edit_mode(self, mode: EditMode) -> None:
        if mode not in ("emacs", "vi"):
            raise ValueError(f"unknown edit mode: {mode!r}")
        self._config.edit_mode = mode

    @property
    def history(self) -> History:
        return self._history

    def new_session(self, prompt: str) -> EditCtx:
        """An edit session for hosts that run their own I/O loop."""
        return EditCtx.from_config(prompt, self._history, self._config)

    def read_line(self, prompt: str) -> str:
        """Prompt, edit in raw mode, and return the submitted line.

        Raises a :class:`~pi.lineedit.errors.LineEditError` subclass when the
        session ends any other way.
        """
        if self._term.is_unsupported_term() or not self._term.is_a_tty():
            raise UnsupportedTerm()
        ctx = self.new_session(prompt)
        try:
            with self._term.raw_mode():
                line = run(ctx, self._term, newline_protection=self._config.protect_newline)
        except BaseException:
            # the session's own error wins over a failing trailing newline
            with contextlib.suppress(TerminalIOError):
                self._term.write(b"\r\n")
            raise
        self._term.write(b"\r\n")
        return line

    # -- history ------------------------------------------------------------

    def history_length(self) -> int:
        return len(self._history)

    def add_history(self, line: str) -> None:
        self._history.push(line)

    def get_history_item(self, idx: int) -> str | None:
        return self._history.get(idx)

    def remove_history_item(self, idx: int) -> str | None:
        return self._history.remove(idx)

    def clear_history(self) -> None:
        self._history.clear()
