"""Terminal driver and byte transport over a pair of file descriptors.

Raw mode is managed with :mod:`tty` and :mod:`termios`. The
:meth:`FdTerminal.raw_mode` context manager restores the saved attributes
on every exit path, exceptions included.
"""

from __future__ import annotations

import logging
import os
import termios
import tty
from contextlib import contextmanager
from typing import Iterator

from pi.lineedit.errors import EndOfFile, TerminalIOError

logger = logging.getLogger(__name__)

UNSUPPORTED_TERMS = ("dumb", "cons25", "emacs")


class FdTerminal:
    """Implements :class:`~pi.lineedit.run.RunIO` on raw file descriptors."""

    def __init__(self, input_fd: int = 0, output_fd: int = 1) -> None:
        self.input_fd = input_fd
        self.output_fd = output_fd
        self._original_termios: list | None = None
        self._write_log_path: str = os.environ.get("PI_LINEEDIT_WRITE_LOG", "")

    # -- capability checks --------------------------------------------------

    def is_a_tty(self) -> bool:
        return os.isatty(self.input_fd)

    @staticmethod
    def is_unsupported_term() -> bool:
        term = os.environ.get("TERM", "").lower()
        return term in UNSUPPORTED_TERMS

    # -- raw mode -----------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Save the current attributes and switch the input to raw mode."""
        try:
            self._original_termios = termios.tcgetattr(self.input_fd)
            tty.setraw(self.input_fd, termios.TCSAFLUSH)
        except termios.error as e:
            raise TerminalIOError(_as_os_error(e)) from e
        logger.debug("raw mode enabled on fd %d", self.input_fd)

    def disable_raw_mode(self) -> None:
        """Restore the attributes saved by :meth:`enable_raw_mode`."""
        if self._original_termios is None:
            return
        try:
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._original_termios)
        except termios.error as e:
            raise TerminalIOError(_as_os_error(e)) from e
        finally:
            self._original_termios = None
        logger.debug("raw mode disabled on fd %d", self.input_fd)

    @contextmanager
    def raw_mode(self) -> Iterator[FdTerminal]:
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    # -- transport ----------------------------------------------------------

    def read_byte(self) -> int:
        try:
            data = os.read(self.input_fd, 1)
        except OSError as e:
            raise TerminalIOError(e) from e
        if not data:
            raise EndOfFile()
        return data[0]

    def write(self, data: bytes) -> None:
        """Write all of *data*, retrying short writes."""
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.output_fd, view)
                view = view[written:]
        except OSError as e:
            raise TerminalIOError(e) from e

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                pass


def _as_os_error(error: termios.error) -> OSError:
    code, *rest = error.args or (0,)
    return OSError(code, rest[0] if rest else str(error))
