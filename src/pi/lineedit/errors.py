"""Error taxonomy for line editing sessions."""

from __future__ import annotations


class LineEditError(Exception):
    """Base class for every condition that ends a line editing session."""

    message = "line edit error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class TerminalIOError(LineEditError):
    """The underlying read/write/termios call failed."""

    message = "terminal I/O failure"

    def __init__(self, error: OSError) -> None:
        super().__init__(f"ERRNO: {error.strerror or error}")
        self.errno = error.errno
        self.__cause__ = error


class InvalidUTF8(LineEditError):
    message = "Invalid UTF-8 sequence"


class EndOfFile(LineEditError, EOFError):
    message = "End of file"


class Cancelled(LineEditError):
    message = "Cancelled"


class UnsupportedTerm(LineEditError):
    message = "Unsupported terminal type"


class ParseError(LineEditError):
    """The terminal answered a cursor position query with garbage."""

    message = "Malformed cursor position reply"
