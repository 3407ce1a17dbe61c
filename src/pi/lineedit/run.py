"""Blocking driver: owns the read/write loop around an :class:`EditCtx`."""

from __future__ import annotations

import logging
from typing import Protocol

from pi.lineedit.builder import Builder
from pi.lineedit.edit import EditCtx, Halt
from pi.lineedit.errors import EndOfFile, ParseError
from pi.lineedit.parser import parse_cursor_pos

logger = logging.getLogger(__name__)


class RunIO(Protocol):
    """Byte transport the blocking driver reads from and writes to.

    ``read_byte`` raises :class:`~pi.lineedit.errors.EndOfFile` when the
    input is closed; both methods raise
    :class:`~pi.lineedit.errors.TerminalIOError` on OS failures.
    """

    def write(self, data: bytes) -> None: ...

    def read_byte(self) -> int: ...


def query_cursor_pos(io: RunIO) -> tuple[int, int]:
    """Ask the terminal where the cursor is; returns ``(row, col)``, 1-based."""
    io.write(Builder().ask_cursor_pos().build())
    seq = bytearray()
    while True:
        reply = parse_cursor_pos(seq)
        if reply.status == "success":
            logger.debug("cursor at row %d col %d", reply.row, reply.col)
            return reply.row, reply.col
        if reply.status == "error":
            raise ParseError()
        seq.append(io.read_byte())


def protect_newline(io: RunIO, encoding: str = "utf-8") -> None:
    """Start the prompt on a fresh line if the previous output left no newline.

    Like zsh, a reverse-video ``%`` marks the spot where the output ended.
    """
    _, col = query_cursor_pos(io)
    if col > 1:
        io.write(Builder(encoding).invert_color().append("%").reset_color().append("\r\n").build())


def run_edit(ctx: EditCtx, io: RunIO) -> str:
    """Drive *ctx* to completion, one byte at a time. Raises the error that halted it."""
    while True:
        result = ctx.step()
        if isinstance(result, Halt):
            return result.unwrap()
        io.write(result.output)
        try:
            byte = io.read_byte()
        except EndOfFile:
            ctx.close_input()
            continue
        ctx.fill(byte)


def run(ctx: EditCtx, io: RunIO, *, newline_protection: bool = True) -> str:
    if newline_protection:
        protect_newline(io, ctx.encoding)
    return run_edit(ctx, io)
