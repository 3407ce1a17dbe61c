"""Incremental classification of raw terminal input bytes.

The parser is stateless. The caller accumulates bytes and calls
:func:`parse` with the whole accumulated sequence after every new byte.
The answer is one of three things:

* ``"error"`` -- the sequence can never become a valid token; discard it.
* ``"incomplete"`` -- read one more byte and ask again.
* ``"success"`` -- the whole sequence is exactly one :data:`Token`.

Nothing beyond the bytes already received is ever looked at, so a lone
``ESC`` stays incomplete until the next byte arrives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Union

logger = logging.getLogger(__name__)

ESC = 0x1B

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class Key:
    """Names carried by :class:`NamedKey` tokens."""

    enter = "enter"
    tab = "tab"
    backspace = "backspace"
    escape = "escape"
    up = "up"
    down = "down"
    left = "left"
    right = "right"
    home = "home"
    end = "end"
    insert = "insert"
    delete = "delete"
    page_up = "pageUp"
    page_down = "pageDown"
    ctrl_left = "ctrl+left"
    ctrl_right = "ctrl+right"
    alt_left = "alt+left"
    alt_right = "alt+right"
    unknown = "unknown"


@dataclass(frozen=True)
class ControlChar:
    """A C0 control byte other than the ones with a dedicated key name."""

    code: int

    @property
    def letter(self) -> str:
        """The key pressed together with Ctrl, e.g. ``"a"`` for 0x01."""
        return chr(self.code + 0x60) if self.code else "@"


@dataclass(frozen=True)
class NamedKey:
    name: str


@dataclass(frozen=True)
class Text:
    """Exactly one decoded character."""

    text: str


@dataclass(frozen=True)
class Meta:
    """``ESC`` immediately followed by a single-byte key."""

    key: Union[ControlChar, NamedKey, Text]


Token = Union[ControlChar, NamedKey, Text, Meta]

ParseStatus = Literal["success", "incomplete", "error"]


@dataclass(frozen=True)
class ParseResult:
    status: ParseStatus
    token: Token | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


INCOMPLETE = ParseResult("incomplete")
ERROR = ParseResult("error")


def _success(token: Token) -> ParseResult:
    return ParseResult("success", token)


# ---------------------------------------------------------------------------
# Escape sequence tables
# ---------------------------------------------------------------------------

CSI_KEYS: dict[bytes, str] = {
    b"A": Key.up,
    b"B": Key.down,
    b"C": Key.right,
    b"D": Key.left,
    b"H": Key.home,
    b"F": Key.end,
    b"1~": Key.home,
    b"7~": Key.home,
    b"4~": Key.end,
    b"8~": Key.end,
    b"2~": Key.insert,
    b"3~": Key.delete,
    b"5~": Key.page_up,
    b"6~": Key.page_down,
    b"1;5C": Key.ctrl_right,
    b"1;5D": Key.ctrl_left,
    b"1;3C": Key.alt_right,
    b"1;3D": Key.alt_left,
}

SS3_KEYS: dict[bytes, str] = {
    b"A": Key.up,
    b"B": Key.down,
    b"C": Key.right,
    b"D": Key.left,
    b"H": Key.home,
    b"F": Key.end,
}

_SINGLE_BYTE_KEYS: dict[int, str] = {
    0x0D: Key.enter,
    0x09: Key.tab,
    0x7F: Key.backspace,
}

_CSI_MAX_PARAMS = 8
_CURSOR_REPLY_MAX_DIGITS = 4

_DIGITS = frozenset(b"0123456789")


def _is_csi_param(byte: int) -> bool:
    return byte in _DIGITS or byte == ord(";")


def _is_csi_final(byte: int) -> bool:
    return (ord("A") <= byte <= ord("Z")) or (ord("a") <= byte <= ord("z")) or byte == ord("~")


# ---------------------------------------------------------------------------
# Single bytes and UTF-8
# ---------------------------------------------------------------------------


def _parse_single(byte: int) -> Token | None:
    """Classify a byte that is a complete token on its own, if it is one."""
    if byte in _SINGLE_BYTE_KEYS:
        return NamedKey(_SINGLE_BYTE_KEYS[byte])
    if byte < 0x20 and byte != ESC:
        return ControlChar(byte)
    if 0x20 <= byte < 0x7F:
        return Text(chr(byte))
    return None


def _utf8_length(lead: int) -> int:
    """Total sequence length announced by *lead*, or 0 if it cannot start one."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def _parse_utf8(seq: bytes) -> ParseResult:
    expected = _utf8_length(seq[0])
    if expected == 0 or len(seq) > expected:
        return ERROR
    if any(not 0x80 <= b <= 0xBF for b in seq[1:]):
        return ERROR
    if len(seq) < expected:
        return INCOMPLETE
    try:
        return _success(Text(seq.decode("utf-8")))
    except UnicodeDecodeError:
        # overlong forms and surrogates
        return ERROR


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------


def _parse_csi(body: bytes) -> ParseResult:
    """*body* is everything after ``ESC [``."""
    if not body:
        return INCOMPLETE
    *params, final = body
    if len(params) > _CSI_MAX_PARAMS or not all(_is_csi_param(b) for b in params):
        return ERROR
    if _is_csi_param(final):
        return INCOMPLETE if len(body) <= _CSI_MAX_PARAMS else ERROR
    if not _is_csi_final(final):
        return ERROR
    return _success(NamedKey(CSI_KEYS.get(bytes(body), Key.unknown)))


def _parse_escape(seq: bytes) -> ParseResult:
    if len(seq) == 1:
        return INCOMPLETE
    second = seq[1]
    if second == ord("["):
        return _parse_csi(seq[2:])
    if second == ord("O"):
        if len(seq) == 2:
            return INCOMPLETE
        if len(seq) == 3 and seq[2:] in SS3_KEYS:
            return _success(NamedKey(SS3_KEYS[seq[2:]]))
        return ERROR
    if len(seq) > 2:
        return ERROR
    if second == ESC:
        return _success(NamedKey(Key.escape))
    inner = _parse_single(second)
    if inner is None:
        return ERROR
    return _success(Meta(inner))


def parse(seq: bytes) -> ParseResult:
    """Classify the accumulated input *seq* as one token."""
    seq = bytes(seq)
    if not seq:
        return INCOMPLETE
    lead = seq[0]
    if lead == ESC:
        result = _parse_escape(seq)
    elif lead < 0x80:
        token = _parse_single(lead)
        result = _success(token) if token is not None and len(seq) == 1 else ERROR
    else:
        result = _parse_utf8(seq)
    if result.status == "error":
        logger.debug("unparseable input sequence %r", seq)
    return result


# ---------------------------------------------------------------------------
# Cursor position reports
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CursorPosResult:
    status: ParseStatus
    row: int = 0
    col: int = 0


def parse_cursor_pos(seq: bytes) -> CursorPosResult:
    """Decode a ``ESC [ row ; col R`` reply under the same contract as :func:`parse`."""
    seq = bytes(seq)
    if not seq:
        return CursorPosResult("incomplete")
    if seq[0] != ESC or (len(seq) > 1 and seq[1] != ord("[")):
        return CursorPosResult("error")

    body = seq[2:]
    finished = body.endswith(b"R")
    if finished:
        body = body[:-1]
    fields = body.split(b";")
    if len(fields) > 2 or any(
        len(f) > _CURSOR_REPLY_MAX_DIGITS or (f and not f.isdigit()) for f in fields
    ):
        return CursorPosResult("error")
    if len(fields) == 2 and not fields[0]:
        return CursorPosResult("error")

    if not finished:
        return CursorPosResult("incomplete")
    if len(fields) != 2 or not fields[1]:
        return CursorPosResult("error")
    return CursorPosResult("success", row=int(fields[0]), col=int(fields[1]))
