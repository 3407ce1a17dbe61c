"""Keybindings: translate tokens into abstract edit instructions.

:func:`interpret_token` is a pure function of the token and the current
mode state. It never looks at the buffer and never changes anything, so
every binding can be checked without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pi.lineedit.parser import ControlChar, Key, Meta, NamedKey, Text, Token

EditMode = Literal["emacs", "vi"]

CharMoveType = Literal["beforeRight", "beforeLeft", "right", "left"]

ViModeKind = Literal["insert", "normal", "replace", "moveChar", "delete"]

InstrKind = Literal[
    # Cursor movement
    "moveCursorLeft",
    "moveCursorRight",
    "moveCursorStart",
    "moveCursorEnd",
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
    # Deletion
    "deleteCharLeftOfCursor",
    "deleteCharRightOfCursor",
    "deleteCharRightOfCursorOrEOF",
    "deleteWordLeft",
    "deleteWordRight",
    "deleteToStart",
    "deleteToEnd",
    "changeToEnd",
    # Text input
    "insertAtCursor",
    "replaceAtCursor",
    "substitute",
    "transposeChars",
    "yank",
    "undo",
    # History
    "historyPrev",
    "historyNext",
    # Vi mode transitions
    "insertMode",
    "insertStart",
    "appendMode",
    "appendEnd",
    "normalMode",
    "replaceMode",
    "moveCharMode",
    "deleteMode",
    "digit",
    # Session
    "clear",
    "done",
    "cancel",
    "noop",
]


@dataclass(frozen=True)
class ViMode:
    kind: ViModeKind
    char_move: CharMoveType | None = None

    @staticmethod
    def move_char(move: CharMoveType) -> ViMode:
        return ViMode("moveChar", move)


VI_INSERT = ViMode("insert")
VI_NORMAL = ViMode("normal")
VI_REPLACE = ViMode("replace")
VI_DELETE = ViMode("delete")


@dataclass(frozen=True)
class Instr:
    """One abstract edit command.

    ``text`` carries the character for insert/replace/char-search
    instructions, ``char_move`` the pending search type for
    ``moveCharMode`` and ``value`` the digit for ``digit``.
    """

    kind: InstrKind
    text: str = ""
    char_move: CharMoveType | None = None
    value: int = 0


NOOP = Instr("noop")

_CHAR_MOVE_INSTRS: dict[CharMoveType, InstrKind] = {
    "right": "moveCharRight",
    "left": "moveCharLeft",
    "beforeRight": "moveBeforeCharRight",
    "beforeLeft": "moveBeforeCharLeft",
}


def _ctrl(letter: str) -> ControlChar:
    return ControlChar(ord(letter) & 0x1F)


# ---------------------------------------------------------------------------
# Binding tables
# ---------------------------------------------------------------------------

EMACS_BINDINGS: dict[Token, InstrKind] = {
    NamedKey(Key.enter): "done",
    _ctrl("j"): "done",
    NamedKey(Key.backspace): "deleteCharLeftOfCursor",
    _ctrl("h"): "deleteCharLeftOfCursor",
    _ctrl("d"): "deleteCharRightOfCursorOrEOF",
    NamedKey(Key.delete): "deleteCharRightOfCursor",
    NamedKey(Key.up): "historyPrev",
    _ctrl("p"): "historyPrev",
    NamedKey(Key.down): "historyNext",
    _ctrl("n"): "historyNext",
    NamedKey(Key.right): "moveCursorRight",
    _ctrl("f"): "moveCursorRight",
    NamedKey(Key.left): "moveCursorLeft",
    _ctrl("b"): "moveCursorLeft",
    NamedKey(Key.home): "moveCursorStart",
    _ctrl("a"): "moveCursorStart",
    NamedKey(Key.end): "moveCursorEnd",
    _ctrl("e"): "moveCursorEnd",
    NamedKey(Key.ctrl_left): "moveWordLeft",
    NamedKey(Key.alt_left): "moveWordLeft",
    Meta(Text("b")): "moveWordLeft",
    NamedKey(Key.ctrl_right): "moveWordRight",
    NamedKey(Key.alt_right): "moveWordRight",
    Meta(Text("f")): "moveWordRight",
    _ctrl("w"): "deleteWordLeft",
    Meta(NamedKey(Key.backspace)): "deleteWordLeft",
    Meta(Text("d")): "deleteWordRight",
    _ctrl("u"): "deleteToStart",
    _ctrl("k"): "deleteToEnd",
    _ctrl("t"): "transposeChars",
    _ctrl("y"): "yank",
    ControlChar(0x1F): "undo",
    _ctrl("c"): "cancel",
    _ctrl("l"): "clear",
}

# Keys that behave the same in Vi insert and normal mode.
VI_SHARED_BINDINGS: dict[Token, InstrKind] = {
    NamedKey(Key.enter): "done",
    _ctrl("j"): "done",
    NamedKey(Key.escape): "normalMode",
    NamedKey(Key.backspace): "deleteCharLeftOfCursor",
    _ctrl("h"): "deleteCharLeftOfCursor",
    _ctrl("d"): "deleteCharRightOfCursorOrEOF",
    NamedKey(Key.delete): "deleteCharRightOfCursor",
    NamedKey(Key.up): "historyPrev",
    NamedKey(Key.down): "historyNext",
    NamedKey(Key.right): "moveCursorRight",
    NamedKey(Key.left): "moveCursorLeft",
    NamedKey(Key.home): "moveCursorStart",
    NamedKey(Key.end): "moveCursorEnd",
    _ctrl("c"): "cancel",
    _ctrl("l"): "clear",
}

VI_COMMANDS: dict[str, InstrKind] = {
    "h": "moveCursorLeft",
    "l": "moveCursorRight",
    "j": "historyNext",
    "k": "historyPrev",
    "$": "moveCursorEnd",
    "w": "moveWordRight",
    "W": "moveWsWordRight",
    "b": "moveWordLeft",
    "B": "moveWsWordLeft",
    "e": "moveEndOfWordRight",
    "E": "moveEndOfWsWordRight",
    "x": "deleteCharRightOfCursor",
    "X": "deleteCharLeftOfCursor",
    "s": "substitute",
    "r": "replaceMode",
    "d": "deleteMode",
    "D": "deleteToEnd",
    "C": "changeToEnd",
    "u": "undo",
    "a": "appendMode",
    "A": "appendEnd",
    "i": "insertMode",
    "I": "insertStart",
}

VI_CHAR_MOVES: dict[str, CharMoveType] = {
    "f": "right",
    "F": "left",
    "t": "beforeRight",
    "T": "beforeLeft",
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _interpret_emacs(token: Token) -> Instr:
    if isinstance(token, Text):
        return Instr("insertAtCursor", text=token.text)
    kind = EMACS_BINDINGS.get(token)
    return Instr(kind) if kind else NOOP


def _interpret_vi_shared(token: Token) -> Instr:
    kind = VI_SHARED_BINDINGS.get(token)
    return Instr(kind) if kind else NOOP


def _interpret_vi_normal(token: Token) -> Instr:
    if not isinstance(token, Text):
        return _interpret_vi_shared(token)
    char = token.text
    if char.isdigit() and char.isascii():
        return Instr("digit", value=int(char))
    if char in VI_CHAR_MOVES:
        return Instr("moveCharMode", char_move=VI_CHAR_MOVES[char])
    kind = VI_COMMANDS.get(char)
    return Instr(kind) if kind else NOOP


def _interpret_vi(token: Token, vi_mode: ViMode) -> Instr:
    if vi_mode.kind == "insert":
        if isinstance(token, Text):
            return Instr("insertAtCursor", text=token.text)
        return _interpret_vi_shared(token)
    if vi_mode.kind == "normal":
        return _interpret_vi_normal(token)
    if vi_mode.kind == "replace":
        if isinstance(token, Text):
            return Instr("replaceAtCursor", text=token.text)
        return Instr("normalMode")
    if vi_mode.kind == "moveChar":
        if isinstance(token, Text) and vi_mode.char_move is not None:
            return Instr(_CHAR_MOVE_INSTRS[vi_mode.char_move], text=token.text)
        return Instr("normalMode")
    # Delete operator: completion is not implemented, any key aborts it.
    return Instr("normalMode")


def interpret_token(token: Token, edit_mode: EditMode, vi_mode: ViMode = VI_INSERT) -> Instr:
    """Map *token* to an :class:`Instr` under the given mode state."""
    if edit_mode == "vi":
        return _interpret_vi(token, vi_mode)
    return _interpret_emacs(token)
