"""pi-lineedit: embeddable line editing with Emacs and Vi keybindings."""

# Line editor facade
from pi.lineedit.lineedit import LineEditor

# Configuration
from pi.lineedit.config import LineEditConfig, load_config

# Edit session and drivers
from pi.lineedit.edit import Cont, EditCtx, EditResult, Halt
from pi.lineedit.run import RunIO, protect_newline, query_cursor_pos, run, run_edit

# Errors
from pi.lineedit.errors import (
    Cancelled,
    EndOfFile,
    InvalidUTF8,
    LineEditError,
    ParseError,
    TerminalIOError,
    UnsupportedTerm,
)

# Core building blocks
from pi.lineedit.buffer import Buffer
from pi.lineedit.history import History, HistoryCursor
from pi.lineedit.instr import EditMode, Instr, ViMode, interpret_token
from pi.lineedit.parser import (
    ControlChar,
    Key,
    Meta,
    NamedKey,
    ParseResult,
    Text,
    Token,
    parse,
    parse_cursor_pos,
)

# Terminal
from pi.lineedit.terminal import FdTerminal

__all__ = [
    # Facade
    "LineEditor",
    # Configuration
    "LineEditConfig",
    "load_config",
    # Session
    "Cont",
    "EditCtx",
    "EditResult",
    "Halt",
    "RunIO",
    "protect_newline",
    "query_cursor_pos",
    "run",
    "run_edit",
    # Errors
    "Cancelled",
    "EndOfFile",
    "InvalidUTF8",
    "LineEditError",
    "ParseError",
    "TerminalIOError",
    "UnsupportedTerm",
    # Core
    "Buffer",
    "History",
    "HistoryCursor",
    "EditMode",
    "Instr",
    "ViMode",
    "interpret_token",
    "ControlChar",
    "Key",
    "Meta",
    "NamedKey",
    "ParseResult",
    "Text",
    "Token",
    "parse",
    "parse_cursor_pos",
    # Terminal
    "FdTerminal",
]
