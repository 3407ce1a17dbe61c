"""End-to-end tests for pi.lineedit.run -- the blocking driver."""

from __future__ import annotations

import pytest

from pi.lineedit.edit import EditCtx
from pi.lineedit.errors import Cancelled, EndOfFile, InvalidUTF8, ParseError
from pi.lineedit.history import History
from pi.lineedit.run import protect_newline, query_cursor_pos, run, run_edit


def make_ctx(mode: str = "emacs", history: History | None = None) -> EditCtx:
    return EditCtx("foo> ", history if history is not None else History(), "ascii", mode)  # type: ignore[arg-type]


class TestRunEdit:
    """Whole sessions driven byte by byte from a FakeIO."""

    def test_eof_on_empty_input(self, make_io) -> None:
        io = make_io(b"")
        with pytest.raises(EndOfFile):
            run_edit(make_ctx(), io)

    def test_empty_line_after_return(self, make_io) -> None:
        assert run_edit(make_ctx(), make_io([13])) == ""

    def test_ascii_line_after_return(self, make_io) -> None:
        assert run_edit(make_ctx(), make_io([65, 66, 67, 13])) == "ABC"

    def test_no_integer_overflow_in_vi_counts(self, make_io) -> None:
        io = make_io([27] + [ord("9")] * 50 + [13])
        assert run_edit(make_ctx("vi"), io) == ""

    def test_eof_mid_line(self, make_io) -> None:
        with pytest.raises(EndOfFile):
            run_edit(make_ctx(), make_io(b"abc"))

    def test_cancel(self, make_io) -> None:
        with pytest.raises(Cancelled):
            run_edit(make_ctx(), make_io(b"abc\x03"))

    def test_invalid_utf8_aborts_session(self, make_io) -> None:
        io = make_io(b"a\xc3(bc\r")
        with pytest.raises(InvalidUTF8):
            run_edit(make_ctx(), io)
        # nothing after the bad sequence was consumed
        assert bytes(io.input) == b"bc\r"

    def test_renders_before_every_read(self, make_io) -> None:
        io = make_io(b"ab\r")
        run_edit(make_ctx(), io)
        assert len(io.writes) == 3
        assert io.writes[0] == b"\rfoo> \x1b[0K\r\x1b[5C"
        assert io.writes[-1] == b"\rfoo> ab\x1b[0K\r\x1b[7C"

    def test_history_recall(self, make_io) -> None:
        h = History(["ls -l"])
        assert run_edit(make_ctx(history=h), make_io(b"\x10\r")) == "ls -l"

    def test_eof_error_is_also_eoferror(self, make_io) -> None:
        with pytest.raises(EOFError):
            run_edit(make_ctx(), make_io(b""))


class TestCursorQuery:
    """ESC [ 6 n and the newline protection built on it."""

    def test_query_writes_request_and_parses_reply(self, make_io) -> None:
        io = make_io(b"\x1b[3;17R")
        assert query_cursor_pos(io) == (3, 17)
        assert io.writes == [b"\x1b[6n"]

    def test_query_consumes_only_the_reply(self, make_io) -> None:
        io = make_io(b"\x1b[1;1Rabc")
        query_cursor_pos(io)
        assert bytes(io.input) == b"abc"

    def test_malformed_reply(self, make_io) -> None:
        with pytest.raises(ParseError):
            query_cursor_pos(make_io(b"\x1b[1x"))

    def test_closed_input_during_query(self, make_io) -> None:
        with pytest.raises(EndOfFile):
            query_cursor_pos(make_io(b"\x1b[1;"))

    def test_protect_newline_at_column_one(self, make_io) -> None:
        io = make_io(b"\x1b[5;1R")
        protect_newline(io)
        assert io.writes == [b"\x1b[6n"]

    def test_protect_newline_mid_line(self, make_io) -> None:
        io = make_io(b"\x1b[5;9R")
        protect_newline(io)
        assert io.writes[-1] == b"\x1b[7m%\x1b[0m\r\n"

    def test_run_queries_then_edits(self, make_io) -> None:
        io = make_io(b"\x1b[2;4Rok\r")
        assert run(make_ctx(), io) == "ok"
        assert io.writes[0] == b"\x1b[6n"
        assert io.writes[1] == b"\x1b[7m%\x1b[0m\r\n"

    def test_run_without_protection(self, make_io) -> None:
        io = make_io(b"ok\r")
        assert run(make_ctx(), io, newline_protection=False) == "ok"
        assert b"\x1b[6n" not in bytes(io.output)
