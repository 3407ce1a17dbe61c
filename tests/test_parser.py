"""Tests for pi.lineedit.parser -- incremental token classification."""

from __future__ import annotations

import pytest

from pi.lineedit.parser import (
    ControlChar,
    Key,
    Meta,
    NamedKey,
    Text,
    parse,
    parse_cursor_pos,
)


def feed(data: bytes) -> list[str]:
    """Statuses seen while feeding *data* one byte at a time without consuming."""
    return [parse(data[: i + 1]).status for i in range(len(data))]


# ---------------------------------------------------------------------------
# Single bytes
# ---------------------------------------------------------------------------


class TestSingleBytes:
    """Control bytes and printable ASCII are complete on their own."""

    def test_empty_is_incomplete(self) -> None:
        assert parse(b"").status == "incomplete"

    def test_printable_ascii(self) -> None:
        result = parse(b"a")
        assert result.ok
        assert result.token == Text("a")

    def test_space_is_text(self) -> None:
        assert parse(b" ").token == Text(" ")

    def test_carriage_return_is_enter(self) -> None:
        assert parse(b"\r").token == NamedKey(Key.enter)

    def test_del_is_backspace(self) -> None:
        assert parse(b"\x7f").token == NamedKey(Key.backspace)

    def test_tab(self) -> None:
        assert parse(b"\t").token == NamedKey(Key.tab)

    @pytest.mark.parametrize("code", [0x01, 0x03, 0x04, 0x08, 0x0A, 0x1F])
    def test_other_control_bytes(self, code: int) -> None:
        assert parse(bytes([code])).token == ControlChar(code)

    def test_control_char_letter(self) -> None:
        assert ControlChar(0x01).letter == "a"
        assert ControlChar(0x17).letter == "w"

    def test_accepts_bytearray(self) -> None:
        assert parse(bytearray(b"\x1bOA")).token == NamedKey(Key.up)


# ---------------------------------------------------------------------------
# UTF-8
# ---------------------------------------------------------------------------


class TestUtf8:
    """Multi-byte characters become one Text token once complete."""

    @pytest.mark.parametrize("char", ["é", "€", "漢", "😀"])
    def test_complete_character(self, char: str) -> None:
        data = char.encode("utf-8")
        assert feed(data) == ["incomplete"] * (len(data) - 1) + ["success"]
        assert parse(data).token == Text(char)

    def test_stray_continuation_byte(self) -> None:
        assert parse(b"\x80").status == "error"

    def test_invalid_lead_bytes(self) -> None:
        for lead in (0xC0, 0xC1, 0xF5, 0xFF):
            assert parse(bytes([lead])).status == "error"

    def test_bad_continuation(self) -> None:
        assert parse(b"\xe2\x41").status == "error"

    def test_overlong_three_byte_form(self) -> None:
        assert parse(b"\xe0\x80\x80").status == "error"

    def test_surrogate(self) -> None:
        assert parse(b"\xed\xa0\x80").status == "error"


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------


class TestEscapeSequences:
    """CSI and SS3 keys, Meta chords and malformed prefixes."""

    def test_lone_escape_is_incomplete(self) -> None:
        assert parse(b"\x1b").status == "incomplete"

    def test_csi_prefix_is_incomplete(self) -> None:
        assert parse(b"\x1b[").status == "incomplete"

    @pytest.mark.parametrize(
        "data,name",
        [
            (b"\x1b[A", Key.up),
            (b"\x1b[B", Key.down),
            (b"\x1b[C", Key.right),
            (b"\x1b[D", Key.left),
            (b"\x1b[H", Key.home),
            (b"\x1b[F", Key.end),
            (b"\x1b[3~", Key.delete),
            (b"\x1b[1~", Key.home),
            (b"\x1b[4~", Key.end),
            (b"\x1b[1;5C", Key.ctrl_right),
            (b"\x1bOD", Key.left),
        ],
    )
    def test_known_sequences(self, data: bytes, name: str) -> None:
        assert feed(data) == ["incomplete"] * (len(data) - 1) + ["success"]
        assert parse(data).token == NamedKey(name)

    def test_unmapped_csi_is_unknown_key(self) -> None:
        assert parse(b"\x1b[15~").token == NamedKey(Key.unknown)

    def test_csi_with_bad_byte_is_error(self) -> None:
        assert parse(b"\x1b[\x01").status == "error"
        assert parse(b"\x1b[1\x80").status == "error"

    def test_csi_parameters_too_long(self) -> None:
        assert parse(b"\x1b[" + b"1" * 9).status == "error"

    def test_bad_ss3_final(self) -> None:
        assert parse(b"\x1bOz").status == "error"

    def test_meta_letter(self) -> None:
        assert parse(b"\x1bb").token == Meta(Text("b"))

    def test_meta_enter(self) -> None:
        assert parse(b"\x1b\r").token == Meta(NamedKey(Key.enter))

    def test_double_escape(self) -> None:
        assert parse(b"\x1b\x1b").token == NamedKey(Key.escape)

    def test_escape_then_non_ascii_is_error(self) -> None:
        assert parse(b"\x1b\xc3").status == "error"


class TestNoEarlySuccess:
    """A strict prefix of a longer sequence never succeeds."""

    @pytest.mark.parametrize(
        "data", [b"\x1b[1;5C", b"\x1b[3~", b"\x1bOA", "😀".encode("utf-8")]
    )
    def test_prefixes_are_incomplete(self, data: bytes) -> None:
        for i in range(1, len(data)):
            assert parse(data[:i]).status == "incomplete"


# ---------------------------------------------------------------------------
# Cursor position reports
# ---------------------------------------------------------------------------


class TestParseCursorPos:
    """ESC [ row ; col R replies."""

    def test_complete_reply(self) -> None:
        reply = parse_cursor_pos(b"\x1b[12;40R")
        assert reply.status == "success"
        assert (reply.row, reply.col) == (12, 40)

    def test_prefixes_are_incomplete(self) -> None:
        data = b"\x1b[12;40R"
        for i in range(len(data)):
            assert parse_cursor_pos(data[:i]).status == "incomplete"

    def test_not_an_escape(self) -> None:
        assert parse_cursor_pos(b"a").status == "error"

    def test_missing_bracket(self) -> None:
        assert parse_cursor_pos(b"\x1bO").status == "error"

    def test_missing_column(self) -> None:
        assert parse_cursor_pos(b"\x1b[12R").status == "error"
        assert parse_cursor_pos(b"\x1b[12;R").status == "error"

    def test_missing_row(self) -> None:
        assert parse_cursor_pos(b"\x1b[;").status == "error"

    def test_non_digit(self) -> None:
        assert parse_cursor_pos(b"\x1b[1x").status == "error"

    def test_too_many_digits(self) -> None:
        assert parse_cursor_pos(b"\x1b[12345").status == "error"
