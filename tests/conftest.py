"""Shared fixtures: an in-memory transport for driving edit sessions."""

from __future__ import annotations

from typing import Callable

import pytest

from pi.lineedit.errors import EndOfFile


class FakeIO:
    """Implements the ``RunIO`` protocol over an input byte list.

    Every write is captured in ``output`` for assertions.
    """

    def __init__(self, data: bytes | list[int] = b"") -> None:
        self.input = bytearray(data)
        self.output = bytearray()
        self.writes: list[bytes] = []

    def write(self, data: bytes) -> None:
        self.writes.append(data)
        self.output.extend(data)

    def read_byte(self) -> int:
        if not self.input:
            raise EndOfFile()
        return self.input.pop(0)


@pytest.fixture
def make_io() -> Callable[..., FakeIO]:
    return FakeIO
