"""Tests for jprov.output.console module."""

from __future__ import annotations

import pytest

from jprov.locators import Searcher, TraceConsole
from jprov.output.console import (
    ConsoleProtocol,
    MockConsole,
    NullConsole,
    OutputRecord,
    RichConsole,
    Style,
)


def _exercise(c: ConsoleProtocol) -> None:
    c.print("plain")
    c.success("ok")
    c.error("err")
    c.warning("warn")
    c.info("info")
    c.debug("dbg")
    c.header("hdr")
    c.newline()


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DEBUG) == "debug"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    def test_prefixes_and_styles(self) -> None:
        console = MockConsole()
        _exercise(console)

        assert console.outputs == [
            OutputRecord("plain", Style.DEFAULT),
            OutputRecord("OK ok", Style.SUCCESS),
            OutputRecord("error: err", Style.ERROR),
            OutputRecord("warning: warn", Style.WARNING),
            OutputRecord("info: info", Style.INFO),
            OutputRecord("debug: dbg", Style.DEBUG),
            OutputRecord("hdr", Style.HEADER),
            OutputRecord("", Style.DEFAULT),
        ]

    def test_helpers(self) -> None:
        console = MockConsole()
        assert console.has_error() is False
        assert console.has_warning() is False

        console.print("hello world")
        console.warning("hello there")
        console.error("goodbye")

        assert console.has_error() is True
        assert console.has_warning() is True
        assert len(console.find("hello")) == 2
        assert console.text == "hello world\nwarning: hello there\nerror: goodbye"


class TestOtherConsoles:
    def test_null_console_accepts_everything(self) -> None:
        _exercise(NullConsole())

    def test_trace_console_feeds_searcher(self) -> None:
        searcher = Searcher(environ={})
        _exercise(TraceConsole(searcher))
        assert searcher.lines == ["plain", "ok", "err", "warn", "info", "dbg", "hdr"]

    def test_rich_console_verbose_flag(self) -> None:
        assert RichConsole().verbose is False
        assert RichConsole(stderr=True, verbose=True).verbose is True

    def test_rich_console_prints_brackets_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("zulu[21]")
        console.error("bad [red]input")
        console.debug("hidden")

        out = capsys.readouterr().out
        assert "zulu[21]" in out
        assert "bad [red]input" in out
        assert "hidden" not in out
