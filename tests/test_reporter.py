"""Tests for the Reporter and log sinks."""

import logging
from unittest.mock import MagicMock, call

import pytest

from gravelspec.engine import TestResult
from gravelspec.registry import Registry, terminal_record
from gravelspec.reporter import ERROR, LoggingSink, MemorySink, Reporter


def _noop():
    pass


@pytest.fixture
def nested_record():
    registry = Registry()
    registry.describe(
        "sieve", lambda: registry.describe("input", lambda: registry.it("accepts gravel", _noop)),
    )
    return registry.records[0]


# ── Sinks ──


class TestLoggingSink:
    def test_info_and_error_levels(self, caplog):
        sink = LoggingSink("gravelspec.test_sink")
        with caplog.at_level(logging.INFO, logger="gravelspec.test_sink"):
            sink.log("hello")
            sink.log("broken", ERROR)
        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
            (logging.INFO, "hello"),
            (logging.ERROR, "broken"),
        ]

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            LoggingSink().log("x", "warning")


class TestMemorySink:
    def test_keeps_entries(self):
        sink = MemorySink()
        sink.log("a")
        sink.log("b", ERROR)
        assert sink.entries == [(None, "a"), (ERROR, "b")]
        assert sink.lines == ["a", "b"]
        assert sink.errors == ["b"]
        sink.clear()
        assert sink.entries == []

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            MemorySink().log("x", "debug")


# ── Reporter ──


class TestReporter:
    def test_test_started_line(self, nested_record):
        sink = MagicMock()
        Reporter(sink).test_started(nested_record)
        sink.log.assert_called_once_with("[TESTS] [sieve] [input] accepts gravel")

    def test_terminal_line(self):
        sink = MagicMock()
        Reporter(sink).test_started(terminal_record())
        sink.log.assert_called_once_with("[TESTS] -- END --")

    def test_custom_prefix(self, nested_record):
        sink = MagicMock()
        reporter = Reporter(sink, prefix="[SIEVE]", end_label="done")
        reporter.test_started(nested_record)
        reporter.test_started(terminal_record())
        assert sink.log.call_args_list == [
            call("[SIEVE] [sieve] [input] accepts gravel"),
            call("[SIEVE] done"),
        ]

    def test_no_tests(self):
        sink = MagicMock()
        Reporter(sink).no_tests()
        sink.log.assert_called_once_with("[TESTS] No tests")

    def test_summary_all_passed(self):
        sink = MagicMock()
        Reporter(sink).summary([])
        sink.log.assert_called_once_with("[TESTS] all tests passed")

    def test_summary_failures(self, nested_record):
        sink = MemorySink()
        failure = TestResult(nested_record, ["first problem", "second problem"])
        Reporter(sink).summary([failure])
        assert sink.entries == [
            (ERROR, "[TESTS] [sieve] [input] accepts gravel"),
            (ERROR, "[TESTS] [sieve] [input] first problem"),
            (ERROR, "[TESTS] [sieve] [input] second problem"),
        ]

    def test_summary_terminal_failure(self):
        sink = MemorySink()
        failure = TestResult(terminal_record(), ["after_all hook of [A] failed"])
        Reporter(sink).summary([failure])
        assert sink.errors == [
            "[TESTS] -- END --",
            "[TESTS] -- END -- after_all hook of [A] failed",
        ]
