"""Reporter (R4): plain log lines for every test and a final summary.

The reporter writes to a *log sink*: any object with a
``log(message, level=None)`` method, where ``level`` is either ``None``
(informational) or ``"error"``.  The message comes first so informational
calls can leave the level out.  ``LoggingSink`` forwards to a standard
library logger; ``MemorySink`` keeps the lines for golden-output checks.
"""

import logging
from typing import Optional, Protocol

from gravelspec.registry import TestRecord

logger = logging.getLogger(__name__)

ERROR = "error"

_LEVELS = {
    None: logging.INFO,
    ERROR: logging.ERROR,
}


class LogSink(Protocol):
    def log(self, message: str, level: Optional[str] = None) -> None: ...


class LoggingSink:
    """Log sink backed by a named ``logging`` logger."""

    def __init__(self, logger_name: str = "gravelspec.tests") -> None:
        self.logger = logging.getLogger(logger_name)

    def log(self, message: str, level: Optional[str] = None) -> None:
        try:
            py_level = _LEVELS[level]
        except KeyError:
            raise ValueError(f"Unsupported log level: {level!r}") from None
        self.logger.log(py_level, message)


class MemorySink:
    """Log sink that keeps ``(level, message)`` pairs in order."""

    def __init__(self) -> None:
        self.entries: list[tuple[Optional[str], str]] = []

    def log(self, message: str, level: Optional[str] = None) -> None:
        if level not in _LEVELS:
            raise ValueError(f"Unsupported log level: {level!r}")
        self.entries.append((level, message))

    @property
    def lines(self) -> list[str]:
        return [message for _, message in self.entries]

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.entries if level == ERROR]

    def clear(self) -> None:
        self.entries.clear()


class Reporter:
    """Formats harness events into sink lines.

    Args:
        sink: Destination for the lines.
        prefix: Leading marker on every line.
        end_label: Text logged for the synthetic terminal record.
    """

    def __init__(
        self,
        sink: LogSink,
        prefix: str = "[TESTS]",
        end_label: str = "-- END --",
    ) -> None:
        self.sink = sink
        self.prefix = prefix
        self.end_label = end_label

    def describe(self, record: TestRecord) -> str:
        """Full suite-path description of *record*."""
        if record.terminal:
            return f"{self.prefix} {self.end_label}"
        return record.description(self.prefix)

    def headline(self, record: TestRecord) -> str:
        """Description followed by the test label."""
        if record.label:
            return f"{self.describe(record)} {record.label}"
        return self.describe(record)

    def test_started(self, record: TestRecord) -> None:
        self.sink.log(self.headline(record))

    def no_tests(self) -> None:
        self.sink.log(f"{self.prefix} No tests")

    def summary(self, failures: list) -> None:
        """Log the all-passed notice, or every failure with its diagnostics.

        *failures* holds ``TestResult`` objects from the execution engine.
        """
        if not failures:
            self.sink.log(f"{self.prefix} all tests passed")
            return

        logger.debug("Reporting %d failed tests", len(failures))
        for result in failures:
            prefix = self.describe(result.record)
            self.sink.log(self.headline(result.record), ERROR)
            for message in result.messages:
                self.sink.log(f"{prefix} {message}", ERROR)
