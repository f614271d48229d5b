"""Harness session (R3): one independent registry + runner.

A ``Harness`` owns everything a run touches: the test registry, the stubs it
handed out, the expected-error marker and the reporter.  Separate instances
never share state, and every instance is reset after ``execute()`` so the
next run starts clean.

Usage::

    harness = Harness()

    def sieve_suite():
        log = harness.stub("gravelsieve.log")
        harness.before_each(setup_world)

        def logs_a_jam():
            jam(log.call)
            log.called_with("error", "jammed")

        harness.it("logs a jam", logs_a_jam)

    harness.describe("sieve", sieve_suite)
    result = harness.execute()
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from gravelspec.doubles import ErrorExpectation, Stub
from gravelspec.engine import ExecutionEngine, RunResult
from gravelspec.registry import (
    Callback,
    HarnessError,
    Registry,
    SuiteDescriptor,
    TestRecord,
)
from gravelspec.reporter import LoggingSink, LogSink, Reporter

logger = logging.getLogger(__name__)


@dataclass
class HarnessConfig:
    """Configuration for a harness session.

    Attributes:
        log_prefix: Leading marker on every reporter line.
        end_label: Text logged for the synthetic record that closes suites.
        logger_name: Logger used by the default ``LoggingSink``.
    """

    log_prefix: str = "[TESTS]"
    end_label: str = "-- END --"
    logger_name: str = "gravelspec.tests"


class Harness:
    """Registration API, stubs, expectations and execution for one session.

    Args:
        config: Session configuration; defaults to ``HarnessConfig()``.
        sink: Log sink for reporter lines; defaults to a ``LoggingSink``
            writing to ``config.logger_name``.
    """

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        sink: Optional[LogSink] = None,
    ) -> None:
        self.config = config or HarnessConfig()
        self.sink = sink if sink is not None else LoggingSink(self.config.logger_name)
        self.reporter = Reporter(
            self.sink,
            prefix=self.config.log_prefix,
            end_label=self.config.end_label,
        )
        self.registry = Registry()
        self.expectation = ErrorExpectation()
        self._stubs: list[Stub] = []
        self._engine = ExecutionEngine(self.reporter, self._stubs, self.expectation)

    @property
    def stubs(self) -> list[Stub]:
        return list(self._stubs)

    # ── Registration ──

    def describe(self, label: str, body: Callback) -> SuiteDescriptor:
        """Group tests under *label*; *body* registers them immediately."""
        return self.registry.describe(label, body)

    def it(self, label: str, body: Callback) -> TestRecord:
        """Register a single test case. *body* runs during ``execute()``."""
        return self.registry.it(label, body)

    def before_each(self, callback: Callback) -> None:
        self.registry.add_hook("before_each", callback)

    def after_each(self, callback: Callback) -> None:
        self.registry.add_hook("after_each", callback)

    def before_all(self, callback: Callback) -> None:
        self.registry.add_hook("before_all", callback)

    def after_all(self, callback: Callback) -> None:
        self.registry.add_hook("after_all", callback)

    # ── Doubles ──

    def stub(self, name: str = "stub", returns: Any = None) -> Stub:
        """Create a call-recording stub, reset before every test of the run."""
        stub = Stub(name, returns=returns)
        self._stubs.append(stub)
        return stub

    def expect_error(self, substring: Optional[str] = None) -> None:
        """Declare that the running test must raise.

        With *substring*, the raised error's text must contain it.
        """
        self.expectation.expect(substring)

    # ── Execution ──

    def execute(self) -> RunResult:
        """Run every registered test, report, then reset the session.

        With nothing registered, logs a no-tests notice and returns an empty
        result without touching any other state.

        Raises:
            HarnessError: If called from inside a running test or from
                inside a describe() body.
        """
        if self._engine.running:
            raise HarnessError("execute() cannot be called while tests are executing")
        if self.registry.depth:
            raise HarnessError("execute() cannot be called inside describe()")

        if not len(self.registry):
            self.reporter.no_tests()
            return RunResult()

        records = self.registry.records
        self.registry.locked = True
        try:
            return self._engine.execute(records)
        finally:
            self.registry.locked = False
            self.reset()

    def reset(self) -> None:
        """Forget registered tests, open suites, stubs and expectations."""
        self.registry.clear()
        self._stubs.clear()
        self.expectation.reset()
        logger.debug("Harness state reset")

