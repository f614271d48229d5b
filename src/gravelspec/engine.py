"""Execution Engine (R2): runs registered tests in registration order.

Walks the ordered test records, fires suite hooks whenever the chain of
enclosing suites changes between consecutive records, runs each test body in
a failure-isolating scope and classifies the result against the test's
expected-error marker.

A synthetic terminal record with no enclosing suites is appended to every
run, so suites still open after the last test get their ``after_all`` hooks.

Hook order on a suite transition is deepest level first, for both the
closing (``after_all``) and the opening (``before_all``) side.  Per-test
hooks (``before_each`` / ``after_each``) run outermost suite first.

Pure Python. No dependencies.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from gravelspec.assertions import AssertionFailure
from gravelspec.doubles import ErrorExpectation, Stub
from gravelspec.registry import (
    Callback,
    HarnessError,
    SuiteDescriptor,
    TestRecord,
    suite_record,
    terminal_record,
)
from gravelspec.reporter import Reporter

logger = logging.getLogger(__name__)


# ── Data Classes ──


class OutcomeKind(Enum):
    """How a test body finished."""

    SUCCESS = "success"
    ASSERTION = "assertion"
    ERROR = "error"


@dataclass
class Outcome:
    """Result of running one test body in isolation.

    Attributes:
        kind: Whether the body returned, failed an assertion, or raised.
        message: Failure text; empty on success.
    """

    kind: OutcomeKind
    message: str = ""


@dataclass
class TestResult:
    """Classified result of one test.

    Attributes:
        record: The test that ran.
        messages: Diagnostics; empty when the test passed.
        outcome: How the body finished, or None when it was skipped because
            a setup hook failed.
    """

    __test__ = False  # not a pytest class

    record: TestRecord
    messages: list[str] = field(default_factory=list)
    outcome: Optional[Outcome] = None

    @property
    def passed(self) -> bool:
        return not self.messages


@dataclass
class RunResult:
    """Output of a full ``execute()`` run.

    Attributes:
        passes: Tests that passed, in execution order.
        failures: Tests that failed, in execution order.
        duration_ms: Wall-clock time of the run.
    """

    passes: list[TestResult] = field(default_factory=list)
    failures: list[TestResult] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def total(self) -> int:
        return len(self.passes) + len(self.failures)

    @property
    def success(self) -> bool:
        return not self.failures


# ── Outcome Classification ──


def describe_exception(exc: BaseException) -> str:
    """``"<ExceptionType>: <message>"``, or just the type name.

    Falls back to the type name when the exception cannot be rendered.
    """
    try:
        text = str(exc)
    except Exception:
        text = ""
    if not text:
        return type(exc).__name__
    return f"{type(exc).__name__}: {text}"


def run_isolated(body: Callable[[], object]) -> Outcome:
    """Run *body*, turning any raised ``Exception`` into an ``Outcome``."""
    try:
        body()
    except AssertionFailure as exc:
        return Outcome(OutcomeKind.ASSERTION, str(exc))
    except Exception as exc:
        return Outcome(OutcomeKind.ERROR, describe_exception(exc))
    return Outcome(OutcomeKind.SUCCESS)


def classify_outcome(outcome: Outcome, expectation: ErrorExpectation) -> list[str]:
    """Diagnostics for *outcome* given the declared expectation.

    An empty list means the test passed.
    """
    if outcome.kind is OutcomeKind.SUCCESS:
        if not expectation.expected:
            return []
        messages = ["Error expected but none occurred"]
        if expectation.substring is not None:
            messages.append(f"Expected: {expectation.substring}")
        return messages

    if outcome.kind is OutcomeKind.ASSERTION:
        return [outcome.message]

    if not expectation.expected:
        return [
            "Error occurred but none expected",
            f"Occurred: {outcome.message}",
        ]
    if expectation.matches(outcome.message):
        return []
    return [
        "Error occurred was not the one expected",
        f"Expected: {expectation.substring}",
        f"Occurred: {outcome.message}",
    ]


# ── Execution Engine ──


class ExecutionEngine:
    """Runs test records against shared stubs and an expected-error marker.

    The engine owns nothing between runs: the caller passes in the stubs to
    reset before each test and the expectation the test bodies write to.

    Usage::

        engine = ExecutionEngine(reporter, stubs, expectation)
        result = engine.execute(registry.records)
    """

    def __init__(
        self,
        reporter: Reporter,
        stubs: list[Stub],
        expectation: ErrorExpectation,
    ) -> None:
        self.reporter = reporter
        self.stubs = stubs
        self.expectation = expectation
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def execute(self, records: Sequence[TestRecord]) -> RunResult:
        """Run *records* in order and log the summary.

        Raises:
            HarnessError: If called while a run is already in progress.
        """
        if self._running:
            raise HarnessError("ExecutionEngine.execute() is not reentrant")

        self._running = True
        try:
            return self._execute(records)
        finally:
            self._running = False

    def _execute(self, records: Sequence[TestRecord]) -> RunResult:
        logger.info("Starting execution of %d tests", len(records))
        result = RunResult()
        start = time.perf_counter()

        previous: tuple[SuiteDescriptor, ...] = ()
        for record in [*records, terminal_record()]:
            self.reporter.test_started(record)
            current = record.suites

            result.failures += self._close_suites(previous, current)
            if record.terminal:
                break

            opening = self._open_suites(previous, current)
            test_result = self._run_test(record, opening)
            if test_result.passed:
                result.passes.append(test_result)
            else:
                result.failures.append(test_result)
            previous = current

        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        self.reporter.summary(result.failures)
        logger.info(
            "Execution finished: %d passed, %d failed, %.0f ms",
            len(result.passes), len(result.failures), result.duration_ms,
        )
        return result

    def _run_test(
        self,
        record: TestRecord,
        opening: list[str],
    ) -> TestResult:
        """Per-test setup, isolated body, classification, teardown."""
        for stub in self.stubs:
            stub.reset()
        self.expectation.reset()

        setup = list(opening)
        for suite in record.suites:
            setup += self._run_hooks(suite.before_each, "before_each", suite)

        outcome: Optional[Outcome] = None
        if setup:
            # Setup failed; the body does not run
            messages = setup
        else:
            outcome = run_isolated(record.body)
            messages = classify_outcome(outcome, self.expectation)

        for suite in record.suites:
            messages += self._run_hooks(suite.after_each, "after_each", suite)

        return TestResult(record, messages, outcome)

    def _close_suites(
        self,
        previous: Sequence[SuiteDescriptor],
        current: Sequence[SuiteDescriptor],
    ) -> list[TestResult]:
        """Fire ``after_all`` for levels of *previous* that *current* left.

        Returns one suite-level failure per suite whose hooks failed, so the
        next test is not blamed for them.
        """
        failures: list[TestResult] = []
        for level in range(max(len(previous), len(current)) - 1, -1, -1):
            if level >= len(previous):
                continue
            suite = previous[level]
            if level >= len(current) or current[level].suite_id != suite.suite_id:
                messages = self._run_hooks(suite.after_all, "after_all", suite)
                if messages:
                    record = suite_record(previous[: level + 1])
                    failures.append(TestResult(record, messages))
        return failures

    def _open_suites(
        self,
        previous: Sequence[SuiteDescriptor],
        current: Sequence[SuiteDescriptor],
    ) -> list[str]:
        """Fire ``before_all`` for levels of *current* not open in *previous*."""
        messages: list[str] = []
        for level in range(max(len(previous), len(current)) - 1, -1, -1):
            if level >= len(current):
                continue
            suite = current[level]
            if level >= len(previous) or previous[level].suite_id != suite.suite_id:
                messages += self._run_hooks(suite.before_all, "before_all", suite)
        return messages

    def _run_hooks(
        self,
        hooks: Sequence[Callback],
        phase: str,
        suite: SuiteDescriptor,
    ) -> list[str]:
        """Run every hook in order; a failing hook does not stop the rest."""
        messages: list[str] = []
        for hook in hooks:
            try:
                hook()
            except Exception as exc:
                occurred = describe_exception(exc)
                logger.warning(
                    "%s hook of suite '%s' failed: %s", phase, suite.label, occurred,
                )
                messages.append(f"{phase} hook of [{suite.label}] failed")
                messages.append(f"Occurred: {occurred}")
        return messages
