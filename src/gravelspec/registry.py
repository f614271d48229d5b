"""Registration API (R1): collects suites and test cases without running them.

``describe`` opens a suite, runs its body immediately so nested ``describe``,
``it`` and hook calls can register, then closes it.  ``it`` records a test
together with a snapshot of every open suite, so hooks registered later in
the same suite body do not reach tests that were registered before them.

Registration errors are programming errors and propagate to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

Callback = Callable[[], None]

# Hook kinds accepted by Registry.add_hook()
HOOK_KINDS = ("before_all", "after_all", "before_each", "after_each")


# ── Exceptions ──


class HarnessError(Exception):
    """Base exception for harness misuse."""


class RegistrationError(HarnessError):
    """A suite, test or hook was registered where it is not allowed."""


# ── Data Classes ──


@dataclass
class SuiteDescriptor:
    """One ``describe`` block and the hooks registered inside it.

    Attributes:
        suite_id: Unique id, strictly increasing in registration order.
        label: Human-readable suite name.
        before_all: Run once before the first test of the suite.
        after_all: Run once after the last test of the suite.
        before_each: Run before every test nested in the suite.
        after_each: Run after every test nested in the suite.
    """

    suite_id: int
    label: str
    before_all: list[Callback] = field(default_factory=list)
    after_all: list[Callback] = field(default_factory=list)
    before_each: list[Callback] = field(default_factory=list)
    after_each: list[Callback] = field(default_factory=list)

    def snapshot(self) -> "SuiteDescriptor":
        """Copy with independent hook lists."""
        return SuiteDescriptor(
            suite_id=self.suite_id,
            label=self.label,
            before_all=list(self.before_all),
            after_all=list(self.after_all),
            before_each=list(self.before_each),
            after_each=list(self.after_each),
        )


@dataclass(frozen=True)
class TestRecord:
    """A registered test case.

    Attributes:
        label: The ``it`` message.
        body: Zero-argument callable holding the test.
        suite_labels: Labels of enclosing suites, outermost first.
        suites: Snapshots of enclosing suites, outermost first.
        terminal: True only for the synthetic record that closes open suites.
    """

    __test__ = False  # not a pytest class

    label: str
    body: Callback
    suite_labels: tuple[str, ...] = ()
    suites: tuple[SuiteDescriptor, ...] = ()
    terminal: bool = False

    @property
    def chain(self) -> list[int]:
        """Suite ids of the enclosing suites, outermost first."""
        return [suite.suite_id for suite in self.suites]

    def description(self, prefix: str = "[TESTS]") -> str:
        """Reporter prefix: ``[TESTS] [outer] [inner]``."""
        return prefix + "".join(f" [{label}]" for label in self.suite_labels)


def _noop() -> None:
    pass


def terminal_record() -> TestRecord:
    """Synthetic last record with no suites, forcing every suite to close."""
    return TestRecord(label="", body=_noop, terminal=True)


def suite_record(suites: Sequence[SuiteDescriptor]) -> TestRecord:
    """Unlabelled record standing for the innermost of *suites* as a whole."""
    suites = tuple(suites)
    return TestRecord(
        label="",
        body=_noop,
        suite_labels=tuple(suite.label for suite in suites),
        suites=suites,
    )


# ── Registry ──


class Registry:
    """Ordered test registry plus the suite-nesting stack used while registering.

    Usage::

        registry = Registry()
        registry.describe("sieve", lambda: registry.it("sorts", body))
        records = registry.records
    """

    def __init__(self) -> None:
        self._records: list[TestRecord] = []
        self._stack: list[SuiteDescriptor] = []
        self._last_id = 0
        self.locked = False

    @property
    def records(self) -> list[TestRecord]:
        return list(self._records)

    @property
    def depth(self) -> int:
        """Number of currently open suites."""
        return len(self._stack)

    def __len__(self) -> int:
        return len(self._records)

    def describe(self, label: str, body: Callback) -> SuiteDescriptor:
        """Open a suite, run *body* to register its contents, close it."""
        self._check_unlocked("describe")
        self._last_id += 1
        suite = SuiteDescriptor(suite_id=self._last_id, label=label)
        self._stack.append(suite)
        try:
            body()
        finally:
            self._stack.pop()
        return suite

    def it(self, label: str, body: Callback) -> TestRecord:
        """Register a test under the currently open suites."""
        self._check_unlocked("it")
        record = TestRecord(
            label=label,
            body=body,
            suite_labels=tuple(suite.label for suite in self._stack),
            suites=tuple(suite.snapshot() for suite in self._stack),
        )
        self._records.append(record)
        logger.debug("Registered test %r at depth %d", label, len(self._stack))
        return record

    def add_hook(self, kind: str, callback: Callback) -> None:
        """Append *callback* to the *kind* hook list of the innermost suite."""
        if kind not in HOOK_KINDS:
            raise ValueError(f"Unknown hook kind: {kind!r}")
        self._check_unlocked(kind)
        if not self._stack:
            raise RegistrationError(f"{kind}() must be called inside describe()")
        getattr(self._stack[-1], kind).append(callback)

    def clear(self) -> None:
        """Forget every record and open suite. Suite ids keep increasing."""
        self._records.clear()
        self._stack.clear()

    def _check_unlocked(self, operation: str) -> None:
        if self.locked:
            raise RegistrationError(
                f"{operation}() cannot be called while tests are executing"
            )
