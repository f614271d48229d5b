"""gravelspec: BDD-style test harness for sandboxed mod scripts.

The module-level functions below operate on a process-wide default
``Harness``; create your own ``Harness`` for an independent session.
"""

from gravelspec.assertions import (
    FAILURE_PREFIX,
    AssertionFailure,
    assert_equal,
    assert_not_equal,
    fail_test,
)
from gravelspec.doubles import ErrorExpectation, Stub
from gravelspec.engine import (
    ExecutionEngine,
    Outcome,
    OutcomeKind,
    RunResult,
    TestResult,
    classify_outcome,
)
from gravelspec.equality import deep_equal, format_value
from gravelspec.harness import Harness, HarnessConfig
from gravelspec.registry import (
    HarnessError,
    Registry,
    RegistrationError,
    SuiteDescriptor,
    TestRecord,
)
from gravelspec.reporter import LoggingSink, MemorySink, Reporter

_default = Harness()


def default_harness() -> Harness:
    """The harness behind the module-level functions."""
    return _default


describe = _default.describe
it = _default.it
before_each = _default.before_each
after_each = _default.after_each
before_all = _default.before_all
after_all = _default.after_all
stub = _default.stub
expect_error = _default.expect_error
execute = _default.execute

__all__ = [
    # Default session
    "default_harness",
    "describe",
    "it",
    "before_each",
    "after_each",
    "before_all",
    "after_all",
    "stub",
    "expect_error",
    "execute",
    # Harness session
    "Harness",
    "HarnessConfig",
    "HarnessError",
    "RegistrationError",
    # Registration API
    "Registry",
    "SuiteDescriptor",
    "TestRecord",
    # Execution Engine
    "ExecutionEngine",
    "RunResult",
    "TestResult",
    "Outcome",
    "OutcomeKind",
    "classify_outcome",
    # Stubs, expectations, assertions
    "Stub",
    "ErrorExpectation",
    "AssertionFailure",
    "FAILURE_PREFIX",
    "assert_equal",
    "assert_not_equal",
    "fail_test",
    "deep_equal",
    "format_value",
    # Reporter
    "Reporter",
    "LoggingSink",
    "MemorySink",
]
