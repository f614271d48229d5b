"""Assertion helpers used inside test bodies.

Every helper signals a failed check by raising ``AssertionFailure``.  The
execution engine tells intentional assertion failures apart from unexpected
errors by exception type, so an assertion failure always fails the test even
when the test declared that an error is expected.
"""

from typing import Any, NoReturn, Optional

from gravelspec.equality import deep_equal, format_value

# Shown at the start of every assertion failure message
FAILURE_PREFIX = "[TEST FAILED] "


class AssertionFailure(AssertionError):
    """A check inside a test body did not hold.

    Attributes:
        reason: The diagnostic without the ``FAILURE_PREFIX`` marker.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(FAILURE_PREFIX + reason)


def fail_test(reason: str, *values: Any) -> NoReturn:
    """Fail the current test.

    *reason* may hold ``%s`` placeholders, filled with the rendered *values*.
    """
    if values:
        reason = reason % tuple(format_value(v) for v in values)
    raise AssertionFailure(reason)


def assert_equal(actual: Any, expected: Any, message: Optional[str] = None) -> None:
    """Fail unless *actual* deep-equals *expected*."""
    if not deep_equal(actual, expected):
        if not message:
            message = "Values should be equal."
        fail_test(
            f"{message} Expected {format_value(expected)}, "
            f"got {format_value(actual)}."
        )


def assert_not_equal(actual: Any, unexpected: Any, message: Optional[str] = None) -> None:
    """Fail if *actual* deep-equals *unexpected*."""
    if deep_equal(actual, unexpected):
        if not message:
            message = "Values should not be equal."
        fail_test(f"{message} Did not expect {format_value(unexpected)}.")
