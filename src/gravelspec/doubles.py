"""Test doubles: call-recording stubs and the expected-error marker.

Both are reset by the execution engine before every test, so nothing a test
records or declares leaks into the next one.
"""

from typing import Any, Optional

from gravelspec.assertions import fail_test
from gravelspec.equality import deep_equal, format_args


class Stub:
    """Call-recording stand-in for a real dependency.

    Usage::

        log = harness.stub("gravelsieve.log")
        code_under_test(log=log.call)
        log.called_with("error", "sieve jammed")
        log.called_times(1)
    """

    def __init__(self, name: str = "stub", returns: Any = None) -> None:
        self.name = name
        self.returns = returns
        self._calls: list[tuple] = []

    @property
    def calls(self) -> list[tuple]:
        """Copy of the argument tuples recorded so far, oldest first."""
        return list(self._calls)

    def call(self, *args: Any) -> Any:
        self._calls.append(args)
        return self.returns

    __call__ = call

    def called_with(self, *args: Any) -> bool:
        """Return True if some recorded call deep-equals *args*.

        Fails the current test otherwise.
        """
        for recorded in self._calls:
            if deep_equal(args, recorded):
                return True
        fail_test(f"{self.name} was not called with args: {format_args(args)}")

    def called_times(self, n: int) -> None:
        """Fail the current test unless exactly *n* calls were recorded."""
        if len(self._calls) != n:
            fail_test(f"{self.name} was called {len(self._calls)} times, not {n} times")

    def reset(self) -> None:
        self._calls.clear()

    def __repr__(self) -> str:
        return f"Stub({self.name!r}, calls={len(self._calls)})"


class ErrorExpectation:
    """Per-test marker that the test body is expected to raise.

    Three states: nothing expected, any error expected, or an error whose
    text contains ``substring``.
    """

    def __init__(self) -> None:
        self.expected = False
        self.substring: Optional[str] = None

    def expect(self, substring: Optional[str] = None) -> None:
        """Declare the expected error.

        Raises:
            TypeError: If *substring* is neither None nor a string.
        """
        if substring is not None and not isinstance(substring, str):
            raise TypeError(
                f"expected error substring must be a string, not {type(substring).__name__}"
            )
        self.expected = True
        self.substring = substring or None

    def reset(self) -> None:
        self.expected = False
        self.substring = None

    def matches(self, error_text: str) -> bool:
        """True if an error with *error_text* satisfies the expectation."""
        if not self.expected:
            return False
        if self.substring is None:
            return True
        return self.substring in error_text
