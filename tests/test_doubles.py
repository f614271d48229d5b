"""Tests for stubs and the expected-error marker."""

import pytest

from gravelspec.assertions import AssertionFailure
from gravelspec.doubles import ErrorExpectation, Stub


# ── Stub ──


class TestStub:
    def test_records_calls_in_order(self):
        stub = Stub()
        stub.call(1, "a")
        stub(2)
        assert stub.calls == [(1, "a"), (2,)]

    def test_calls_is_a_copy(self):
        stub = Stub()
        stub.call(1)
        stub.calls.append((9,))
        assert stub.calls == [(1,)]

    def test_returns_configured_value(self):
        stub = Stub(returns=42)
        assert stub.call() == 42
        assert Stub().call() is None

    def test_called_with_matches(self):
        stub = Stub()
        stub.call(1, "a")
        assert stub.called_with(1, "a") is True

    def test_called_with_deep_equal_args(self):
        stub = Stub()
        stub.call({"pos": [1, 2, 3]})
        assert stub.called_with({"pos": [1, 2, 3]})

    def test_called_with_fails_when_no_match(self):
        stub = Stub("gravelsieve.log")
        stub.call(1, "a")
        with pytest.raises(AssertionFailure) as info:
            stub.called_with(1, "b")
        assert info.value.reason == "gravelsieve.log was not called with args: (1, 'b')"

    def test_called_with_fails_when_never_called(self):
        with pytest.raises(AssertionFailure):
            Stub().called_with()

    def test_called_with_no_args(self):
        stub = Stub()
        stub.call()
        assert stub.called_with()

    def test_called_times(self):
        stub = Stub()
        stub.called_times(0)
        stub.call()
        stub.call()
        stub.called_times(2)

    def test_called_times_fails(self):
        stub = Stub()
        stub.call(1, "a")
        with pytest.raises(AssertionFailure) as info:
            stub.called_times(2)
        assert info.value.reason == "stub was called 1 times, not 2 times"

    def test_reset_clears_log(self):
        stub = Stub()
        stub.call(1)
        stub.reset()
        assert stub.calls == []
        stub.called_times(0)


# ── ErrorExpectation ──


class TestErrorExpectation:
    def test_default_expects_nothing(self):
        expectation = ErrorExpectation()
        assert expectation.expected is False
        assert expectation.substring is None
        assert not expectation.matches("ValueError: boom")

    def test_any_error(self):
        expectation = ErrorExpectation()
        expectation.expect()
        assert expectation.expected
        assert expectation.matches("anything at all")

    def test_substring(self):
        expectation = ErrorExpectation()
        expectation.expect("boom")
        assert expectation.matches("RuntimeError: big boom here")
        assert not expectation.matches("RuntimeError: bang")

    def test_substring_is_literal(self):
        expectation = ErrorExpectation()
        expectation.expect("a.c")
        assert not expectation.matches("abc")
        assert expectation.matches("xa.cx")

    def test_empty_substring_means_any_error(self):
        expectation = ErrorExpectation()
        expectation.expect("")
        assert expectation.substring is None
        assert expectation.matches("whatever")

    def test_non_string_substring_rejected(self):
        expectation = ErrorExpectation()
        with pytest.raises(TypeError):
            expectation.expect(42)
        assert expectation.expected is False

    def test_reset(self):
        expectation = ErrorExpectation()
        expectation.expect("boom")
        expectation.reset()
        assert expectation.expected is False
        assert expectation.substring is None
