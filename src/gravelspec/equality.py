"""Structural equality and value rendering for assertions and stubs.

Values fall into one of three kinds: scalars, ordered sequences (list,
tuple) and mappings (dict).  Containers compare equal when they have the
same kind, the same length and equal values at every key present in
either side, recursively.  Everything else compares with ``==``.

Pure Python. No dependencies.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

# Default truncation for rendered values
_VALUE_REPR_MAX = 200


class ValueKind(Enum):
    """Closed set of value shapes understood by ``deep_equal``."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def value_kind(value: Any) -> ValueKind:
    """Classify *value* into one of the ``ValueKind`` variants."""
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def deep_equal(a: Any, b: Any) -> bool:
    """Return True if *a* and *b* are structurally equal.

    Identical objects are always equal.  Values of different kinds are never
    equal, so ``[1]`` and ``{0: 1}`` differ even though both hold 1 at key 0.
    """
    if a is b:
        return True

    kind = value_kind(a)
    if kind is not value_kind(b):
        return False

    if kind is ValueKind.SCALAR:
        return bool(a == b)

    if len(a) != len(b):
        return False

    if kind is ValueKind.SEQUENCE:
        return all(deep_equal(x, y) for x, y in zip(a, b))

    # Symmetric key coverage: every key of either side must match
    for key in a.keys() | b.keys():
        if key not in a or key not in b:
            return False
        if not deep_equal(a[key], b[key]):
            return False
    return True


def format_value(value: Any, limit: int = _VALUE_REPR_MAX) -> str:
    """Render *value* for a diagnostic line, truncated to *limit* chars."""
    text = repr(value)
    if limit > 3 and len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def format_args(args: tuple, limit: int = _VALUE_REPR_MAX) -> str:
    """Render a call's argument tuple as ``(a, b, ...)``."""
    return "(" + ", ".join(format_value(arg, limit) for arg in args) + ")"
