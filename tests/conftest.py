"""Shared test fixtures for gravelspec tests."""

import sys
from pathlib import Path

import pytest

# Add src to path so tests can import gravelspec
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gravelspec.harness import Harness  # noqa: E402
from gravelspec.reporter import MemorySink  # noqa: E402


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def harness(sink) -> Harness:
    """Independent harness logging into ``sink``."""
    return Harness(sink=sink)
