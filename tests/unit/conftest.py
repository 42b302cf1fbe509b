"""Shared fixtures for unit tests."""

import pytest

from builders import RecordingListener


@pytest.fixture
def recorder() -> RecordingListener:
    """Provide a listener that records its calls."""
    return RecordingListener()
