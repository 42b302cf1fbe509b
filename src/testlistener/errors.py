"""Listener error types."""

from typing import Any


class ProtocolViolation(Exception):
    """Raised when the event source breaks the event contract."""

    def __init__(self, message: str, event: Any = None) -> None:
        self.event = event
        if event is not None:
            message = f"{message}: {event!r}"
        super().__init__(message)


class ListenerResolutionError(ValueError):
    """Raised when a listener cannot be resolved from the registry."""
