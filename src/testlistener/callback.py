"""Listener callback protocol.

A listener receives the replayed test tree through five calls. Each call
gets the substate returned by the previous one and returns the next; the
value returned by ``init`` is the first substate. Methods may be plain
functions or coroutine functions.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from testlistener.aggregator import Summary
from testlistener.events import Kind


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Description of a callback failure passed to ``terminate``."""

    exc_class: type[BaseException]
    reason: BaseException
    trace: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        return cls(
            exc_class=type(exc),
            reason=exc,
            trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )


@dataclass(frozen=True, slots=True)
class SessionOk:
    summary: Summary


@dataclass(frozen=True, slots=True)
class SessionError:
    error: ErrorInfo


Outcome = SessionOk | SessionError


@runtime_checkable
class Listener(Protocol):
    """Protocol defining the interface for test-run listeners."""

    def init(self, options: Mapping[str, Any]) -> Any:
        """Called once before any event; returns the initial substate."""
        ...

    def handle_begin(self, kind: Kind, data: Any, state: Any) -> Any:
        """Called when a group or test begins."""
        ...

    def handle_end(self, kind: Kind, data: Any, state: Any) -> Any:
        """Called when a group or test ends normally."""
        ...

    def handle_cancel(self, kind: Kind, data: Any, state: Any) -> Any:
        """Called when a group or test is cancelled."""
        ...

    def terminate(self, outcome: Outcome, state: Any) -> Any:
        """Called exactly once when the session finishes; return value is ignored."""
        ...


class BaseListener:
    """Listener that keeps its substate unchanged.

    Subclass and override the calls you care about.
    """

    def init(self, options: Mapping[str, Any]) -> Any:
        return None

    def handle_begin(self, kind: Kind, data: Any, state: Any) -> Any:
        return state

    def handle_end(self, kind: Kind, data: Any, state: Any) -> Any:
        return state

    def handle_cancel(self, kind: Kind, data: Any, state: Any) -> Any:
        return state

    def terminate(self, outcome: Outcome, state: Any) -> Any:
        return None


__all__ = ["BaseListener", "ErrorInfo", "Listener", "Outcome", "SessionError", "SessionOk"]
