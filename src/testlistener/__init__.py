"""testlistener - replays hierarchical test-run events to a listener."""

from .aggregator import Summary
from .callback import BaseListener, ErrorInfo, Listener, SessionError, SessionOk
from .config import ListenerOptions, SpawnOptions, load_options
from .errors import ListenerResolutionError, ProtocolViolation
from .events import (
    Begin,
    Cancel,
    End,
    GroupInfo,
    GroupResult,
    Kind,
    StatusKind,
    TestInfo,
    TestResult,
    TestStatus,
)
from .registry import listener, resolve_listener
from .session import ListenerSession, replay, start
from .version import __version__


__all__ = [
    # Sessions
    "ListenerSession",
    "start",
    "replay",
    # Listener protocol
    "Listener",
    "BaseListener",
    "SessionOk",
    "SessionError",
    "ErrorInfo",
    "Summary",
    "listener",
    "resolve_listener",
    # Events
    "Begin",
    "End",
    "Cancel",
    "Kind",
    "GroupInfo",
    "GroupResult",
    "TestInfo",
    "TestResult",
    "TestStatus",
    "StatusKind",
    # Configuration
    "ListenerOptions",
    "SpawnOptions",
    "load_options",
    # Errors
    "ProtocolViolation",
    "ListenerResolutionError",
]
