"""Inbound events delivered by the test-execution engine.

Each event names a node by its id and carries one phase of that node's
life: ``Begin``, ``End`` or ``Cancel``. The data attached to ``Begin`` and
``End`` depends on whether the node is a group or a test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from testlistener.ids import TestId


class Kind(str, Enum):
    """Node kind."""

    TEST = "test"
    GROUP = "group"


class StatusKind(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class TestStatus:
    """Outcome of a single test.

    ``detail`` holds the skip reason or the error info; it is None for ``ok``.
    """

    __test__ = False

    kind: StatusKind
    detail: Any = None

    @classmethod
    def ok(cls) -> TestStatus:
        return cls(StatusKind.OK)

    @classmethod
    def skipped(cls, reason: Any) -> TestStatus:
        return cls(StatusKind.SKIPPED, reason)

    @classmethod
    def error(cls, info: Any) -> TestStatus:
        return cls(StatusKind.ERROR, info)


@dataclass(frozen=True, slots=True)
class GroupInfo:
    """Begin data for a group."""

    description: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TestInfo:
    """Begin data for a test."""

    __test__ = False

    description: str | None = None
    source: Any = None
    line: int = 0


@dataclass(frozen=True, slots=True)
class GroupResult:
    """End data for a group."""

    size: int = 0
    time: float = 0
    output: str = ""


@dataclass(frozen=True, slots=True)
class TestResult:
    """End data for a test."""

    __test__ = False

    status: TestStatus = field(default_factory=TestStatus.ok)
    time: float = 0
    output: str = ""


@dataclass(frozen=True, slots=True)
class Begin:
    id: TestId
    kind: Kind
    data: GroupInfo | TestInfo

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", tuple(self.id))
        object.__setattr__(self, "kind", Kind(self.kind))


@dataclass(frozen=True, slots=True)
class End:
    id: TestId
    data: GroupResult | TestResult

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", tuple(self.id))


@dataclass(frozen=True, slots=True)
class Cancel:
    id: TestId
    reason: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", tuple(self.id))


Event = Begin | End | Cancel


__all__ = [
    "Begin",
    "Cancel",
    "End",
    "Event",
    "GroupInfo",
    "GroupResult",
    "Kind",
    "StatusKind",
    "TestInfo",
    "TestResult",
    "TestStatus",
]
