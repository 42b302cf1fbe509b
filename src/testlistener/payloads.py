"""Data handed to listener callbacks.

Group payloads accept passthrough extras supplied by the event source;
test payloads have a fixed shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from testlistener.events import GroupInfo, GroupResult, TestInfo, TestResult, TestStatus
from testlistener.ids import TestId


class GroupBegin(BaseModel):
    """Group begin data; source extras never override the fixed fields."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: TestId
    description: str | None = None

    @classmethod
    def build(cls, node_id: TestId, info: GroupInfo) -> GroupBegin:
        return cls(**{**info.extras, "id": node_id, "description": info.description})


class GroupEnd(GroupBegin):
    size: int
    time: float
    output: str

    @classmethod
    def from_result(cls, node_id: TestId, info: GroupInfo, result: GroupResult) -> GroupEnd:
        return cls(
            **{
                **info.extras,
                "id": node_id,
                "description": info.description,
                "size": result.size,
                "time": result.time,
                "output": result.output,
            }
        )


class GroupCancel(GroupBegin):
    reason: Any = None

    @classmethod
    def from_reason(cls, node_id: TestId, info: GroupInfo, reason: Any) -> GroupCancel:
        fields = {"id": node_id, "description": info.description, "reason": reason}
        return cls(**{**info.extras, **fields})


class TestBegin(BaseModel):
    __test__ = False

    model_config = ConfigDict(frozen=True)

    id: TestId
    description: str | None = None
    source: Any = None
    line: int = 0

    @classmethod
    def build(cls, node_id: TestId, info: TestInfo) -> TestBegin:
        return cls(id=node_id, description=info.description, source=info.source, line=info.line)


class TestEnd(TestBegin):
    __test__ = False

    time: float
    status: TestStatus
    output: str

    @classmethod
    def from_result(cls, node_id: TestId, info: TestInfo, result: TestResult) -> TestEnd:
        return cls(
            id=node_id,
            description=info.description,
            source=info.source,
            line=info.line,
            time=result.time,
            status=result.status,
            output=result.output,
        )


class TestCancel(TestBegin):
    __test__ = False

    reason: Any = None

    @classmethod
    def from_reason(cls, node_id: TestId, info: TestInfo, reason: Any) -> TestCancel:
        return cls(
            id=node_id,
            description=info.description,
            source=info.source,
            line=info.line,
            reason=reason,
        )


__all__ = [
    "GroupBegin",
    "GroupCancel",
    "GroupEnd",
    "TestBegin",
    "TestCancel",
    "TestEnd",
]
