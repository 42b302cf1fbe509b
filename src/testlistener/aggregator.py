"""Pass/fail/skipped counters for a listener session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict

from testlistener.events import StatusKind, TestStatus


class Summary(BaseModel):
    """Counts reported to ``terminate`` when a session completes."""

    model_config = ConfigDict(frozen=True)

    success: int = 0
    fail: int = 0
    skipped: int = 0
    cancel: bool = False

    @property
    def total(self) -> int:
        return self.success + self.fail + self.skipped

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump()


@dataclass(frozen=True, slots=True)
class Tally:
    success: int = 0
    fail: int = 0
    skipped: int = 0
    cancelled: bool = False

    def record(self, status: TestStatus) -> Tally:
        """Count one finished test."""
        if status.kind is StatusKind.OK:
            return replace(self, success=self.success + 1)
        if status.kind is StatusKind.SKIPPED:
            return replace(self, skipped=self.skipped + 1)
        if status.kind is StatusKind.ERROR:
            return replace(self, fail=self.fail + 1)
        raise ValueError(f"Unknown test status: {status!r}")

    def mark_cancelled(self) -> Tally:
        if self.cancelled:
            return self
        return replace(self, cancelled=True)

    def summary(self) -> Summary:
        return Summary(
            success=self.success,
            fail=self.fail,
            skipped=self.skipped,
            cancel=self.cancelled,
        )
