"""Tests for testlistener.aggregator module."""

import pytest

from testlistener.aggregator import Summary, Tally
from testlistener.events import StatusKind, TestStatus


class TestTally:
    def test_starts_empty(self):
        tally = Tally()
        assert (tally.success, tally.fail, tally.skipped, tally.cancelled) == (0, 0, 0, False)

    def test_record_partitions_by_status(self):
        tally = Tally()
        for status in [
            TestStatus.ok(),
            TestStatus.ok(),
            TestStatus.skipped("not today"),
            TestStatus.error(("assert", "boom")),
        ]:
            tally = tally.record(status)

        assert tally.success == 2
        assert tally.skipped == 1
        assert tally.fail == 1

    def test_record_returns_new_value(self):
        tally = Tally()
        updated = tally.record(TestStatus.ok())
        assert tally.success == 0
        assert updated.success == 1

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError, match="Unknown test status"):
            Tally().record(TestStatus(kind="weird"))  # type: ignore[arg-type]

    def test_mark_cancelled_does_not_touch_counters(self):
        tally = Tally(success=1).mark_cancelled()
        assert tally.cancelled
        assert tally.success == 1
        assert tally.mark_cancelled() is tally


class TestSummary:
    def test_as_dict_is_ordered(self):
        summary = Tally(success=3, fail=1, skipped=2, cancelled=True).summary()
        assert list(summary.as_dict().items()) == [
            ("success", 3),
            ("fail", 1),
            ("skipped", 2),
            ("cancel", True),
        ]

    def test_total(self):
        assert Summary(success=1, fail=2, skipped=3).total == 6


def test_status_constructors():
    assert TestStatus.ok().kind is StatusKind.OK
    assert TestStatus.skipped("why").detail == "why"
    assert TestStatus.error({"line": 3}).kind is StatusKind.ERROR


def test_test_named_types_opt_out_of_collection():
    from testlistener.events import TestInfo, TestResult
    from testlistener.payloads import TestBegin, TestCancel, TestEnd

    for cls in (TestStatus, TestInfo, TestResult, TestBegin, TestEnd, TestCancel):
        assert cls.__test__ is False
