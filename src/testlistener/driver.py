"""Rebuilds the test tree from the event stream and replays it to a listener.

``process_subtree`` handles the node at one id: it waits for that node to
begin, walks its children if it is a group, and reports the node's end or
cancellation. If the parent finishes first, it returns :class:`Done` so the
parent stops looking for further children.

Waiting for [..., M, N] to begin:
    [..., M, N] begin test   -> wait for [..., M, N] end
    [..., M, N] begin group  -> walk [..., M, N, 1], [..., M, N, 2], ...
    [..., M] end             -> done (no more siblings)
    cancel [..., M]          -> done, cancelled
    cancel of an ancestor    -> done, cancelled (left queued for the ancestor)

Waiting for test [..., M, N] to end:
    [..., M, N] end          -> end test
    cancel [..., M, N]       -> cancel test
    cancel of an ancestor    -> cancel test (left queued for the ancestor)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from testlistener import adapter
from testlistener.adapter import SessionState
from testlistener.errors import ProtocolViolation
from testlistener.events import (
    Begin,
    Cancel,
    End,
    Event,
    GroupInfo,
    GroupResult,
    Kind,
    TestInfo,
    TestResult,
)
from testlistener.ids import TestId, child, format_id, is_ancestor
from testlistener.mailbox import Mailbox, Match
from testlistener.payloads import (
    GroupBegin,
    GroupCancel,
    GroupEnd,
    TestBegin,
    TestCancel,
    TestEnd,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ended:
    """The node finished; the parent should look for the next sibling."""


@dataclass(frozen=True, slots=True)
class Done:
    """The parent's own end or cancel was seen before this node began."""

    result: GroupResult | None = None
    cancelled: bool = False
    reason: Any = None


Outcome = Ended | Done


@dataclass(frozen=True, slots=True)
class _Finished:
    result: TestResult


@dataclass(frozen=True, slots=True)
class _Cancelled:
    reason: Any


def _ancestor_cancel(event: Event, parent_id: TestId | None) -> bool:
    return isinstance(event, Cancel) and is_ancestor(event.id, parent_id)


def _begin_matcher(node_id: TestId, parent_id: TestId | None):
    def match(event: Event) -> Match[Begin | Done] | None:
        if isinstance(event, Begin) and event.id == node_id:
            return Match(event)
        if parent_id is None or event.id != parent_id:
            if _ancestor_cancel(event, parent_id):
                return Match(Done(cancelled=True, reason=event.reason), consume=False)
            return None
        if isinstance(event, End):
            return Match(Done(result=event.data))
        if isinstance(event, Cancel):
            return Match(Done(cancelled=True, reason=event.reason))
        return None

    return match


def _end_matcher(node_id: TestId):
    def match(event: Event) -> Match[_Finished | _Cancelled] | None:
        if event.id == node_id:
            if isinstance(event, End):
                return Match(_Finished(event.data))
            if isinstance(event, Cancel):
                return Match(_Cancelled(event.reason))
            return None
        if isinstance(event, Cancel) and is_ancestor(event.id, node_id):
            return Match(_Cancelled(event.reason), consume=False)
        return None

    return match


async def process_subtree(
    mailbox: Mailbox,
    node_id: TestId,
    parent_id: TestId | None,
    state: SessionState,
) -> tuple[Outcome, SessionState]:
    """Replay the subtree rooted at ``node_id`` to the listener."""
    logger.debug("waiting for %s begin", format_id(node_id))
    got = await mailbox.receive(_begin_matcher(node_id, parent_id))
    if isinstance(got, Done):
        what = "cancel" if got.cancelled else "end"
        logger.debug("got parent %s while waiting for %s: %r", what, format_id(node_id), got)
        return got, state

    logger.debug("got begin %s %s", format_id(node_id), got.kind.value)
    if got.kind is Kind.GROUP:
        if not isinstance(got.data, GroupInfo):
            raise ProtocolViolation("group begin without group info", got)
        state = await _group(mailbox, node_id, got.data, state)
    else:
        if not isinstance(got.data, TestInfo):
            raise ProtocolViolation("test begin without test info", got)
        state = await _test(mailbox, node_id, got.data, state)
    return Ended(), state


async def _group(
    mailbox: Mailbox, node_id: TestId, info: GroupInfo, state: SessionState
) -> SessionState:
    data = GroupBegin.build(node_id, info)
    state = await adapter.call("handle_begin", (Kind.GROUP, data, state.substate), state)
    n = 0
    while True:
        n += 1
        outcome, state = await process_subtree(mailbox, child(node_id, n), node_id, state)
        if isinstance(outcome, Done):
            break

    if outcome.cancelled:
        return await _cancel(Kind.GROUP, GroupCancel.from_reason(node_id, info, outcome.reason), state)
    result = outcome.result
    if not isinstance(result, GroupResult):
        raise ProtocolViolation("group end without group result", result)
    data = GroupEnd.from_result(node_id, info, result)
    return await adapter.call("handle_end", (Kind.GROUP, data, state.substate), state)


async def _test(
    mailbox: Mailbox, node_id: TestId, info: TestInfo, state: SessionState
) -> SessionState:
    data = TestBegin.build(node_id, info)
    state = await adapter.call("handle_begin", (Kind.TEST, data, state.substate), state)
    logger.debug("waiting for %s end", format_id(node_id))
    got = await mailbox.receive(_end_matcher(node_id))

    if isinstance(got, _Cancelled):
        logger.debug("got cancel %s %r", format_id(node_id), got.reason)
        return await _cancel(Kind.TEST, TestCancel.from_reason(node_id, info, got.reason), state)

    result = got.result
    if not isinstance(result, TestResult):
        raise ProtocolViolation("test end without test result", result)
    logger.debug("got end %s %s", format_id(node_id), result.status.kind.value)
    state = replace(state, tally=state.tally.record(result.status))
    data = TestEnd.from_result(node_id, info, result)
    return await adapter.call("handle_end", (Kind.TEST, data, state.substate), state)


async def _cancel(kind: Kind, data: GroupCancel | TestCancel, state: SessionState) -> SessionState:
    state = replace(state, tally=state.tally.mark_cancelled())
    return await adapter.call("handle_cancel", (kind, data, state.substate), state)


__all__ = ["Done", "Ended", "Outcome", "process_subtree"]
