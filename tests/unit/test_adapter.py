"""Tests for guarded listener calls."""

import asyncio

import pytest

from builders import RecordingListener
from testlistener.adapter import SessionState, call
from testlistener.callback import BaseListener, ErrorInfo, SessionError
from testlistener.events import Kind


class AsyncListener(BaseListener):
    async def handle_begin(self, kind, data, state):
        return state + [data]


@pytest.mark.asyncio
async def test_result_becomes_new_substate(recorder):
    state = SessionState(callback=recorder, substate=0)

    new_state = await call("handle_begin", (Kind.TEST, None, state.substate), state)

    assert new_state.substate == 1
    assert state.substate == 0


@pytest.mark.asyncio
async def test_coroutine_callbacks_are_awaited():
    state = SessionState(callback=AsyncListener(), substate=[])

    new_state = await call("handle_begin", (Kind.GROUP, "g", state.substate), state)

    assert new_state.substate == ["g"]


@pytest.mark.asyncio
async def test_failure_terminates_once_then_reraises():
    listener = RecordingListener()
    listener.handle_end = _raise(KeyError("gone"))
    state = SessionState(callback=listener, substate=7)

    with pytest.raises(KeyError, match="gone"):
        await call("handle_end", (Kind.TEST, None, state.substate), state)

    [outcome] = listener.terminations()
    assert isinstance(outcome, SessionError)
    assert outcome.error.exc_class is KeyError
    assert isinstance(outcome.error.reason, KeyError)
    assert "KeyError" in outcome.error.trace
    assert listener.states == [7]


@pytest.mark.asyncio
async def test_secondary_terminate_failure_is_swallowed():
    listener = RecordingListener(fail_terminate=True)
    listener.handle_begin = _raise(ValueError("first"))
    state = SessionState(callback=listener)

    with pytest.raises(ValueError, match="first"):
        await call("handle_begin", (Kind.TEST, None, None), state)

    assert len(listener.terminations()) == 1


@pytest.mark.asyncio
async def test_terminate_failure_is_not_retried():
    listener = RecordingListener(fail_terminate=True)
    state = SessionState(callback=listener)

    with pytest.raises(RuntimeError, match="terminate failed"):
        await call("terminate", ("outcome", None), state)

    assert listener.terminations() == ["outcome"]


def test_error_info_from_exception():
    try:
        raise ZeroDivisionError("nope")
    except ZeroDivisionError as exc:
        info = ErrorInfo.from_exception(exc)

    assert info.exc_class is ZeroDivisionError
    assert str(info.reason) == "nope"
    assert "test_error_info_from_exception" in info.trace


def _raise(exc):
    def fail(*args):
        raise exc

    return fail


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [SystemExit(3), KeyboardInterrupt()])
async def test_base_exceptions_also_terminate(exc):
    listener = RecordingListener()
    listener.handle_begin = _raise(exc)
    state = SessionState(callback=listener)

    with pytest.raises(type(exc)):
        await call("handle_begin", (Kind.GROUP, None, None), state)

    [outcome] = listener.terminations()
    assert outcome.error.exc_class is type(exc)


@pytest.mark.asyncio
async def test_cancellation_is_not_finalized():
    listener = RecordingListener()
    listener.handle_begin = _raise(asyncio.CancelledError())
    state = SessionState(callback=listener)

    with pytest.raises(asyncio.CancelledError):
        await call("handle_begin", (Kind.GROUP, None, None), state)

    assert listener.terminations() == []
