"""Guarded invocation of listener callbacks.

Every callback call goes through :func:`call`. A failing call triggers one
``terminate`` with the error before the original exception is re-raised, so
the listener is always finalized exactly once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any

from testlistener.aggregator import Tally
from testlistener.callback import ErrorInfo, Listener, SessionError

logger = logging.getLogger(__name__)

TERMINATE = "terminate"


@dataclass(frozen=True, slots=True)
class SessionState:
    """Per-session listener state, replaced on every step."""

    callback: Listener
    substate: Any = None
    tally: Tally = field(default_factory=Tally)


async def _invoke(callback: Listener, name: str, args: tuple[Any, ...]) -> Any:
    result = getattr(callback, name)(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def call(name: str, args: tuple[Any, ...], state: SessionState) -> SessionState:
    """Call ``name`` on the listener and store its result as the new substate."""
    try:
        substate = await _invoke(state.callback, name, args)
    except asyncio.CancelledError:
        raise
    except BaseException as exc:
        if name != TERMINATE:
            await _terminate_after_failure(exc, state)
        raise
    return replace(state, substate=substate)


async def _terminate_after_failure(exc: BaseException, state: SessionState) -> None:
    logger.debug("listener call failed, terminating: %r", exc)
    outcome = SessionError(ErrorInfo.from_exception(exc))
    try:
        await _invoke(state.callback, TERMINATE, (outcome, state.substate))
    except asyncio.CancelledError:
        raise
    except BaseException:
        logger.warning("listener terminate failed after %r", exc, exc_info=True)


__all__ = ["SessionState", "call"]
