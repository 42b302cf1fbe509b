"""Listener sessions.

A session is one asyncio task that owns a mailbox and a listener. It calls
``init``, replays the event tree from the root, then calls ``terminate``
with the summary. The caller feeds events with :meth:`ListenerSession.send`
and collects the summary with :meth:`ListenerSession.wait`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from testlistener import adapter
from testlistener.adapter import SessionState
from testlistener.aggregator import Summary
from testlistener.callback import Listener, SessionOk
from testlistener.config import ListenerOptions
from testlistener.driver import process_subtree
from testlistener.events import Event
from testlistener.ids import ROOT, parent
from testlistener.mailbox import Mailbox
from testlistener.registry import resolve_listener

logger = logging.getLogger(__name__)


class ListenerSession:
    """Handle on a running listener worker."""

    def __init__(self, callback: Listener, options: ListenerOptions) -> None:
        self.callback = callback
        self.options = options
        self.mailbox = Mailbox()
        self._task: asyncio.Task[Summary] | None = None

    @property
    def name(self) -> str | None:
        return self._task.get_name() if self._task else self.options.spawn.name

    @property
    def task(self) -> asyncio.Task[Summary]:
        if self._task is None:
            raise RuntimeError("listener session has not been started")
        return self._task

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def send(self, event: Event) -> None:
        """Deliver an event to the worker's mailbox."""
        self.mailbox.put(event)

    def send_threadsafe(self, event: Event) -> None:
        """Deliver an event from a thread other than the event loop's."""
        self.mailbox.put_threadsafe(event)

    async def wait(self) -> Summary:
        """Wait for the worker to exit; re-raises the worker's failure."""
        return await self.task

    def _spawn(self) -> None:
        loop = asyncio.get_running_loop()
        self.mailbox.bind(loop)
        self._task = loop.create_task(self._run(), name=self.options.spawn.name)
        self._task.add_done_callback(self._on_exit)
        if self.options.spawn.link:
            caller = asyncio.current_task()
            if caller is not None:
                self._task.add_done_callback(lambda task: _propagate_exit(task, caller))

    async def _run(self) -> Summary:
        state = SessionState(callback=self.callback)
        state = await adapter.call("init", (self.options.listener_options(),), state)
        _, state = await process_subtree(self.mailbox, ROOT, parent(ROOT), state)
        summary = state.tally.summary()
        await adapter.call("terminate", (SessionOk(summary), state.substate), state)
        return summary

    def _on_exit(self, task: asyncio.Task[Summary]) -> None:
        exc: BaseException | None
        if task.cancelled():
            exc = asyncio.CancelledError()
        else:
            exc = task.exception()
        if exc is None:
            logger.info("listener %s exited normally", task.get_name())
        else:
            logger.info("listener %s exited with %r", task.get_name(), exc)
        for monitor in self.options.spawn.monitors:
            monitor(self, exc)


def _propagate_exit(task: asyncio.Task[Any], caller: asyncio.Task[Any]) -> None:
    if task.cancelled() or task.exception() is not None:
        if not caller.done():
            caller.cancel(f"linked listener {task.get_name()} exited abnormally")


def _coerce_options(options: ListenerOptions | Mapping[str, Any] | None) -> ListenerOptions:
    if options is None:
        return ListenerOptions()
    if isinstance(options, ListenerOptions):
        return options
    return ListenerOptions(**options)


def start(
    callback: Listener | type[Listener] | str,
    options: ListenerOptions | Mapping[str, Any] | None = None,
) -> ListenerSession:
    """Start a listener worker on the running event loop.

    Args:
        callback: Listener instance or class, registry name, or import string.
        options: Session options; extras are passed to ``init``.
    """
    opts = _coerce_options(options)
    if isinstance(callback, str):
        callback = resolve_listener(callback)
    elif inspect.isclass(callback):
        callback = callback()
    session = ListenerSession(callback, opts)
    session._spawn()
    logger.info("started listener %s for %s", session.name, type(callback).__name__)
    return session


async def replay(
    callback: Listener | type[Listener] | str,
    events: Iterable[Event],
    options: ListenerOptions | Mapping[str, Any] | None = None,
) -> Summary:
    """Replay a recorded event sequence to a listener and return the summary."""
    session = start(callback, options)
    for event in events:
        session.send(event)
    return await session.wait()


__all__ = ["ListenerSession", "replay", "start"]
