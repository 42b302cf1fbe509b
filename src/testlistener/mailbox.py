"""Inbound event queue with selective receive.

Events are kept in arrival order. ``receive`` scans them oldest first and
takes the first one the matcher accepts; everything else stays queued for a
later ``receive`` with a different matcher.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from testlistener.events import Event

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Match(Generic[T]):
    """Matcher verdict for one event.

    With ``consume=False`` the event is left in place so an enclosing
    receive can match it again.
    """

    value: T
    consume: bool = True


Matcher = Callable[[Event], Match[T] | None]


class Mailbox:
    """Single-consumer event queue bound to the running event loop."""

    def __init__(self) -> None:
        self._events: deque[Event] = deque()
        self._arrived = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None

    def __len__(self) -> int:
        return len(self._events)

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def put(self, event: Event) -> None:
        """Deliver an event. Must be called from the loop's thread."""
        self._events.append(event)
        self._arrived.set()

    def put_threadsafe(self, event: Event) -> None:
        """Deliver an event from another thread."""
        if self._loop is None:
            raise RuntimeError("mailbox is not bound to an event loop")
        self._loop.call_soon_threadsafe(self.put, event)

    def pending(self) -> list[Event]:
        """Snapshot of queued events, oldest first."""
        return list(self._events)

    async def receive(self, matcher: Matcher[T]) -> T:
        """Wait for the oldest event accepted by ``matcher``."""
        while True:
            for index, event in enumerate(self._events):
                match = matcher(event)
                if match is None:
                    continue
                if match.consume:
                    del self._events[index]
                return match.value
            self._arrived.clear()
            await self._arrived.wait()
