"""Listener session options.

Options not declared here are kept as extras and handed to the listener's
``init`` unchanged. Defaults for the spawn options can come from the
environment (``TESTLISTENER_NAME``, ``TESTLISTENER_LINK``), including a
``.env`` file.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "TESTLISTENER_"

_TRUE = {"1", "true", "yes", "on"}

ExitMonitor = Callable[[Any, BaseException | None], Any]


class SpawnOptions(BaseModel):
    """How the listener worker task is started.

    Attributes
    ----------
    name
        Name given to the asyncio task.
    link
        Cancel the task that called ``start`` if the worker exits abnormally.
    monitors
        Callables invoked with ``(session, exc)`` when the worker exits;
        ``exc`` is None on normal exit.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str | None = None
    link: bool = False
    monitors: list[ExitMonitor] = Field(default_factory=list)


class ListenerOptions(BaseModel):
    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    spawn: SpawnOptions = Field(default_factory=SpawnOptions)

    def listener_options(self) -> dict[str, Any]:
        """Options passed to ``Listener.init``."""
        return dict(self.model_extra or {})


def load_options(env: dict[str, str] | None = None, **overrides: Any) -> ListenerOptions:
    """Build options from environment defaults and keyword overrides."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    spawn: dict[str, Any] = {}
    if name := env.get(f"{ENV_PREFIX}NAME"):
        spawn["name"] = name
    if link := env.get(f"{ENV_PREFIX}LINK"):
        spawn["link"] = link.strip().lower() in _TRUE

    given = overrides.pop("spawn", None)
    if isinstance(given, SpawnOptions):
        given = given.model_dump(exclude_unset=True)
    spawn.update(given or {})
    return ListenerOptions(spawn=SpawnOptions(**spawn), **overrides)


__all__ = ["ListenerOptions", "SpawnOptions", "load_options"]
