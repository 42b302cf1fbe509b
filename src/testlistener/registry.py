"""Listener registry for plugin-style listener registration."""

from __future__ import annotations

import importlib
from typing import Any, TypeVar

from testlistener.callback import Listener
from testlistener.errors import ListenerResolutionError

T = TypeVar("T")

_listener_registry: dict[str, type] = {}


def listener(
    cls: type[T] | None = None,
    *,
    enabled: bool = True,
    name: str | None = None,
) -> type[T] | Any:
    """Register a listener class for lookup by name.

    Can be used as a decorator with or without arguments:

        @listener
        class Printer(BaseListener): ...

        @listener(name="printer")
        class Printer(BaseListener): ...
    """

    def decorator(cls: type[T]) -> type[T]:
        if enabled:
            _listener_registry[name or cls.__name__] = cls
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def get_listener_registry() -> dict[str, type]:
    return _listener_registry


def clear_listener_registry() -> None:
    _listener_registry.clear()


def _import_listener_class(import_path: str) -> type:
    """Import a listener class from "module.path:ClassName" or "module.path.ClassName"."""
    if ":" in import_path:
        module_path, class_name = import_path.rsplit(":", 1)
    else:
        module_path, class_name = import_path.rsplit(".", 1)

    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)

    if not isinstance(cls, type) or not issubclass(cls, Listener):
        msg = f"{import_path} does not implement the Listener protocol"
        raise TypeError(msg)

    return cls


def resolve_listener(name: str, **kwargs: Any) -> Listener:
    """Instantiate a listener by registry name or import string.

    Raises:
        ListenerResolutionError: If the name is neither registered nor an import string.
    """
    if name in _listener_registry:
        return _listener_registry[name](**kwargs)

    if ":" in name or "." in name:
        return _import_listener_class(name)(**kwargs)

    available = ", ".join(sorted(_listener_registry)) or "none"
    msg = f"Unknown listener: {name}. Available: {available}"
    raise ListenerResolutionError(msg)


__all__ = [
    "clear_listener_registry",
    "get_listener_registry",
    "listener",
    "resolve_listener",
]
