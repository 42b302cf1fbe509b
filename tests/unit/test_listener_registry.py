"""Tests for testlistener.registry module."""

import pytest

from testlistener.callback import BaseListener
from testlistener.errors import ListenerResolutionError
from testlistener.registry import (
    clear_listener_registry,
    get_listener_registry,
    listener,
    resolve_listener,
)


@pytest.fixture(autouse=True)
def clean_registry():
    """Clear the listener registry before and after each test."""
    clear_listener_registry()
    yield
    clear_listener_registry()


class DummyListener(BaseListener):
    def __init__(self, verbosity: int = 0):
        self.verbosity = verbosity


class NotAListener:
    pass


class TestListenerDecorator:
    def test_registers_class(self):
        @listener
        class MyListener(DummyListener):
            pass

        assert get_listener_registry()["MyListener"] is MyListener

    def test_registers_with_custom_name(self):
        @listener(name="custom")
        class MyListener(DummyListener):
            pass

        registry = get_listener_registry()
        assert registry["custom"] is MyListener
        assert "MyListener" not in registry

    def test_disabled_registration(self):
        @listener(enabled=False)
        class DisabledListener(DummyListener):
            pass

        assert "DisabledListener" not in get_listener_registry()


class TestResolveListener:
    def test_resolve_from_registry_with_kwargs(self):
        @listener
        class Configurable(DummyListener):
            pass

        instance = resolve_listener("Configurable", verbosity=2)
        assert isinstance(instance, Configurable)
        assert instance.verbosity == 2

    def test_resolve_import_string_colon(self):
        instance = resolve_listener("testlistener.callback:BaseListener")
        assert isinstance(instance, BaseListener)

    def test_resolve_import_string_dot(self):
        instance = resolve_listener("testlistener.callback.BaseListener")
        assert isinstance(instance, BaseListener)

    def test_resolve_non_listener_raises(self):
        with pytest.raises(TypeError, match="does not implement"):
            resolve_listener(f"{__name__}:NotAListener")

    def test_resolve_unknown_raises(self):
        with pytest.raises(ListenerResolutionError, match="Unknown listener"):
            resolve_listener("NonExistent")

    def test_resolve_invalid_import_raises(self):
        with pytest.raises(ModuleNotFoundError):
            resolve_listener("nonexistent.module:Listener")
