"""
Minimal event emitter with subscription hooks.

Listeners are kept per event name. Subclasses hook the transitions between
"no listeners" and "some listeners" to manage remote subscriptions.
"""

from __future__ import annotations

from typing import Any, Callable

__all__ = ["EventEmitter", "Listener"]

Listener = Callable[..., Any]


class EventEmitter:
    """
    Per-instance listener registry.

    Example:
        emitter = EventEmitter()
        emitter.on("progress", print)
        emitter.emit("progress", 42)   # prints 42
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, name: str, listener: Listener) -> EventEmitter:
        """
        Register ``listener`` for ``name``.

        The first listener for a name runs the subscribe hook before it is
        stored; if the hook raises, nothing is registered.
        """
        if not callable(listener):
            raise TypeError("listener must be callable")
        listeners = self._listeners.get(name)
        if listeners:
            listeners.append(listener)
        else:
            self._first_listener_added(name)
            self._listeners[name] = [listener]
        return self

    on = add_listener

    def remove_listener(self, name: str, listener: Listener) -> EventEmitter:
        """Remove one registration of ``listener``; the last one triggers the unsubscribe hook."""
        listeners = self._listeners.get(name)
        if not listeners or listener not in listeners:
            return self
        listeners.remove(listener)
        if not listeners:
            del self._listeners[name]
            self._last_listener_removed(name)
        return self

    off = remove_listener

    def remove_all_listeners(self, name: str | None = None) -> EventEmitter:
        """
        Drop every listener for ``name``, or for all names when omitted.

        With a name, the unsubscribe hook always runs, even when nothing
        was registered for it.
        """
        names = [name] if name is not None else list(self._listeners)
        for event_name in names:
            self._listeners.pop(event_name, None)
            self._last_listener_removed(event_name)
        return self

    def emit(self, name: str, *args: Any) -> bool:
        """Call every listener for ``name``; return whether there were any."""
        listeners = self._listeners.get(name)
        if not listeners:
            return False
        for listener in list(listeners):
            listener(*args)
        return True

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, ()))

    def listeners(self, name: str) -> list[Listener]:
        return list(self._listeners.get(name, ()))

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def _first_listener_added(self, name: str) -> None:
        pass

    def _last_listener_removed(self, name: str) -> None:
        pass
