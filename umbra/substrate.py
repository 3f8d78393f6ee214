"""Backing storage for auto-tracked properties and events."""

from __future__ import annotations

import typing as t

EventHandler: t.TypeAlias = t.Callable[..., t.Any]

GETTER_PREFIX: t.Final[str] = "get_"
SETTER_PREFIX: t.Final[str] = "set_"
ADD_PREFIX: t.Final[str] = "add_"
REMOVE_PREFIX: t.Final[str] = "remove_"


def getter(name: str) -> str:
    """Return the signature of the getter for property *name*."""
    return f"{GETTER_PREFIX}{name}"


def setter(name: str) -> str:
    """Return the signature of the setter for property *name*."""
    return f"{SETTER_PREFIX}{name}"


def adder(name: str) -> str:
    """Return the signature for subscribing to event *name*."""
    return f"{ADD_PREFIX}{name}"


def remover(name: str) -> str:
    """Return the signature for unsubscribing from event *name*."""
    return f"{REMOVE_PREFIX}{name}"


class PropertyStore:
    """Current values of properties configured for automatic tracking."""

    def __init__(self) -> None:
        self._values: dict[str, t.Any] = {}

    def setup(self, name: str, initial: t.Any = None) -> None:
        """Track *name* starting from *initial*."""
        self._values[name] = initial

    def has(self, name: str) -> bool:
        """Return ``True`` when *name* is tracked."""
        return name in self._values

    def get(self, name: str) -> t.Any:
        """Return the stored value, ``None`` when untracked."""
        return self._values.get(name)

    def set(self, name: str, value: t.Any) -> None:
        """Store *value* for *name*."""
        self._values[name] = value

    def clear(self) -> None:
        """Forget every tracked property."""
        self._values.clear()


class EventRegistry:
    """Subscribers per event, kept in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def add(self, name: str, handler: EventHandler) -> None:
        """Subscribe *handler* to *name*."""
        self._handlers.setdefault(name, []).append(handler)

    def remove(self, name: str, handler: EventHandler) -> None:
        """Unsubscribe the first registration of *handler*; unknown ones are ignored."""
        handlers = self._handlers.get(name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handlers(self, name: str) -> list[EventHandler]:
        """Return a snapshot of the subscribers of *name*."""
        return list(self._handlers.get(name, ()))

    def raise_event(self, name: str, *args: t.Any) -> None:
        """Call every subscriber of *name* with *args*, in subscription order.

        A failing handler's exception propagates unchanged and stops dispatch.
        """
        for handler in self.handlers(name):
            handler(*args)

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()


__all__ = [
    "ADD_PREFIX",
    "GETTER_PREFIX",
    "REMOVE_PREFIX",
    "SETTER_PREFIX",
    "EventRegistry",
    "PropertyStore",
    "adder",
    "getter",
    "remover",
    "setter",
]
