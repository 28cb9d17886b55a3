"""Flat listener registry — the per-channel store of event name → listeners."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from channel_emitter.base import InvalidListenerError, MissingEventNameError

log = logging.getLogger(__name__)

Listener = Callable[..., Any]


@dataclass(slots=True)
class _Registration:
    listener: Listener
    once: bool = False


class ListenerRegistry:
    """Ordered listeners per event name.

    The same callable may be registered more than once; each registration
    fires (and must be removed) separately.
    """

    def __init__(self, max_listeners: int = 10) -> None:
        self._events: dict[str, list[_Registration]] = {}
        self._warned: set[str] = set()
        self.max_listeners = max_listeners

    def add(self, event_name: str | None, listener: Listener, *, once: bool = False, prepend: bool = False) -> None:
        if event_name is None:
            raise MissingEventNameError("An event name is required to register a listener")
        if not callable(listener):
            raise InvalidListenerError(
                f"Listener for '{event_name}' must be callable, got {type(listener).__name__}",
                event_name=event_name,
            )

        registrations = self._events.setdefault(event_name, [])
        registration = _Registration(listener, once=once)
        if prepend:
            registrations.insert(0, registration)
        else:
            registrations.append(registration)

        if self.max_listeners and len(registrations) > self.max_listeners and event_name not in self._warned:
            self._warned.add(event_name)
            log.warning(
                "Possible listener leak: %d listeners added for '%s' (max %d)",
                len(registrations),
                event_name,
                self.max_listeners,
            )

    def remove(self, event_name: str | None, listener: Listener) -> None:
        """Remove the most recently added registration of `listener`."""
        registrations = self._events.get(event_name)
        if not registrations:
            return
        for index in range(len(registrations) - 1, -1, -1):
            if registrations[index].listener == listener:
                del registrations[index]
                break
        if not registrations:
            del self._events[event_name]

    def remove_all(self, event_name: str | None = None) -> None:
        if event_name is None:
            self._events.clear()
            self._warned.clear()
        else:
            self._events.pop(event_name, None)
            self._warned.discard(event_name)

    def count(self, event_name: str | None) -> int:
        return len(self._events.get(event_name, ()))

    def listeners(self, event_name: str | None) -> list[Listener]:
        return [r.listener for r in self._events.get(event_name, ())]

    def names(self) -> list[str]:
        return [name for name, registrations in self._events.items() if registrations]

    @property
    def is_empty(self) -> bool:
        return not self._events

    def fire(self, event_name: str | None, *args: Any, **kwargs: Any) -> bool:
        """Call every listener for `event_name`; True if at least one ran.

        Registrations are snapshotted first, so listeners added or removed
        while firing only affect later deliveries.
        """
        if event_name is None:
            raise MissingEventNameError("An event name is required to fire an event")

        registrations = list(self._events.get(event_name, ()))
        if not registrations:
            return False

        for registration in registrations:
            if registration.once:
                self._discard(event_name, registration)
            registration.listener(*args, **kwargs)
        return True

    def _discard(self, event_name: str, registration: _Registration) -> None:
        registrations = self._events.get(event_name)
        if registrations is None:
            return
        for index, candidate in enumerate(registrations):
            if candidate is registration:
                del registrations[index]
                break
        if not registrations:
            del self._events[event_name]
