"""Channel tree — hierarchical routing on top of per-channel listener registries.

`emit` bubbles an event up through the ancestors of the channel it resolves
to; `broadcast` cascades it down through every descendant. Names may carry a
channel path ('a.b.event') and may start at the tree root ('^a.event').
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Any

from channel_emitter.config import Settings
from channel_emitter.config import settings as default_settings
from channel_emitter.registry import Listener, ListenerRegistry
from channel_emitter.resolver import lookup, resolve_or_create

log = logging.getLogger(__name__)


class Channel:
    """A node in the channel tree.

    Children are owned by their parent; the parent is only referenced weakly
    for upward traversal. All channels of one tree share a re-entrant lock,
    so listeners may call back into the tree from the delivering thread.
    """

    def __init__(
        self,
        parent: Channel | None = None,
        name: str | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._channels: list[str] = []
        self._children: dict[str, Channel] = {}
        self._parent: weakref.ref[Channel] | None = None
        self.name = name

        if parent is not None:
            self._parent = weakref.ref(parent)
            self.settings = parent.settings
            self._lock = parent._lock
        else:
            self.settings = settings or default_settings
            self._lock = threading.RLock()

        self._registry = ListenerRegistry(max_listeners=self.settings.max_listeners)

    def __repr__(self) -> str:
        return f"<Channel {self.path or '^'}>"

    # --- Tree ---

    @property
    def parent(self) -> Channel | None:
        return self._parent() if self._parent is not None else None

    @property
    def root(self) -> Channel:
        channel = self
        while channel.parent is not None:
            channel = channel.parent
        return channel

    @property
    def path(self) -> str:
        """Delimited path from the root ('' for the root itself)."""
        names: list[str] = []
        channel: Channel | None = self
        while channel is not None and channel.parent is not None:
            names.append(channel.name)
            channel = channel.parent
        return self.settings.delimiter.join(reversed(names))

    @property
    def channels(self) -> tuple[str, ...]:
        return tuple(self._channels)

    @property
    def is_empty(self) -> bool:
        return self._registry.is_empty and not self._channels

    def get_channel(self, name: str | None) -> Channel | None:
        return self._children.get(name)

    def __getitem__(self, name: str) -> Channel:
        return self._children[name]

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def add_channel(self, name: str | None) -> Channel:
        """Attach a child channel called `name` unless it already exists."""
        with self._lock:
            if name and name not in self._children:
                self._children[name] = Channel(self, name)
                self._channels.append(name)
                log.debug("Added channel %r", self._children[name])
        return self

    def remove_channel(self, name: str | None) -> Channel:
        """Detach the child `name`; the detached channel becomes a standalone root."""
        with self._lock:
            child = self._children.pop(name, None)
            if child is not None:
                self._channels.remove(name)
                log.debug("Removed channel '%s' from %r", name, self)
                child._parent = None
        return self

    def prune_empty_channels(self) -> Channel:
        """Remove every descendant channel with no listeners and no children."""
        with self._lock:
            for name in list(self._channels):
                child = self._children[name]
                child.prune_empty_channels()
                if child.is_empty:
                    self.remove_channel(name)
        return self

    def _prune_upwards(self) -> None:
        channel = self
        while channel.parent is not None and channel.is_empty:
            parent = channel.parent
            parent.remove_channel(channel.name)
            channel = parent

    # --- Listeners ---

    def add_listener(self, name: str, listener: Listener) -> Channel:
        """Register `listener`, creating any channels named on the path."""
        return self._register(name, listener)

    def on(self, name: str, listener: Listener) -> Channel:
        return self._register(name, listener)

    def once(self, name: str, listener: Listener) -> Channel:
        """Register `listener` for a single delivery."""
        return self._register(name, listener, once=True)

    def prepend_listener(self, name: str, listener: Listener) -> Channel:
        return self._register(name, listener, prepend=True)

    def prepend_once_listener(self, name: str, listener: Listener) -> Channel:
        return self._register(name, listener, once=True, prepend=True)

    def _register(self, name: str, listener: Listener, *, once: bool = False, prepend: bool = False) -> Channel:
        with self._lock:
            address = resolve_or_create(self, name)
            address.channel._registry.add(address.event_name, listener, once=once, prepend=prepend)
        return self

    def remove_listener(self, name: str, listener: Listener) -> Channel:
        with self._lock:
            address = lookup(self, name)
            if address.channel is not None:
                address.channel._registry.remove(address.event_name, listener)
                if self.settings.auto_prune:
                    address.channel._prune_upwards()
        return self

    def off(self, name: str, listener: Listener) -> Channel:
        return self.remove_listener(name, listener)

    def remove_all_listeners(self, name: str | None = None) -> Channel:
        """Clear one event's listeners, or every listener on an addressed channel."""
        with self._lock:
            address = lookup(self, name, channel_only=True)
            if address.channel is not None:
                address.channel._registry.remove_all(address.event_name)
                if self.settings.auto_prune:
                    address.channel._prune_upwards()
        return self

    def listener_count(self, name: str) -> int:
        with self._lock:
            address = lookup(self, name, channel_only=True)
            if address.channel is None:
                return 0
            return address.channel._registry.count(address.event_name)

    def listeners(self, name: str) -> list[Listener]:
        with self._lock:
            address = lookup(self, name, channel_only=True)
            if address.channel is None:
                return []
            return address.channel._registry.listeners(address.event_name)

    def event_names(self, name: str | None = None) -> list[str]:
        """Event names with listeners on this channel, or on the channel at `name`."""
        with self._lock:
            if name is None:
                return self._registry.names()
            address = lookup(self, name, channel_only=True)
            if not address.is_channel_only:
                return []
            return address.channel._registry.names()

    def set_max_listeners(self, n: int) -> Channel:
        self._registry.max_listeners = n
        return self

    def get_max_listeners(self) -> int:
        return self._registry.max_listeners

    # --- Propagation ---

    def emit(self, name: str, *args: Any, **kwargs: Any) -> bool:
        """Deliver to the resolved channel, then bubble up through its ancestors.

        Returns True if a listener ran anywhere along the way, False if the
        path does not resolve or nobody was listening.
        """
        with self._lock:
            address = lookup(self, name)
            channel = address.channel
            if channel is None:
                return False

            emitted = channel._registry.fire(address.event_name, *args, **kwargs)
            parent = channel.parent
            emitted_to_parent = parent.emit(address.event_name, *args, **kwargs) if parent is not None else False
        return emitted or emitted_to_parent

    def broadcast(self, name: str, *args: Any, **kwargs: Any) -> bool:
        """Deliver to the resolved channel, then cascade down to all descendants."""
        with self._lock:
            address = lookup(self, name)
            channel = address.channel
            if channel is None:
                return False

            # Channels added by a listener during this delivery are not visited
            child_names = list(channel._channels)
            emitted = channel._registry.fire(address.event_name, *args, **kwargs)
            emitted_to_channels = False
            for child_name in child_names:
                child = channel._children.get(child_name)
                if child is not None and child.broadcast(address.event_name, *args, **kwargs):
                    emitted_to_channels = True
        return emitted or emitted_to_channels


def create_root(settings: Settings | None = None) -> Channel:
    """Create the root of a new channel tree."""
    return Channel(settings=settings)
