"""Name resolution — turn 'a.b.event' into (channel a.b, 'event').

A single walking primitive handles both traversal policies; the caller
supplies the per-segment step:

- `create_step` adds missing channels while descending (registration);
- `lookup_step` only descends into existing channels and short-circuits to
  None as soon as a segment is missing (reads, removals, propagation).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from channel_emitter.base import ResolvedAddress

if TYPE_CHECKING:
    from channel_emitter.channel import Channel

log = logging.getLogger(__name__)


def split_name(name: str, delimiter: str) -> tuple[list[str], str | None]:
    """Split 'a.b.event' → (['a', 'b'], 'event').

    An empty terminal segment ('a.b.') means the path names a channel, so the
    event name comes back as None.
    """
    *path, event_name = name.split(delimiter)
    return path, event_name or None


def create_step(channel: Channel | None, segment: str) -> Channel | None:
    if channel is None or not segment:
        return channel
    channel.add_channel(segment)
    return channel.get_channel(segment)


def lookup_step(channel: Channel | None, segment: str) -> Channel | None:
    if channel is None or not segment:
        return channel
    return channel.get_channel(segment)


def walk(channel: Channel, name: str | None, step: Callable[[Channel | None, str], Channel | None]) -> ResolvedAddress:
    """Resolve `name` starting at `channel`, descending with `step`."""
    delimiter = channel.settings.delimiter
    if name is None or delimiter not in name:
        return ResolvedAddress(channel, name)

    path, event_name = split_name(name, delimiter)

    root_marker = channel.settings.root_marker
    current: Channel | None = channel
    if path[0].startswith(root_marker):
        path[0] = path[0][len(root_marker):]
        current = channel.root

    for segment in path:
        current = step(current, segment)
        if current is None:
            log.debug("No channel '%s' while resolving '%s' from %r", segment, name, channel)
            return ResolvedAddress(None, event_name)

    return ResolvedAddress(current, event_name)


def resolve_or_create(channel: Channel, name: str | None) -> ResolvedAddress:
    """Creating walk: every channel on the path exists afterwards."""
    return walk(channel, name, create_step)


def lookup(channel: Channel, name: str | None, *, channel_only: bool = False) -> ResolvedAddress:
    """Lookup walk; never creates channels.

    With `channel_only=True` a terminal segment that names an existing child
    is read as that child (event name None), so 'a.b' addresses channel a.b
    rather than an event called 'b' on channel a.
    """
    address = walk(channel, name, lookup_step)
    if channel_only and address.channel is not None and address.event_name is not None:
        child = address.channel.get_channel(address.event_name)
        if child is not None:
            return ResolvedAddress(child, None)
    return address
