"""Base types shared by the resolver, registry and channel tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from channel_emitter.channel import Channel


@dataclass(frozen=True, slots=True)
class ResolvedAddress:
    """Result of resolving a (possibly dotted) name against a channel."""

    channel: Channel | None
    event_name: str | None = None

    @property
    def found(self) -> bool:
        return self.channel is not None

    @property
    def is_channel_only(self) -> bool:
        """True when the address names a channel rather than an event on it."""
        return self.channel is not None and self.event_name is None


class ChannelEmitterError(Exception):
    """Base exception for channel-emitter."""

    def __init__(self, message: str, *, event_name: str | None = None) -> None:
        super().__init__(message)
        self.event_name = event_name


class InvalidListenerError(ChannelEmitterError, TypeError):
    """Raised when a listener that is not callable is registered."""


class MissingEventNameError(ChannelEmitterError, ValueError):
    """Raised when registering or firing without an event name."""
