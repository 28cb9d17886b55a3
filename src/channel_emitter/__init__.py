"""Hierarchical publish/subscribe channels with upward emit and downward broadcast."""

from channel_emitter.base import (
    ChannelEmitterError,
    InvalidListenerError,
    MissingEventNameError,
    ResolvedAddress,
)
from channel_emitter.channel import Channel, create_root
from channel_emitter.config import Settings
from channel_emitter.registry import ListenerRegistry

__all__ = [
    "Channel",
    "ChannelEmitterError",
    "InvalidListenerError",
    "ListenerRegistry",
    "MissingEventNameError",
    "ResolvedAddress",
    "Settings",
    "create_root",
]
