"""Channel-scoped subscription registry.

This module provides the SubscriptionRegistry, a two-level mapping
``{channel -> {event -> handlers}}`` with a reserved wildcard channel
(ALL_CHANNELS). It handles thread-safe registration, unregistration and
fan-out of events to handlers.

Fan-out rule:
    - An emission on a concrete channel reaches that channel's handlers,
      then the wildcard handlers.
    - An emission on the wildcard channel reaches the wildcard handlers only.

So a wildcard handler sees every emission exactly once, and a handler
registered on channel 5 only sees emissions on channel 5.
"""

from __future__ import annotations

import inspect
import logging
from threading import RLock
from typing import Any

from humidi.protocols.events import ALL_CHANNELS, MidiEvent
from humidi.protocols.observers import EventHandler

logger = logging.getLogger(__name__)

Handler = EventHandler[Any]


def _same_handler(a: Handler, b: Handler) -> bool:
    """Identity match; bound methods match when bound to the same object."""
    if a is b:
        return True
    return inspect.ismethod(a) and inspect.ismethod(b) and a == b


def _index_of(handlers: list[Handler], handler: Handler) -> int | None:
    for i, registered in enumerate(handlers):
        if _same_handler(registered, handler):
            return i
    return None


class SubscriptionRegistry:
    """
    Registry of event handlers keyed by channel and event kind.

    Handler lists keep insertion order, so delivery within one (channel, event)
    pair is deterministic. Handlers are compared by identity, never by
    ``__eq__`` or ``__hash__``: unhashable callables are accepted, and two
    distinct handlers that compare equal are both kept. A bound method matches
    another bound method of the same function on the same object, so
    ``off(event, obj.method)`` undoes ``on(event, obj.method)``.

    Thread Safety:
        Mutations and handler snapshots happen under the lock. Handlers are
        called after the snapshot is taken, so a handler may subscribe or
        unsubscribe during emission without affecting the current fan-out.

    Error Handling:
        Exceptions raised by handlers are NOT caught here; they propagate to
        the caller of ``emit``.
    """

    def __init__(self, lock: RLock | None = None):
        """
        Initialize the registry.

        Args:
            lock: Optional re-entrant lock to share with an owning engine.
                  If None, creates a new lock.
        """
        self._handlers: dict[int, dict[MidiEvent, list[Handler]]] = {}
        self._lock = lock or RLock()

    def on(self, event: MidiEvent, handler: Handler, channel: int = ALL_CHANNELS) -> None:
        """
        Register a handler (idempotent - won't add duplicates).

        Args:
            event: Event kind to subscribe to
            handler: Callable receiving the event payload
            channel: MIDI channel 0-15, or ALL_CHANNELS for every channel
        """
        event = MidiEvent(event)
        with self._lock:
            handlers = self._handlers.setdefault(channel, {}).setdefault(event, [])
            if _index_of(handlers, handler) is not None:
                logger.debug(f"Handler already registered for {event.value} on channel {channel}")
                return
            handlers.append(handler)
            logger.debug(f"Registered handler for {event.value} on channel {channel}: {handler}")

    def off(self, event: MidiEvent, handler: Handler, channel: int = ALL_CHANNELS) -> None:
        """
        Unregister a handler. Unknown handlers are ignored.

        Args:
            event: Event kind the handler was registered for
            handler: The handler to remove
            channel: Channel the handler was registered on
        """
        event = MidiEvent(event)
        with self._lock:
            channel_handlers = self._handlers.get(channel)
            if not channel_handlers:
                return
            handlers = channel_handlers.get(event)
            if handlers is None:
                return
            index = _index_of(handlers, handler)
            if index is None:
                return
            del handlers[index]
            if not handlers:
                del channel_handlers[event]
            if not channel_handlers:
                del self._handlers[channel]
            logger.debug(f"Unregistered handler for {event.value} on channel {channel}: {handler}")

    def unsubscribe_channel(self, channel: int) -> None:
        """
        Remove every handler registered on a channel.

        Wildcard handlers are untouched unless ``channel`` is ALL_CHANNELS itself.

        Args:
            channel: Channel to clear
        """
        with self._lock:
            removed = self._handlers.pop(channel, None)
        if removed:
            logger.debug(f"Unsubscribed all handlers on channel {channel}")

    def handlers(self, event: MidiEvent, channel: int = ALL_CHANNELS) -> list[Handler]:
        """Get a snapshot of the handlers registered for (channel, event)."""
        event = MidiEvent(event)
        with self._lock:
            return list(self._handlers.get(channel, {}).get(event, ()))

    def emit(self, event: MidiEvent, payload: Any, channel: int = ALL_CHANNELS) -> None:
        """
        Deliver a payload to the matching handlers.

        Args:
            event: Event kind being emitted
            payload: Event payload passed to each handler
            channel: Channel the event occurred on, or ALL_CHANNELS
        """
        with self._lock:
            targets = self.handlers(event, channel)
            if channel != ALL_CHANNELS:
                targets.extend(self.handlers(event, ALL_CHANNELS))

        for handler in targets:
            handler(payload)

    def clear(self) -> None:
        """Remove every handler on every channel."""
        with self._lock:
            self._handlers.clear()

    def __len__(self) -> int:
        """Total number of (channel, event, handler) registrations."""
        with self._lock:
            return sum(
                len(handlers)
                for channel_handlers in self._handlers.values()
                for handlers in channel_handlers.values()
            )
