"""
The humidi engine: device input session, subscriptions and stuck note recovery.

Architecture Overview
=====================

::

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         USER APPLICATION                            │
    │           engine.on(MidiEvent.NOTE_ON, handler, channel=0)          │
    └────────────────────────────┬────────────────────────────────────────┘
                                 │
    ┌────────────────────────────┴────────────────────────────────────────┐
    │                          HuMidi                                     │
    │                                                                     │
    │  process_message(data, input_id)                                    │
    │    global gate → input gate → decode → NoteTracker → registry.emit  │
    │                                                                     │
    │  handle_state_change(descriptor)                                    │
    │    connect:    update input → bind raw stream → INPUT_CONNECTED     │
    │    disconnect: update input → synthetic NOTE_OFFs → INPUT_DISCONN.  │
    └──────────┬─────────────────┬────────────────────────┬───────────────┘
               │                 │                        │
       ┌───────────────┐ ┌──────────────┐      ┌─────────────────────┐
       │ decoder       │ │ NoteTracker  │      │ SubscriptionRegistry│
       └───────────────┘ └──────────────┘      └─────────────────────┘

Threading
---------

Raw messages and connectivity changes arrive on backend threads. Every
entry point runs under one re-entrant lock, which also guards the registry,
so decode → track → emit for one message completes before the next message
or subscription change is processed. Handlers may call back into the engine
(e.g. unsubscribe themselves) from inside a callback.

Usage Example
-------------

.. code-block:: python

    engine = HuMidi(access=MidoAccess())
    engine.request_access()
    engine.on(MidiEvent.NOTE_ON, lambda e: print(e.note, e.velocity))
"""

import logging
from collections.abc import Sequence
from threading import RLock
from typing import Any

from humidi.core.registry import Handler, SubscriptionRegistry
from humidi.core.tracker import NoteTracker
from humidi.devices.input import DeviceDescriptor, MidiInput, MidiInputInfo
from humidi.exceptions import MidiAccessDeniedError, MidiAccessError
from humidi.midi.access import AccessGrant, MidiAccess
from humidi.midi.decoder import decode
from humidi.protocols.events import (
    ALL_CHANNELS,
    AccessStatus,
    InputEvent,
    MessageKind,
    MidiEvent,
    NoteOffEvent,
)

logger = logging.getLogger(__name__)


class HuMidi:
    """
    MIDI input engine.

    Owns one subscription registry, one note tracker and one input map.
    Independent engines can coexist (e.g. one per test).
    """

    # ================================================================
    # INITIALIZATION
    # ================================================================

    def __init__(self, access: MidiAccess | None = None):
        """
        Initialize the engine.

        Args:
            access: Device access backend used by request_access().
                    If None, request_access() uses a MidoAccess with defaults.
        """
        self._access = access
        self._lock = RLock()
        self._registry = SubscriptionRegistry(lock=self._lock)
        self._tracker = NoteTracker()
        self._inputs: dict[str, MidiInput] = {}
        self._enabled = True
        self._access_status = AccessStatus.UNREQUESTED
        self._grant: AccessGrant | None = None

    # ================================================================
    # ACCESS
    # ================================================================

    def request_access(self) -> None:
        """
        Request access to MIDI devices and bind every available input.

        Only the first call does anything; once access was accepted or denied,
        further calls return immediately.

        Raises:
            MidiAccessDeniedError: When access is refused or the backend is unavailable
        """
        with self._lock:
            if self._access_status is not AccessStatus.UNREQUESTED:
                return

            try:
                grant = self._get_access().request()
            except MidiAccessError as e:
                self._access_status = AccessStatus.DENIED
                logger.error(f"MIDI access denied: {e.technical_message}")
                if isinstance(e, MidiAccessDeniedError):
                    raise
                raise MidiAccessDeniedError(e.technical_message) from e

            self._access_status = AccessStatus.ACCEPTED
            self._enabled = True
            self._grant = grant

            for descriptor in grant.inputs():
                self._bind_input(self._register_input(descriptor))
            grant.on_state_change(self.handle_state_change)

            logger.info(f"MIDI access granted, {len(self._inputs)} input(s) available")

    def has_permission(self) -> bool:
        """
        Check if MIDI access would be granted, without requesting it.

        Returns:
            True if granted, False otherwise (including when the check fails)
        """
        try:
            return bool(self._get_access().has_permission())
        except Exception as e:
            logger.debug(f"Permission query failed: {e}")
            return False

    def get_access_status(self) -> AccessStatus:
        """Get the current access status."""
        return self._access_status

    def _get_access(self) -> MidiAccess:
        if self._access is None:
            from humidi.midi.input_manager import MidoAccess

            self._access = MidoAccess()
        return self._access

    # ================================================================
    # SUBSCRIPTIONS
    # ================================================================

    def on(self, event: MidiEvent, handler: Handler, channel: int = ALL_CHANNELS) -> None:
        """
        Register an event handler.

        Args:
            event: Event to listen for
            handler: Function receiving the event payload
            channel: MIDI channel 0-15, or ALL_CHANNELS (default) for every channel

        Example:
            ```python
            engine.on(MidiEvent.NOTE_ON, lambda e: print(e.note), channel=1)
            engine.on("inputconnected", lambda e: print(e.input.name))
            ```
        """
        self._registry.on(event, handler, channel)

    def off(self, event: MidiEvent, handler: Handler, channel: int = ALL_CHANNELS) -> None:
        """Remove an event handler registered with the same event and channel."""
        self._registry.off(event, handler, channel)

    def unsubscribe_channel(self, channel: int) -> None:
        """Remove all handlers registered for a specific channel."""
        self._registry.unsubscribe_channel(channel)

    # ================================================================
    # GATES & DEVICES
    # ================================================================

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable all MIDI processing."""
        with self._lock:
            self._enabled = enabled
        logger.info(f"MIDI processing {'enabled' if enabled else 'disabled'}")

    def is_enabled(self) -> bool:
        """Check if MIDI processing is enabled."""
        return self._enabled

    def get_inputs(self) -> list[MidiInput]:
        """Get every input seen so far, connected or not."""
        with self._lock:
            return list(self._inputs.values())

    def get_input(self, input_id: str) -> MidiInput | None:
        """Get an input by id."""
        with self._lock:
            return self._inputs.get(input_id)

    def active_notes(self, channel: int | None = None) -> dict[int, set[int]]:
        """Get the currently sounding notes across all inputs."""
        with self._lock:
            return self._tracker.active_notes(channel)

    # ================================================================
    # MESSAGE PROCESSING
    # ================================================================

    def process_message(self, data: Sequence[int], input_id: str | None = None) -> None:
        """
        Decode a raw message and emit the resulting event.

        Args:
            data: Raw message bytes, status byte first
            input_id: Id of the input the message came from, if known
        """
        with self._lock:
            if not self._enabled:
                return

            if input_id is not None:
                midi_input = self._inputs.get(input_id)
                if midi_input is not None and not midi_input.is_enabled():
                    return

            message = decode(data, input_id)
            if message is None:
                logger.debug(f"Ignoring unsupported MIDI message: {list(data)}")
                return

            if message.is_note:
                if message.kind is MessageKind.NOTE_ON:
                    self._tracker.note_on(message.channel, message.payload.note, input_id)
                else:
                    self._tracker.note_off(message.channel, message.payload.note, input_id)

            if message.event is None:
                return

            self._emit(message.event, message.payload, message.channel)

    def handle_state_change(self, descriptor: DeviceDescriptor) -> None:
        """
        Handle a port connectivity change reported by the access backend.

        Args:
            descriptor: Descriptor of the port that changed state
        """
        if descriptor.type != "input":
            return

        with self._lock:
            if descriptor.state == "connected":
                midi_input = self._register_input(descriptor)
                self._bind_input(midi_input)
                logger.info(f"MIDI input connected: {midi_input.name} ({midi_input.id})")
                self._emit(MidiEvent.INPUT_CONNECTED, InputEvent(input=midi_input))
                return

            midi_input = self._register_input(descriptor)
            logger.info(f"MIDI input disconnected: {midi_input.name} ({midi_input.id})")
            self.handle_disconnect(midi_input.id)
            self._emit(MidiEvent.INPUT_DISCONNECTED, InputEvent(input=midi_input))

    def handle_disconnect(self, input_id: str) -> list[tuple[int, int]]:
        """
        Release every note still held on an input.

        Emits one synthetic NOTE_OFF per sounding note, on that note's channel.
        Calling it again for the same input emits nothing.

        Args:
            input_id: Id of the disconnected input

        Returns:
            List of (channel, note) pairs that were released
        """
        with self._lock:
            released = self._tracker.release_input(input_id)
            if released:
                logger.warning(
                    f"Releasing {len(released)} stuck note(s) from disconnected input {input_id}"
                )
            for channel, note in released:
                self._emit(MidiEvent.NOTE_OFF, NoteOffEvent(note=note), channel)
            return released

    def _emit(self, event: MidiEvent, payload: Any, channel: int = ALL_CHANNELS) -> None:
        self._registry.emit(event, payload, channel)

    def _register_input(self, descriptor: DeviceDescriptor) -> MidiInput:
        """
        Create or update the input for a descriptor.

        Note: Should be called with _lock held.
        """
        info = MidiInputInfo.from_descriptor(descriptor)
        midi_input = self._inputs.get(info.id)
        if midi_input is None:
            midi_input = MidiInput(info)
            self._inputs[info.id] = midi_input
        else:
            midi_input.state = info.state
        return midi_input

    def _bind_input(self, midi_input: MidiInput) -> None:
        """Route the input's raw messages into process_message."""
        if self._grant is None:
            return
        input_id = midi_input.id

        def on_raw_message(data: Sequence[int]) -> None:
            self.process_message(data, input_id)

        self._grant.register_message_callback(input_id, on_raw_message)

    # ================================================================
    # LIFECYCLE MANAGEMENT
    # ================================================================

    def reset(self) -> None:
        """
        Reset the engine to its initial state.

        Clears handlers, note tracking and inputs, re-enables processing,
        resets the access status and releases any access grant.
        Intended for tests; access can be requested again afterwards.
        """
        self.close()
        with self._lock:
            self._registry.clear()
            self._tracker.clear()
            self._inputs.clear()
            self._enabled = True
            self._access_status = AccessStatus.UNREQUESTED
        logger.debug("HuMidi reset")

    def close(self) -> None:
        """Release the access grant, closing host ports."""
        with self._lock:
            grant, self._grant = self._grant, None
        if grant is not None:
            grant.close()

    def __enter__(self):
        self.request_access()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
