"""
Raw MIDI message decoding.

Input Flow: Key Press → Your Handler
====================================

This module handles the first step of the input pipeline - turning the raw
bytes delivered by a host input port into a typed message::

    Hardware key press
          ↓
    [raw bytes: 0x93, 60, 100]
          ↓
    ┌──────────────────────────────────────┐
    │  decode(data)                        │
    │    kind = command_for_status(0x93)   │
    │         = NOTE_ON                    │
    │    channel = 0x93 - 0x90 = 3         │
    │    payload = NoteOnEvent(60, 100)    │
    └────────────┬─────────────────────────┘
                 ↓
    [DecodedMessage(kind=NOTE_ON, channel=3, event=NOTE_ON, ...)]
          ↓
    HuMidi tracks the note and emits it to subscribers

Key Concepts
------------

**Unsupported is not an error**: status bytes outside the four supported
families decode to None and are dropped silently, as are malformed messages
(missing or out-of-range data bytes).

**Velocity Handling**: some keyboards send note on with velocity 0 instead of
a real note off. The decoder reclassifies these as NOTE_OFF so subscribers
never see ``NoteOnEvent(velocity=0)``.

**Pitch bend**: the two data bytes form a 14-bit value, LSB first, which is
normalized so 0 maps to -1.0, 8192 to 0.0 and 16383 to just under +1.0.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from humidi.midi.commands import command_base, command_for_status
from humidi.midi.controllers import PEDAL_ON_THRESHOLD, controller_for_number
from humidi.protocols.events import (
    ControllerKind,
    EventPayload,
    MessageKind,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)

logger = logging.getLogger(__name__)

PITCH_BEND_CENTER = 8192
MAX_DATA_BYTE = 0x7F


@dataclass(frozen=True, slots=True)
class DecodedMessage:
    """
    A raw message resolved to kind, channel and payload.

    Attributes:
        kind: Message family (after note on/velocity 0 reclassification)
        channel: MIDI channel 0-15
        event: Event to emit, or None for recognised-but-unhandled messages
        payload: Payload for ``event``, or None when ``event`` is None
        controller: Semantic controller for control changes, if any
        input_id: Id of the input the message came from, if known
    """

    kind: MessageKind
    channel: int
    event: MidiEvent | None
    payload: EventPayload | None
    controller: ControllerKind | None = None
    input_id: str | None = None

    @property
    def is_note(self) -> bool:
        """True for note on/off messages, the ones the note tracker cares about."""
        return self.kind in (MessageKind.NOTE_ON, MessageKind.NOTE_OFF)


def _data_byte(data: Sequence[int], index: int) -> int | None:
    """Get a data byte, or None if it is missing or not a valid 7-bit value."""
    if len(data) <= index:
        return None
    value = data[index]
    if not 0 <= value <= MAX_DATA_BYTE:
        return None
    return value


def decode(data: Sequence[int], input_id: str | None = None) -> DecodedMessage | None:
    """
    Decode a raw channel-voice message.

    Args:
        data: Raw message bytes, status byte first (1-3 bytes)
        input_id: Id of the input the message came from

    Returns:
        DecodedMessage, or None if the message is unsupported or malformed
    """
    if not data:
        return None

    status = data[0]
    kind = command_for_status(status)
    if kind is None:
        return None

    channel = status - command_base(kind)
    data1 = _data_byte(data, 1)
    if data1 is None:
        logger.debug(f"Dropping truncated {kind.value} message: {list(data)}")
        return None

    if kind is MessageKind.NOTE_OFF:
        return _note_off(channel, data1, input_id)

    data2 = _data_byte(data, 2)
    if data2 is None:
        logger.debug(f"Dropping truncated {kind.value} message: {list(data)}")
        return None

    match kind:
        case MessageKind.NOTE_ON:
            if data2 == 0:
                return _note_off(channel, data1, input_id)
            return DecodedMessage(
                kind=kind,
                channel=channel,
                event=MidiEvent.NOTE_ON,
                payload=NoteOnEvent(note=data1, velocity=data2),
                input_id=input_id,
            )

        case MessageKind.PITCH_BEND:
            raw_value = (data2 << 7) | data1
            return DecodedMessage(
                kind=kind,
                channel=channel,
                event=MidiEvent.PITCH_BEND,
                payload=PitchBendEvent(value=(raw_value - PITCH_BEND_CENTER) / PITCH_BEND_CENTER),
                input_id=input_id,
            )

        case MessageKind.CONTROL_CHANGE:
            return _control_change(channel, data1, data2, input_id)


def _note_off(channel: int, note: int, input_id: str | None) -> DecodedMessage:
    return DecodedMessage(
        kind=MessageKind.NOTE_OFF,
        channel=channel,
        event=MidiEvent.NOTE_OFF,
        payload=NoteOffEvent(note=note),
        input_id=input_id,
    )


def _control_change(
    channel: int, control: int, value: int, input_id: str | None
) -> DecodedMessage:
    controller = controller_for_number(control)

    match controller:
        case ControllerKind.SUSTAIN:
            event = MidiEvent.SUSTAIN_ON if value >= PEDAL_ON_THRESHOLD else MidiEvent.SUSTAIN_OFF
            return DecodedMessage(
                kind=MessageKind.CONTROL_CHANGE,
                channel=channel,
                event=event,
                payload=SustainEvent(value=value),
                controller=controller,
                input_id=input_id,
            )
        case _:
            # Recognised message, but no handler for this controller
            return DecodedMessage(
                kind=MessageKind.CONTROL_CHANGE,
                channel=channel,
                event=None,
                payload=None,
                input_id=input_id,
            )
