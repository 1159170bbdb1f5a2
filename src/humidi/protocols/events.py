"""Domain events for the subscription registry.

This module defines everything a subscriber can receive:
- MIDI events: the subscribable event kinds (note, pitch bend, sustain, device lifecycle)
- Message kinds: the channel-voice message families recognised on the wire
- Controller kinds: the continuous controllers given a semantic meaning
- Payloads: one immutable dataclass per event kind
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from humidi.devices.input import MidiInput

# Wildcard channel scope, used both to subscribe to and emit on every channel
ALL_CHANNELS = -1


class MidiEvent(str, Enum):
    """Events a handler can subscribe to."""

    NOTE_ON = "noteon"                          # Key pressed (velocity > 0)
    NOTE_OFF = "noteoff"                        # Key released, or synthetic release
    PITCH_BEND = "pitchbend"                    # Pitch wheel moved
    SUSTAIN_ON = "sustainon"                    # Sustain pedal pressed (value >= 64)
    SUSTAIN_OFF = "sustainoff"                  # Sustain pedal released (value < 64)
    INPUT_CONNECTED = "inputconnected"          # Input device connected
    INPUT_DISCONNECTED = "inputdisconnected"    # Input device disconnected


class MessageKind(str, Enum):
    """Channel-voice message families understood by the decoder."""

    NOTE_OFF = "noteoff"
    NOTE_ON = "noteon"
    CONTROL_CHANGE = "controlchange"
    PITCH_BEND = "pitchbend"


class ControllerKind(str, Enum):
    """Continuous controllers with a semantic meaning."""

    SUSTAIN = "sustain"


class AccessStatus(str, Enum):
    """State of the one-shot device access handshake."""

    UNREQUESTED = "unrequested"
    ACCEPTED = "accepted"
    DENIED = "denied"


@dataclass(frozen=True, slots=True)
class NoteOnEvent:
    """A note started sounding."""

    note: int
    velocity: int


@dataclass(frozen=True, slots=True)
class NoteOffEvent:
    """A note stopped sounding."""

    note: int


@dataclass(frozen=True, slots=True)
class PitchBendEvent:
    """Pitch wheel position, from -1.0 (full down) to just under +1.0, 0.0 at centre."""

    value: float


@dataclass(frozen=True, slots=True)
class SustainEvent:
    """Sustain pedal change carrying the raw controller value (0-127)."""

    value: int


@dataclass(frozen=True, slots=True)
class InputEvent:
    """An input device was connected or disconnected."""

    input: MidiInput


EventPayload = Union[NoteOnEvent, NoteOffEvent, PitchBendEvent, SustainEvent, InputEvent]
