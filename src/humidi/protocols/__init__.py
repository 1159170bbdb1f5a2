"""Event and handler definitions.

This package contains the types handlers deal with:
- Events: subscribable event kinds, wire message kinds, payload dataclasses
- Observers: the handler protocol
"""

from .events import (
    ALL_CHANNELS,
    AccessStatus,
    ControllerKind,
    EventPayload,
    InputEvent,
    MessageKind,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)
from .observers import EventHandler

__all__ = [
    "ALL_CHANNELS",
    "AccessStatus",
    "ControllerKind",
    "EventHandler",
    "EventPayload",
    "InputEvent",
    "MessageKind",
    # Events
    "MidiEvent",
    "NoteOffEvent",
    "NoteOnEvent",
    "PitchBendEvent",
    "SustainEvent",
]
