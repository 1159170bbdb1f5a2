"""humidi: human-friendly MIDI input for Python."""

__version__ = "0.1.0"

# Core engine
from .core import HuMidi

# Devices
from .devices import DeviceDescriptor, MidiInput, MidiInputInfo

# Events
from .protocols import (
    ALL_CHANNELS,
    AccessStatus,
    InputEvent,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)

__all__ = [
    "ALL_CHANNELS",
    "AccessStatus",
    "DeviceDescriptor",
    "HuMidi",
    "InputEvent",
    "MidiEvent",
    "MidiInput",
    "MidiInputInfo",
    "NoteOffEvent",
    "NoteOnEvent",
    "PitchBendEvent",
    "SustainEvent",
]
