"""MIDI input device handles and descriptors."""

from .input import DeviceDescriptor, InputState, MidiInput, MidiInputInfo

__all__ = ["DeviceDescriptor", "InputState", "MidiInput", "MidiInputInfo"]
