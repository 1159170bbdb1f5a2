"""MIDI wire protocol decoding and device access."""

from .access import AccessGrant, MidiAccess
from .commands import command_base, command_for_status
from .controllers import controller_for_number
from .decoder import DecodedMessage, decode
from .input_manager import MidiInputManager, MidoAccess

__all__ = [
    "AccessGrant",
    "DecodedMessage",
    "MidiAccess",
    "MidiInputManager",
    "MidoAccess",
    "command_base",
    "command_for_status",
    "controller_for_number",
    "decode",
]
