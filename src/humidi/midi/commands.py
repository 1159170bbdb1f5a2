"""
Status byte lookup tables for channel-voice messages.

Status Bytes
============

The first byte of every MIDI message is the status byte. For channel-voice
messages its upper nibble selects the message family and its lower nibble the
channel (0-15)::

    0x93  =  1001 0011
             └┬─┘ └┬─┘
              │    └─ channel 3
              └─ note on

Each supported family therefore owns a contiguous block of 16 status values:

=================  ============  ==========
Message            Status bytes  Base
=================  ============  ==========
Note off           128 - 143     0x80
Note on            144 - 159     0x90
Control change     176 - 191     0xB0
Pitch bend         224 - 239     0xE0
=================  ============  ==========

Everything else (poly pressure, program change, channel pressure, system
messages) is not supported and looks up to None.

ref: https://midi.org/expanded-midi-1-0-messages-list
"""

from humidi.protocols.events import MessageKind

CHANNELS_PER_COMMAND = 16

COMMAND_BASES: dict[MessageKind, int] = {
    MessageKind.NOTE_OFF: 0x80,
    MessageKind.NOTE_ON: 0x90,
    MessageKind.CONTROL_CHANGE: 0xB0,
    MessageKind.PITCH_BEND: 0xE0,
}

COMMAND_TABLE: dict[int, MessageKind] = {
    base + channel: kind
    for kind, base in COMMAND_BASES.items()
    for channel in range(CHANNELS_PER_COMMAND)
}


def command_for_status(status: int) -> MessageKind | None:
    """
    Resolve a status byte to its message kind.

    Args:
        status: First byte of a raw MIDI message

    Returns:
        MessageKind, or None for unsupported status bytes
    """
    return COMMAND_TABLE.get(status)


def command_base(kind: MessageKind) -> int:
    """Get the status byte of channel 0 for a message kind."""
    return COMMAND_BASES[kind]
