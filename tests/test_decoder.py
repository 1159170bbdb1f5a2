"""Tests for the protocol tables and message decoder."""

import pytest

from humidi.midi import command_base, command_for_status, controller_for_number, decode
from humidi.protocols import (
    ControllerKind,
    MessageKind,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)


@pytest.mark.unit
class TestCommandTable:
    """Test status byte lookup."""

    @pytest.mark.parametrize(
        "kind,first,last",
        [
            (MessageKind.NOTE_OFF, 128, 143),
            (MessageKind.NOTE_ON, 144, 159),
            (MessageKind.CONTROL_CHANGE, 176, 191),
            (MessageKind.PITCH_BEND, 224, 239),
        ],
    )
    def test_ranges(self, kind, first, last):
        """Each kind owns exactly one 16-value status range."""
        assert command_base(kind) == first
        for status in range(first, last + 1):
            assert command_for_status(status) is kind
        assert command_for_status(first - 1) is not kind
        assert command_for_status(last + 1) is not kind

    @pytest.mark.parametrize("status", [0, 127, 160, 175, 192, 208, 223, 240, 248, 255])
    def test_unsupported(self, status):
        """Poly pressure, program change, channel pressure and system messages are unsupported."""
        assert command_for_status(status) is None

    def test_controller_table(self):
        """Only controller 64 has a meaning."""
        assert controller_for_number(64) is ControllerKind.SUSTAIN
        assert controller_for_number(1) is None
        assert controller_for_number(65) is None


@pytest.mark.unit
class TestDecodeNotes:
    """Test note on/off decoding."""

    @pytest.mark.parametrize("channel", range(16))
    def test_note_on(self, channel):
        """Note on with velocity yields NoteOn on status - 144."""
        message = decode([144 + channel, 60, 100])

        assert message.kind is MessageKind.NOTE_ON
        assert message.channel == channel
        assert message.event is MidiEvent.NOTE_ON
        assert message.payload == NoteOnEvent(note=60, velocity=100)

    @pytest.mark.parametrize("channel", range(16))
    def test_note_on_zero_velocity_is_note_off(self, channel):
        """Note on with velocity 0 is reclassified as note off."""
        message = decode([144 + channel, 60, 0])

        assert message.kind is MessageKind.NOTE_OFF
        assert message.channel == channel
        assert message.event is MidiEvent.NOTE_OFF
        assert message.payload == NoteOffEvent(note=60)

    @pytest.mark.parametrize("velocity", [0, 1, 64, 127])
    def test_note_off_ignores_velocity(self, velocity):
        """Note off yields NoteOff regardless of release velocity."""
        message = decode([128 + 3, 72, velocity])

        assert message.channel == 3
        assert message.event is MidiEvent.NOTE_OFF
        assert message.payload == NoteOffEvent(note=72)

    def test_note_off_without_velocity_byte(self):
        """Note off only needs the note byte."""
        message = decode([128, 72])
        assert message.payload == NoteOffEvent(note=72)

    def test_input_id_is_carried(self):
        """The input id travels with the decoded message."""
        message = decode([144, 60, 100], input_id="kbd-1")
        assert message.input_id == "kbd-1"
        assert message.is_note

    def test_accepts_bytes(self):
        """Raw bytes objects decode the same as lists."""
        assert decode(bytes([0x90, 60, 100])) == decode([0x90, 60, 100])


@pytest.mark.unit
class TestDecodePitchBend:
    """Test 14-bit pitch bend decoding."""

    def test_minimum(self):
        message = decode([224, 0, 0])
        assert message.payload == PitchBendEvent(value=-1.0)

    def test_center(self):
        """8192 (LSB 0, MSB 64) is exactly centre."""
        message = decode([224, 0, 64])
        assert message.payload.value == 0.0

    def test_maximum(self):
        message = decode([224, 127, 127])
        assert message.payload.value == pytest.approx(16383 / 8192 - 1)
        assert message.payload.value < 1.0

    def test_lsb_first(self):
        """First data byte is the LSB."""
        message = decode([224 + 2, 1, 64])
        assert message.channel == 2
        assert message.event is MidiEvent.PITCH_BEND
        assert message.payload.value == pytest.approx(1 / 8192)
        assert not message.is_note


@pytest.mark.unit
class TestDecodeControlChange:
    """Test control change decoding."""

    def test_sustain_on_boundary(self):
        """Value 64 switches sustain on."""
        message = decode([176, 64, 64])
        assert message.event is MidiEvent.SUSTAIN_ON
        assert message.payload == SustainEvent(value=64)
        assert message.controller is ControllerKind.SUSTAIN

    def test_sustain_off_boundary(self):
        """Value 63 switches sustain off."""
        message = decode([176, 64, 63])
        assert message.event is MidiEvent.SUSTAIN_OFF
        assert message.payload == SustainEvent(value=63)

    def test_sustain_channel(self):
        message = decode([176 + 15, 64, 127])
        assert message.channel == 15
        assert message.event is MidiEvent.SUSTAIN_ON

    def test_unhandled_controller(self):
        """Other controllers decode but produce no event."""
        message = decode([176, 1, 100])
        assert message is not None
        assert message.kind is MessageKind.CONTROL_CHANGE
        assert message.event is None
        assert message.payload is None
        assert message.controller is None


@pytest.mark.unit
class TestDecodeIgnored:
    """Test messages that decode to nothing."""

    @pytest.mark.parametrize(
        "data",
        [
            [],
            [0xF8],                 # clock
            [0xFE],                 # active sensing
            [0xF0, 0x7E, 0xF7],     # sysex
            [0xC0, 5],              # program change
            [0xA0, 60, 10],         # poly pressure
            [0xD0, 10],             # channel pressure
        ],
    )
    def test_unsupported(self, data):
        assert decode(data) is None

    @pytest.mark.parametrize(
        "data",
        [
            [0x90],             # no note
            [0x90, 60],         # no velocity
            [0xE0, 0],          # no MSB
            [0xB0, 64],         # no value
            [0x80],             # no note
            [0x90, 128, 100],   # note out of range
            [0x90, 60, 200],    # velocity out of range
        ],
    )
    def test_malformed(self, data):
        assert decode(data) is None
