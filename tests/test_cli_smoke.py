"""Smoke tests for CLI commands.

Tests that CLI commands parse correctly and don't crash. Uses Click's
CliRunner, with mido and logging setup patched out.
"""

import json
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from humidi.cli.commands.midi import format_event, subscribe_monitor
from humidi.cli.main import cli, resolve_log_path
from humidi.devices import MidiInput, MidiInputInfo
from humidi.protocols import (
    ALL_CHANNELS,
    InputEvent,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_log_files():
    """Keep CLI invocations from writing log files."""
    with patch("humidi.cli.main.setup_logging"):
        yield


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "human-friendly MIDI input" in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    @pytest.mark.parametrize(
        "args",
        [
            ["midi", "--help"],
            ["midi", "list", "--help"],
            ["midi", "monitor", "--help"],
            ["config", "--help"],
            ["config", "show", "--help"],
        ],
    )
    def test_subcommand_help(self, runner, args):
        result = runner.invoke(cli, args)
        assert result.exit_code == 0

    def test_monitor_rejects_bad_channel(self, runner):
        result = runner.invoke(cli, ["midi", "monitor", "--channel", "16"])
        assert result.exit_code != 0

    def test_monitor_rejects_bad_event(self, runner):
        result = runner.invoke(cli, ["midi", "monitor", "--event", "aftertouch"])
        assert result.exit_code != 0


@pytest.mark.integration
class TestMidiCommands:
    """Test midi commands with mido patched."""

    def test_list(self, runner):
        with patch("humidi.cli.commands.midi.mido.get_input_names") as get_names:
            get_names.return_value = ["Keystation 49", "Digital Piano"]
            result = runner.invoke(cli, ["midi", "list"])

        assert result.exit_code == 0
        assert "[0] Keystation 49" in result.output
        assert "[1] Digital Piano" in result.output

    def test_list_empty(self, runner):
        with patch("humidi.cli.commands.midi.mido.get_input_names", return_value=[]):
            result = runner.invoke(cli, ["midi", "list"])

        assert result.exit_code == 0
        assert "No MIDI input ports found" in result.output

    def test_list_backend_failure(self, runner):
        with patch(
            "humidi.cli.commands.midi.mido.get_input_names", side_effect=OSError("no backend")
        ):
            result = runner.invoke(cli, ["midi", "list"])

        assert result.exit_code == 1
        assert "MIDI backend is not available" in result.output

    def test_monitor_access_denied(self, runner, temp_dir):
        with patch("humidi.midi.input_manager.mido.get_input_names", side_effect=OSError("nope")):
            result = runner.invoke(
                cli, ["midi", "monitor", "--config", str(temp_dir / "config.json")]
            )

        assert result.exit_code == 1
        assert "MIDI permissions denied" in result.output

    def test_monitor_until_interrupted(self, runner, temp_dir):
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"disabled_inputs": ["Digital Piano"]}))

        with patch("humidi.midi.input_manager.mido.get_input_names") as get_names, \
             patch("humidi.midi.input_manager.mido.open_input"), \
             patch("humidi.midi.input_manager.MidiInputManager.start"), \
             patch("humidi.cli.commands.midi.time.sleep", side_effect=KeyboardInterrupt):
            get_names.return_value = ["Keystation 49", "Digital Piano"]
            result = runner.invoke(cli, ["midi", "monitor", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "Monitoring 2 MIDI input(s)" in result.output
        assert "Digital Piano (disabled)" in result.output
        assert "Stopping monitor" in result.output


@pytest.mark.integration
class TestConfigCommands:
    """Test config commands against a temporary config file."""

    def test_show_creates_default(self, runner, temp_dir):
        path = temp_dir / "config.json"

        result = runner.invoke(cli, ["config", "show", "--config", str(path)])

        assert result.exit_code == 0
        assert "poll_interval: 2.0" in result.output
        assert path.exists()

    def test_show_field(self, runner, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"channels": [0, 9]}))

        result = runner.invoke(cli, ["config", "show", "--config", str(path), "-f", "channels"])

        assert result.exit_code == 0
        assert "channels: [0, 9]" in result.output

    def test_show_unknown_field(self, runner, temp_dir):
        result = runner.invoke(
            cli, ["config", "show", "--config", str(temp_dir / "c.json"), "-f", "nope"]
        )
        assert result.exit_code == 1

    def test_validate_ok(self, runner, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{}")

        result = runner.invoke(cli, ["config", "validate", "--config", str(path)])

        assert result.exit_code == 0
        assert "[OK]" in result.output

    def test_validate_missing(self, runner, temp_dir):
        result = runner.invoke(
            cli, ["config", "validate", "--config", str(temp_dir / "missing.json")]
        )
        assert result.exit_code == 1

    def test_validate_invalid(self, runner, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"channels": [42]}))

        result = runner.invoke(cli, ["config", "validate", "--config", str(path)])

        assert result.exit_code == 1
        assert "[FAIL]" in result.output

    def test_reset(self, runner, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"enabled": False}))

        result = runner.invoke(cli, ["config", "reset", "--config", str(path), "--yes"])

        assert result.exit_code == 0
        assert json.loads(path.read_text())["enabled"] is True

    def test_path(self, runner):
        result = runner.invoke(cli, ["config", "path"])
        assert result.exit_code == 0
        assert "config.json" in result.output


@pytest.mark.unit
class TestMonitorHelpers:
    """Test monitor formatting and subscription helpers."""

    def test_format_note_events(self):
        assert format_event(MidiEvent.NOTE_ON, NoteOnEvent(60, 100), 0).split() == [
            "ch0", "noteon", "note=60", "velocity=100"
        ]
        assert format_event(MidiEvent.NOTE_OFF, NoteOffEvent(60), 15).split() == [
            "ch15", "noteoff", "note=60"
        ]

    def test_format_controls(self):
        assert "value=+0.5000" in format_event(MidiEvent.PITCH_BEND, PitchBendEvent(0.5), 1)
        assert "value=64" in format_event(MidiEvent.SUSTAIN_ON, SustainEvent(64), 1)

    def test_format_input_event(self):
        midi_input = MidiInput(MidiInputInfo(id="kbd-1", name="Keystation 49"))
        line = format_event(MidiEvent.INPUT_CONNECTED, InputEvent(midi_input), ALL_CHANNELS)
        assert line.startswith("all")
        assert "Keystation 49 [connected]" in line

    def test_subscribe_all_channels(self):
        engine = Mock()

        subscribe_monitor(engine, [MidiEvent.NOTE_ON, MidiEvent.INPUT_CONNECTED], [])

        scopes = [c.args[2] if len(c.args) > 2 else ALL_CHANNELS for c in engine.on.call_args_list]
        assert scopes == list(range(16)) + [ALL_CHANNELS]

    def test_subscribe_selected_channels(self):
        engine = Mock()

        subscribe_monitor(engine, [MidiEvent.PITCH_BEND], [3, 7])

        assert [c.args[2] for c in engine.on.call_args_list] == [3, 7]


@pytest.mark.unit
class TestLogPath:
    """Test log file resolution."""

    def test_explicit_path_wins(self, temp_dir):
        assert resolve_log_path(True, temp_dir / "x.log") == temp_dir / "x.log"

    def test_debug_logs_to_cwd(self):
        assert resolve_log_path(True, None).name == "humidi-debug.log"

    def test_default(self):
        assert resolve_log_path(False, None).name == "humidi.log"
