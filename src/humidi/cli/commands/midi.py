"""MIDI command implementations."""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import click
import mido

from humidi.core import HuMidi
from humidi.exceptions import (
    ErrorContext,
    HuMidiError,
    format_error_for_display,
    wrap_backend_error,
)
from humidi.midi import MidoAccess
from humidi.models import HuMidiConfig
from humidi.protocols import (
    ALL_CHANNELS,
    InputEvent,
    MidiEvent,
    NoteOffEvent,
    NoteOnEvent,
    PitchBendEvent,
    SustainEvent,
)

logger = logging.getLogger(__name__)

_INPUT_EVENTS = (MidiEvent.INPUT_CONNECTED, MidiEvent.INPUT_DISCONNECTED)


@click.group(name="midi")
def midi_group():
    """MIDI device commands."""
    pass


@midi_group.command(name="list")
def list_midi():
    """List available MIDI input ports."""
    try:
        ports = mido.get_input_names()
    except Exception as e:
        _fail(wrap_backend_error(e))
        return

    click.echo("MIDI Input Ports:\n")
    if not ports:
        click.echo("  No MIDI input ports found.")
        return
    for i, port in enumerate(ports):
        click.echo(f"  [{i}] {port}")


def format_event(event: MidiEvent, payload: Any, channel: int) -> str:
    """
    Render one event as a monitor line.

    Args:
        event: Event kind
        payload: Event payload
        channel: Channel the handler was subscribed on

    Returns:
        Human-readable description
    """
    scope = "all" if channel == ALL_CHANNELS else f"ch{channel:<2}"

    match payload:
        case NoteOnEvent(note=note, velocity=velocity):
            detail = f"note={note} velocity={velocity}"
        case NoteOffEvent(note=note):
            detail = f"note={note}"
        case PitchBendEvent(value=value):
            detail = f"value={value:+.4f}"
        case SustainEvent(value=value):
            detail = f"value={value}"
        case InputEvent(input=midi_input):
            detail = f"{midi_input.name} [{midi_input.state}]"
        case _:
            detail = repr(payload)

    return f"{scope} {event.value:<17} {detail}"


def subscribe_monitor(engine: HuMidi, events: list[MidiEvent], channels: list[int]) -> None:
    """
    Subscribe echo handlers for the monitor.

    Channel events are subscribed per channel so each line shows its channel;
    input lifecycle events are only emitted on the wildcard scope.
    """
    channel_scopes = channels or list(range(16))

    def make_handler(event: MidiEvent, channel: int):
        def handler(payload):
            timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            click.echo(f"[{timestamp}] {format_event(event, payload, channel)}")

        return handler

    for event in events:
        if event in _INPUT_EVENTS:
            engine.on(event, make_handler(event, ALL_CHANNELS))
            continue
        for channel in channel_scopes:
            engine.on(event, make_handler(event, channel), channel)


@midi_group.command(name="monitor")
@click.option(
    "--channel",
    "-c",
    "channels",
    type=click.IntRange(0, 15),
    multiple=True,
    help="Only show events on this channel (repeatable, default: all)",
)
@click.option(
    "--event",
    "-e",
    "events",
    type=click.Choice([e.value for e in MidiEvent], case_sensitive=False),
    multiple=True,
    help="Only show this event (repeatable, default: all)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.humidi/config.json)",
)
def monitor_midi(channels: tuple[int, ...], events: tuple[str, ...], config_path: Optional[Path]):
    """
    Monitor MIDI inputs and print decoded events.

    Opens every input accepted by the configured port filter, follows devices
    being plugged and unplugged, and prints the decoded events.

    Press Ctrl+C to stop monitoring.
    """
    try:
        config = HuMidiConfig.load_or_default(config_path)
    except HuMidiError as e:
        _fail(e)
        return

    selected_events = [MidiEvent(e) for e in events] or list(config.events)
    selected_channels = list(channels) or list(config.channels)

    engine = HuMidi(access=MidoAccess(config.port_filter, config.poll_interval))
    subscribe_monitor(engine, selected_events, selected_channels)

    try:
        engine.request_access()
    except HuMidiError as e:
        _fail(e)
        return

    engine.set_enabled(config.enabled)
    inputs = engine.get_inputs()
    for midi_input in inputs:
        if midi_input.name in config.disabled_inputs:
            midi_input.disable()

    click.echo(f"Monitoring {len(inputs)} MIDI input(s):")
    for midi_input in inputs:
        suffix = "" if midi_input.is_enabled() else " (disabled)"
        click.echo(f"  - {midi_input.name}{suffix}")
    click.echo("\nPress Ctrl+C to stop\n")

    try:
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        click.echo("\n\nStopping monitor...")
    finally:
        with ErrorContext("close MIDI ports", logger, re_raise=False):
            engine.close()


def _fail(error: Exception) -> None:
    """Show an error with its recovery hint and exit with status 1."""
    logger.error(f"Command failed: {error}")
    user_message, recovery_hint = format_error_for_display(error)
    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    sys.exit(1)
