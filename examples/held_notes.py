"""Example: show held notes and recover from unplugged keyboards.

This example demonstrates:
- Requesting MIDI access and listing the inputs found
- Channel-scoped and all-channel handlers
- Stuck note recovery: unplug a keyboard while holding keys and the
  engine releases those notes with synthetic note offs
"""

import logging
import time

from humidi import HuMidi, MidiEvent
from humidi.exceptions import MidiAccessDeniedError
from humidi.midi import MidoAccess

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Run the held notes example."""
    engine = HuMidi(access=MidoAccess(poll_interval=1.0))

    def show_held(_payload):
        held = engine.active_notes()
        summary = ", ".join(f"ch{ch}: {sorted(notes)}" for ch, notes in sorted(held.items()))
        logger.info(f"Held notes: {summary or 'none'}")

    engine.on(MidiEvent.NOTE_ON, show_held)
    engine.on(MidiEvent.NOTE_OFF, show_held)

    # Drums on channel 10 (index 9)
    engine.on(MidiEvent.NOTE_ON, lambda e: logger.info(f"Drum hit {e.note}"), channel=9)

    engine.on(MidiEvent.INPUT_CONNECTED, lambda e: logger.info(f"Plugged in: {e.input.name}"))
    engine.on(MidiEvent.INPUT_DISCONNECTED, lambda e: logger.info(f"Unplugged: {e.input.name}"))

    try:
        engine.request_access()
    except MidiAccessDeniedError as e:
        logger.error(e.get_full_message())
        return

    for midi_input in engine.get_inputs():
        logger.info(f"Listening to {midi_input.name}")

    logger.info("Hold some keys, then unplug the keyboard. Ctrl+C to stop.")
    try:
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        pass
    finally:
        engine.close()


if __name__ == "__main__":
    main()
