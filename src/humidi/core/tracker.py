"""Note-liveness tracking for stuck note prevention.

Input devices can be unplugged while keys are held down. Their note off
messages then never arrive and, without intervention, the notes would stay
sounding forever. The NoteTracker records which notes are sounding so the
engine can release them when a device disappears.

Tracking is double-keyed:
    - globally: ``{channel -> {notes}}`` across all devices
    - per input: ``{input_id -> {channel -> {notes}}}``

Releasing an input only touches that input's own notes, so two devices
holding the same (channel, note) don't silence each other. Empty sets and
maps are pruned eagerly: absence means "nothing sounding".
"""

import logging

logger = logging.getLogger(__name__)

NoteMap = dict[int, set[int]]


def _add(notes: NoteMap, channel: int, note: int) -> None:
    notes.setdefault(channel, set()).add(note)


def _discard(notes: NoteMap, channel: int, note: int) -> None:
    channel_notes = notes.get(channel)
    if channel_notes is None:
        return
    channel_notes.discard(note)
    if not channel_notes:
        del notes[channel]


class NoteTracker:
    """
    Records currently sounding notes, globally and per input device.

    Not thread-safe on its own; the owning engine serializes access.
    """

    def __init__(self):
        self._active: NoteMap = {}
        self._active_by_input: dict[str, NoteMap] = {}

    def note_on(self, channel: int, note: int, input_id: str | None = None) -> None:
        """
        Record a note as sounding.

        Args:
            channel: MIDI channel 0-15
            note: MIDI note number 0-127
            input_id: Input the note came from, if known
        """
        _add(self._active, channel, note)
        if input_id is not None:
            _add(self._active_by_input.setdefault(input_id, {}), channel, note)

    def note_off(self, channel: int, note: int, input_id: str | None = None) -> None:
        """
        Record a note as released. Unknown notes are ignored.

        Args:
            channel: MIDI channel 0-15
            note: MIDI note number 0-127
            input_id: Input the note came from, if known
        """
        input_notes = self._active_by_input.get(input_id) if input_id is not None else None
        if input_notes is not None:
            _discard(input_notes, channel, note)
            if not input_notes:
                del self._active_by_input[input_id]
        if input_id is None or not self._held_elsewhere(channel, note):
            _discard(self._active, channel, note)

    def release_input(self, input_id: str) -> list[tuple[int, int]]:
        """
        Forget every note still sounding on an input.

        Safe to call repeatedly: once an input has been released, later
        calls return an empty list.

        Args:
            input_id: Input being disconnected

        Returns:
            Sorted list of (channel, note) pairs that were still sounding
        """
        input_notes = self._active_by_input.pop(input_id, None)
        if not input_notes:
            return []

        released = sorted(
            (channel, note) for channel, notes in input_notes.items() for note in notes
        )
        for channel, note in released:
            # Another input may still be holding the same note
            if not self._held_elsewhere(channel, note):
                _discard(self._active, channel, note)

        logger.debug(f"Released {len(released)} sounding note(s) for input {input_id}")
        return released

    def _held_elsewhere(self, channel: int, note: int) -> bool:
        return any(note in notes.get(channel, ()) for notes in self._active_by_input.values())

    def active_notes(self, channel: int | None = None) -> dict[int, set[int]]:
        """
        Get sounding notes across all inputs.

        Args:
            channel: Restrict to one channel (None = all channels)

        Returns:
            Copy of the ``{channel -> {notes}}`` map
        """
        if channel is not None:
            notes = self._active.get(channel)
            return {channel: set(notes)} if notes else {}
        return {ch: set(notes) for ch, notes in self._active.items()}

    def active_notes_for(self, input_id: str) -> dict[int, set[int]]:
        """Get a copy of the sounding notes of one input."""
        return {ch: set(notes) for ch, notes in self._active_by_input.get(input_id, {}).items()}

    def tracked_inputs(self) -> list[str]:
        """Get ids of inputs with at least one sounding note."""
        return list(self._active_by_input)

    def clear(self) -> None:
        """Forget all sounding notes."""
        self._active.clear()
        self._active_by_input.clear()
