"""Device access protocols.

The engine never talks to a MIDI library directly. It consumes a
MidiAccess, which performs the one-shot access handshake, and the
AccessGrant it returns, which enumerates inputs and wires raw message and
connectivity callbacks. ``humidi.midi.input_manager`` provides the mido
implementation; tests provide fakes.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from humidi.devices.input import DeviceDescriptor

RawMessageCallback = Callable[[Sequence[int]], None]
StateChangeCallback = Callable[[DeviceDescriptor], None]


@runtime_checkable
class AccessGrant(Protocol):
    """Handle to granted MIDI access."""

    def inputs(self) -> list[DeviceDescriptor]:
        """Get descriptors of the inputs available when access was granted."""
        ...

    def register_message_callback(self, input_id: str, callback: RawMessageCallback) -> None:
        """
        Route raw messages of one input to a callback.

        Registering again for the same input replaces the previous callback.

        Args:
            input_id: Id of the input, as reported in its descriptor
            callback: Receives the raw message bytes, status byte first
        """
        ...

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """
        Register the callback for port connectivity changes.

        Args:
            callback: Receives the descriptor of the port that changed state
        """
        ...

    def close(self) -> None:
        """Stop delivering callbacks and release host resources."""
        ...


@runtime_checkable
class MidiAccess(Protocol):
    """Performs the host access handshake."""

    def request(self) -> AccessGrant:
        """
        Request access to MIDI devices.

        Returns:
            AccessGrant for the granted session

        Raises:
            MidiAccessError: If the host refuses or the backend is unavailable
        """
        ...

    def has_permission(self) -> bool:
        """
        Check whether access would be granted, without requesting it.

        Returns:
            True if granted; False if not, or if the check itself fails
        """
        ...
