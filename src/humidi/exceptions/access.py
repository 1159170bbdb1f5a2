"""Device access exceptions.

This module defines exceptions for the device access handshake:
- MidiAccessError: Base class for access errors
- MidiAccessDeniedError: The host or user refused access
- MidiBackendError: The MIDI backend cannot enumerate or open ports
"""

from .base import HuMidiError


class MidiAccessError(HuMidiError):
    """Access to MIDI devices could not be obtained."""
    pass


class MidiAccessDeniedError(MidiAccessError):
    """MIDI permissions were denied."""

    def __init__(self, reason: str | None = None):
        """
        Initialize access denied error.

        Args:
            reason: Why access was denied, as reported by the backend
        """
        tech_msg = "MIDI permissions denied"
        if reason:
            tech_msg += f": {reason}"

        super().__init__(
            user_message="MIDI permissions denied",
            technical_message=tech_msg,
            recoverable=False,
            recovery_hint=(
                "Access is requested once per session. "
                "Call reset() on the engine before requesting access again."
            ),
        )
        self.reason = reason


class MidiBackendError(MidiAccessError):
    """The MIDI backend failed to enumerate or open ports."""

    def __init__(self, original_error: str, backend: str | None = None):
        """
        Initialize backend error.

        Args:
            original_error: The error message from the MIDI library
            backend: Name of the mido backend in use, if known
        """
        user_msg = "MIDI backend is not available."
        tech_msg = f"MIDI backend {backend or 'default'} failed: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint=(
                "Make sure python-rtmidi is installed, or select another backend "
                "with the MIDO_BACKEND environment variable. "
                "Run 'humidi midi list' to check which ports are visible."
            ),
        )
        self.original_error = original_error
        self.backend = backend
