"""
MIDI input device handles.

Device Lifecycle
================

::

    host enumerates / connects port
          ↓
    [DeviceDescriptor(id="port-1", name="", manufacturer=None, state="connected")]
          ↓
    MidiInputInfo.from_descriptor()  - empty fields get fallbacks
          ↓
    [MidiInputInfo(id="port-1", name="Unknown Device", manufacturer="Unknown")]
          ↓
    MidiInput(info)  - created once per id, kept for the engine's lifetime

A later disconnect mutates ``state`` on the existing MidiInput instead of
removing it, so references held by application code stay valid.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

InputState = Literal["connected", "disconnected"]

UNKNOWN_ID = "unknown"
UNKNOWN_NAME = "Unknown Device"
UNKNOWN_MANUFACTURER = "Unknown"


@dataclass
class DeviceDescriptor:
    """
    Raw port description as reported by a device access backend.

    Any string field may be empty or None; normalization happens when the
    descriptor is turned into a MidiInputInfo.
    """

    id: str | None
    name: str | None = None
    manufacturer: str | None = None
    state: InputState = "connected"
    type: Literal["input", "output"] = "input"


class MidiInputInfo(BaseModel):
    """Information about a MIDI input device."""

    id: str = Field(description="Unique identifier, stable per physical device")
    name: str = Field(default=UNKNOWN_NAME, description="Human-readable device name")
    manufacturer: str = Field(default=UNKNOWN_MANUFACTURER, description="Device manufacturer")
    state: InputState = Field(default="connected", description="Current connection state")

    @classmethod
    def from_descriptor(cls, descriptor: DeviceDescriptor) -> "MidiInputInfo":
        """Build info from a raw descriptor, replacing missing fields with fallbacks."""
        return cls(
            id=descriptor.id or UNKNOWN_ID,
            name=descriptor.name or UNKNOWN_NAME,
            manufacturer=descriptor.manufacturer or UNKNOWN_MANUFACTURER,
            state=descriptor.state,
        )


class MidiInput:
    """
    A MIDI input device with enable/disable functionality.

    When disabled, messages from this device are ignored by the engine;
    other devices keep working.

    Example:
        ```python
        piano = next(i for i in engine.get_inputs() if "Piano" in i.name)
        piano.disable()
        assert not piano.is_enabled()
        ```
    """

    def __init__(self, info: MidiInputInfo):
        self.info = info
        self._enabled = True

    def enable(self) -> None:
        """Process messages from this device."""
        self._enabled = True

    def disable(self) -> None:
        """Ignore messages from this device."""
        self._enabled = False

    def is_enabled(self) -> bool:
        """Check if messages from this device are processed."""
        return self._enabled

    @property
    def id(self) -> str:
        return self.info.id

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def manufacturer(self) -> str:
        return self.info.manufacturer

    @property
    def state(self) -> InputState:
        return self.info.state

    @state.setter
    def state(self, value: InputState) -> None:
        self.info.state = value

    @property
    def is_connected(self) -> bool:
        """Check if the device is currently connected."""
        return self.info.state == "connected"

    def __repr__(self) -> str:
        return (
            f"MidiInput(id={self.id!r}, name={self.name!r}, "
            f"state={self.state!r}, enabled={self._enabled})"
        )
