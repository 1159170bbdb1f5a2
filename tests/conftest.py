"""Pytest fixtures for tests."""

from collections.abc import Sequence
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import Mock

import pytest

from humidi import HuMidi
from humidi.devices import DeviceDescriptor
from humidi.exceptions import MidiAccessDeniedError


class FakeGrant:
    """In-memory AccessGrant that lets tests play a host."""

    def __init__(self, inputs: Sequence[DeviceDescriptor] = ()):
        self._inputs = list(inputs)
        self.message_callbacks = {}
        self.state_callback = None
        self.closed = False

    def inputs(self) -> list[DeviceDescriptor]:
        return list(self._inputs)

    def register_message_callback(self, input_id, callback) -> None:
        self.message_callbacks[input_id] = callback

    def on_state_change(self, callback) -> None:
        self.state_callback = callback

    def close(self) -> None:
        self.closed = True

    # Host side

    def send(self, input_id: str, *data: int) -> None:
        """Deliver a raw message as the host would."""
        self.message_callbacks[input_id](list(data))

    def connect(self, input_id: str, name: str = "", manufacturer: str = "") -> None:
        self.state_callback(
            DeviceDescriptor(id=input_id, name=name, manufacturer=manufacturer, state="connected")
        )

    def disconnect(self, input_id: str, name: str = "", manufacturer: str = "") -> None:
        self.state_callback(
            DeviceDescriptor(
                id=input_id, name=name, manufacturer=manufacturer, state="disconnected"
            )
        )


class FakeAccess:
    """MidiAccess returning a FakeGrant, or refusing access."""

    def __init__(self, grant: FakeGrant | None = None, deny: bool = False, permission: bool = True):
        self.grant = grant or FakeGrant()
        self.deny = deny
        self.permission = permission
        self.request_count = 0

    def request(self) -> FakeGrant:
        self.request_count += 1
        if self.deny:
            raise MidiAccessDeniedError("user declined")
        return self.grant

    def has_permission(self) -> bool:
        return self.permission


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def grant():
    """A host with two keyboards attached."""
    return FakeGrant(
        [
            DeviceDescriptor(id="kbd-1", name="Keystation 49", manufacturer="M-Audio"),
            DeviceDescriptor(id="kbd-2", name="Digital Piano", manufacturer="Roland"),
        ]
    )


@pytest.fixture
def access(grant):
    """Access backend granting the two-keyboard host."""
    return FakeAccess(grant)


@pytest.fixture
def engine():
    """An engine with no access requested (use process_message directly)."""
    return HuMidi(access=FakeAccess())


@pytest.fixture
def connected_engine(access):
    """An engine with access granted to the two-keyboard host."""
    engine = HuMidi(access=access)
    engine.request_access()
    yield engine
    engine.reset()


@pytest.fixture
def handler():
    """A mock handler that records payloads."""
    return Mock()
