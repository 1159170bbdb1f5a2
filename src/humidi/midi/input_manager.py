"""MIDI input access with hot-plug support, built on mido."""

import logging
import threading
import time
from collections.abc import Callable, Sequence

import mido

from humidi.devices.input import DeviceDescriptor
from humidi.exceptions import wrap_backend_error

from .access import RawMessageCallback, StateChangeCallback

logger = logging.getLogger(__name__)

# Real-time messages that are never decoded, filtered before reaching the engine
_IGNORED_TYPES = {"clock", "active_sensing"}


class MidiInputManager:
    """
    Multi-port MIDI input manager with hot-plug support.

    Opens every input port accepted by the port filter, routes each port's
    messages to the callback registered for it, and monitors for ports
    being plugged/unplugged. Implements the AccessGrant protocol.

    mido only identifies ports by name, so the port name doubles as the
    input id.
    """

    def __init__(
        self,
        port_filter: Callable[[str], bool] | None = None,
        poll_interval: float = 2.0,
    ):
        """
        Initialize MIDI input manager.

        Args:
            port_filter: Function that returns True if a port should be opened.
                         If None, opens every input port.
            poll_interval: How often to check for device changes (seconds)
        """
        self._port_filter = port_filter or (lambda name: True)
        self._poll_interval = poll_interval
        self._running = False
        self._monitor_thread: threading.Thread | None = None
        self._ports: dict[str, mido.ports.BaseInput] = {}
        self._port_lock = threading.Lock()
        self._message_callbacks: dict[str, RawMessageCallback] = {}
        self._on_state_change: StateChangeCallback | None = None

    # ================================================================
    # ACCESS GRANT
    # ================================================================

    def inputs(self) -> list[DeviceDescriptor]:
        """Get descriptors of the currently open input ports."""
        with self._port_lock:
            return [DeviceDescriptor(id=name, name=name) for name in self._ports]

    def register_message_callback(self, input_id: str, callback: RawMessageCallback) -> None:
        """
        Register callback for raw messages of one input port.

        Callback is executed in mido's internal I/O thread - keep it fast!

        Args:
            input_id: Port name
            callback: Function that receives the raw message bytes
        """
        self._message_callbacks[input_id] = callback

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """
        Register callback for port connection state changes.

        Callback is executed in the monitor thread.

        Args:
            callback: Function that receives the DeviceDescriptor of the port
        """
        self._on_state_change = callback

    def close(self) -> None:
        """Stop monitoring and close all ports."""
        self.stop()

    # ================================================================
    # LIFECYCLE MANAGEMENT
    # ================================================================

    def open_available(self) -> list[DeviceDescriptor]:
        """
        Open every matching input port without firing state changes.

        Returns:
            Descriptors of the ports that are open afterwards

        Raises:
            Exception: If the backend cannot list ports
        """
        for name in self._get_matching_ports():
            with self._port_lock:
                if name not in self._ports:
                    self._connect_to_port(name)
        return self.inputs()

    def start(self) -> None:
        """Start monitoring for MIDI devices."""
        if self._running:
            logger.warning("MidiInputManager is already running")
            return

        self._running = True
        self._monitor_thread = threading.Thread(target=self._monitor_devices, daemon=True)
        self._monitor_thread.start()
        logger.debug("MidiInputManager started")

    def stop(self) -> None:
        """Stop monitoring and close connections."""
        self._running = False

        with self._port_lock:
            for name, port in self._ports.items():
                try:
                    port.close()
                except Exception as e:
                    logger.error(f"Error closing MIDI input port {name}: {e}")
            self._ports.clear()

        if self._monitor_thread and self._monitor_thread.is_alive():
            self._monitor_thread.join(timeout=1.0)

        logger.debug("MidiInputManager stopped")

    def _get_matching_ports(self) -> list[str]:
        return [name for name in mido.get_input_names() if self._port_filter(name)]

    def _monitor_devices(self) -> None:
        """Monitor for device connection/disconnection."""
        logger.debug("Starting MIDI input device monitoring")

        while self._running:
            time.sleep(self._poll_interval)
            if not self._running:
                break
            try:
                self.poll()
            except Exception as e:
                logger.error(f"Error in MIDI input monitoring: {e}")

    def poll(self) -> None:
        """
        Run one hot-plug check.

        Opens newly available ports and closes vanished ones, firing the state
        change callback for each. Callbacks run outside the port lock.
        Does nothing unless the manager is running.
        """
        available = set(self._get_matching_ports())
        changes: list[DeviceDescriptor] = []

        with self._port_lock:
            # stop() may have run while the port list was being fetched
            if not self._running:
                return
            for name in [n for n in self._ports if n not in available]:
                logger.info(f"MIDI input disconnected: {name}")
                try:
                    self._ports[name].close()
                except Exception as e:
                    logger.debug(f"Error closing vanished port {name}: {e}")
                del self._ports[name]
                changes.append(DeviceDescriptor(id=name, name=name, state="disconnected"))

            for name in sorted(available - set(self._ports)):
                logger.info(f"MIDI input detected: {name}")
                if self._connect_to_port(name):
                    changes.append(DeviceDescriptor(id=name, name=name, state="connected"))

        if self._on_state_change:
            for descriptor in changes:
                try:
                    self._on_state_change(descriptor)
                except Exception as e:
                    logger.error(f"Error in connection callback: {e}", exc_info=True)

    def _connect_to_port(self, port_name: str) -> bool:
        """
        Open a MIDI input port with callback.

        Note: Should be called with _port_lock held.
        """
        try:
            self._ports[port_name] = mido.open_input(
                port_name, callback=self._make_port_callback(port_name)
            )
            logger.info(f"Connected to MIDI input: {port_name}")
            return True
        except Exception as e:
            logger.error(f"Failed to connect to {port_name}: {e}")
            return False

    def _make_port_callback(self, port_name: str) -> Callable[[mido.Message], None]:
        def callback(msg: mido.Message) -> None:
            self._midi_callback(port_name, msg)

        return callback

    def _midi_callback(self, port_name: str, msg: mido.Message) -> None:
        """
        MIDI message callback - called from mido's internal I/O thread.

        Dispatches the raw bytes to the callback registered for the port.
        """
        if msg.type in _IGNORED_TYPES:
            return
        callback = self._message_callbacks.get(port_name)
        if callback is None:
            return
        try:
            callback(msg.bytes())
        except Exception as e:
            logger.error(f"Error in MIDI input callback for {port_name}: {e}", exc_info=True)

    @property
    def open_ports(self) -> list[str]:
        """Get names of currently open ports."""
        with self._port_lock:
            return list(self._ports)

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


class MidoAccess:
    """
    Device access through mido's default backend (python-rtmidi).

    Hosts that never refuse access still have a failure mode: the backend
    may be missing or unable to enumerate ports, which is reported as a
    MidiBackendError from ``request``.

    Example:
        ```python
        engine = HuMidi(access=MidoAccess(port_filter=["Keystation"]))
        engine.request_access()
        ```
    """

    def __init__(self, port_filter: Sequence[str] | None = None, poll_interval: float = 2.0):
        """
        Initialize mido access.

        Args:
            port_filter: Substrings a port name must contain one of to be opened.
                         Empty or None opens every input port.
            poll_interval: Hot-plug polling interval (seconds)
        """
        self._patterns = list(port_filter or [])
        self._poll_interval = poll_interval

    def _matches(self, port_name: str) -> bool:
        if not self._patterns:
            return True
        return any(pattern in port_name for pattern in self._patterns)

    def has_permission(self) -> bool:
        """Check if the backend can enumerate input ports."""
        try:
            mido.get_input_names()
        except Exception as e:
            logger.debug(f"MIDI permission check failed: {e}")
            return False
        return True

    def request(self) -> MidiInputManager:
        """
        Open matching input ports and start hot-plug monitoring.

        Returns:
            The running MidiInputManager, acting as AccessGrant

        Raises:
            MidiBackendError: If the backend cannot enumerate ports
        """
        manager = MidiInputManager(self._matches, self._poll_interval)
        try:
            manager.open_available()
        except Exception as e:
            manager.stop()
            raise wrap_backend_error(e) from e

        manager.start()
        return manager
