"""Application configuration model."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from humidi.exceptions import ConfigurationError, wrap_pydantic_error
from humidi.protocols.events import MidiEvent

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".humidi" / "config.json"


class HuMidiConfig(BaseModel):
    """Configuration for the humidi CLI and MIDI access."""

    # MIDI access
    poll_interval: float = Field(
        default=2.0, gt=0, description="How often to check for MIDI device changes (seconds)"
    )
    port_filter: list[str] = Field(
        default_factory=list,
        description="Only open input ports whose name contains one of these (empty = all)",
    )

    # Gates
    enabled: bool = Field(default=True, description="Process MIDI input at start")
    disabled_inputs: list[str] = Field(
        default_factory=list, description="Input port names disabled at start"
    )

    # Monitor subscriptions
    channels: list[int] = Field(
        default_factory=list,
        description="Channels (0-15) the monitor subscribes to (empty = all channels)",
    )
    events: list[MidiEvent] = Field(
        default_factory=lambda: list(MidiEvent),
        description="Events the monitor subscribes to",
    )

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, channels: list[int]) -> list[int]:
        """Ensure every channel is a valid MIDI channel."""
        invalid = [ch for ch in channels if not 0 <= ch <= 15]
        if invalid:
            raise ValueError(f"channels must be between 0 and 15, got {invalid}")
        return channels

    @classmethod
    def load(cls, path: Path) -> "HuMidiConfig":
        """
        Load and validate config from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise wrap_pydantic_error(e, str(path)) from e

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "HuMidiConfig":
        """
        Load config from file or return default.

        A missing file is created with default values; an existing file that
        fails to load is never overwritten.

        Args:
            path: Path to config file. If None, uses ~/.humidi/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        path = path or DEFAULT_CONFIG_PATH
        try:
            return cls.load(path)
        except FileNotFoundError:
            logger.info(f"No config at {path}, using defaults")
            config = cls()
            try:
                config.save(path)
            except OSError as e:
                raise ConfigurationError(
                    user_message=f"Could not write default configuration to {path}",
                    technical_message=f"Writing {path} failed: {e}",
                    recoverable=True,
                    recovery_hint="Check that the directory is writable",
                ) from e
            return config

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        path = path or DEFAULT_CONFIG_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Saved config to {path}")
