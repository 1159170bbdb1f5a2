"""Errors raised while loading a HuMidiConfig file.

- ConfigurationError: Base class, also raised when the file cannot be read
- ConfigFileInvalidError: The file is not valid JSON
- ConfigValidationError: A field holds a value HuMidiConfig rejects
"""

import re
from typing import Any

from .base import HuMidiError

# pydantic reports JSON errors as "<reason> at line N column M"
_JSON_LOCATION = re.compile(r"line (\d+) column (\d+)")

# Extra guidance per top-level HuMidiConfig field
_FIELD_HINTS = {
    "poll_interval": "poll_interval is in seconds and must be greater than 0",
    "port_filter": (
        "port_filter holds substrings of input port names. "
        "Run 'humidi midi list' to see the names"
    ),
    "disabled_inputs": (
        "disabled_inputs holds full input port names. "
        "Run 'humidi midi list' to see the names"
    ),
    "channels": "Channels are numbered 0-15. Leave the list empty to monitor every channel",
    "events": (
        "Valid events: noteon, noteoff, pitchbend, sustainon, sustainoff, "
        "inputconnected, inputdisconnected"
    ),
    "enabled": "enabled must be true or false",
}


class ConfigurationError(HuMidiError):
    """The humidi configuration cannot be used."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """The configuration file is not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Args:
            file_path: Path to the config file
            parse_error: The JSON parser's message
        """
        match = _JSON_LOCATION.search(parse_error)
        if match:
            line, column = match.groups()
            user_msg = f"Configuration file is not valid JSON (line {line}, column {column})"
        else:
            user_msg = "Configuration file is not valid JSON"

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=(
                f"Fix {file_path} by hand, or run 'humidi config reset' "
                "to replace it with the defaults"
            ),
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A configuration field holds an invalid value."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Args:
            field: Dotted path of the field, e.g. "channels.0"
            value: The rejected value
            error_msg: Why it was rejected
            file_path: Config file the value came from, if any
        """
        hint_lines = [f"Update the '{field}' value in your configuration"]
        if file_path:
            hint_lines.append(f"Config file: {file_path}")
        field_hint = _FIELD_HINTS.get(field.split(".")[0])
        if field_hint:
            hint_lines.append(field_hint)

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint="\n".join(hint_lines),
        )
        self.field = field
        self.value = value
        self.file_path = file_path
