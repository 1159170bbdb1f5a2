"""
Centralized error handling utilities.

## Quick Reference

| Scenario | Use This | Example |
|----------|----------|---------|
| Host refused access | `MidiAccessDeniedError` | `raise MidiAccessDeniedError("user declined")` |
| Backend can't list/open ports | `wrap_backend_error` | `raise wrap_backend_error(e) from e` |
| Config file syntax error | `ConfigFileInvalidError` | `raise ConfigFileInvalidError(path, "EOF while parsing at line 1 column 9")` |
| Config value invalid | `ConfigValidationError` | `raise ConfigValidationError("poll_interval", -1, "must be > 0")` |
| Critical section with auto-logging | `ErrorContext` | `with ErrorContext("open MIDI ports"): ...` |

## Architecture: The Three-Layer Model

```
┌─────────────────────────────────────┐
│  USER LAYER (CLI)                   │
│  - Formats error.user_message       │
│  - Shows error.recovery_hint        │
└─────────────────────────────────────┘
                  ↑
                  │ HuMidiError
                  │
┌─────────────────────────────────────┐
│  ENGINE LAYER (HuMidi, MidoAccess)  │
│  - Catches low-level exceptions     │
│  - Converts to HuMidiError          │
└─────────────────────────────────────┘
                  ↑
                  │ OSError, IOError, ...
                  │
┌─────────────────────────────────────┐
│  LOW LEVEL (mido, rtmidi, I/O)      │
└─────────────────────────────────────┘
```
"""

import logging
from typing import Optional

from .access import MidiBackendError
from .base import HuMidiError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("open MIDI ports") as ctx:
            access.request()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, HuMidiError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> HuMidiError:
    """
    Convert Pydantic validation errors to humidi exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", ("unknown",)))
            return ConfigValidationError(
                field=field,
                value=first_error.get("input"),
                error_msg=first_error.get("msg", "validation failed"),
                file_path=file_path,
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get("loc", ("unknown",)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path,
            )

    return ConfigValidationError(
        field="unknown", value=None, error_msg=error_msg, file_path=file_path
    )


def wrap_backend_error(error: Exception) -> MidiBackendError:
    """
    Convert low-level mido/rtmidi errors to a MidiBackendError.

    Args:
        error: The original exception from the MIDI library

    Returns:
        MidiBackendError naming the active backend when it can be determined
    """
    backend_name = None
    try:
        import mido

        backend_name = mido.backend.name
    except (ImportError, AttributeError):
        # mido itself is broken or exposes no backend name
        backend_name = None

    return MidiBackendError(original_error=str(error), backend=backend_name)


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, HuMidiError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
