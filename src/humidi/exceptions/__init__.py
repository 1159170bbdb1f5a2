"""
Custom exception hierarchy for humidi.

## Exception Hierarchy

```
HuMidiError (base)
├── MidiAccessError
│   ├── MidiAccessDeniedError
│   └── MidiBackendError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

The engine only ever raises MidiAccessDeniedError across its public
boundary (from ``HuMidi.request_access``). Unsupported messages, empty
device descriptor fields, repeated disconnects and unsubscribing unknown
handlers are not errors and are absorbed silently.

### Example: Access Denied

```python
from humidi.exceptions import MidiAccessDeniedError

try:
    engine.request_access()
except MidiAccessDeniedError as e:
    print(e.get_full_message())
```

See `humidi.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .access import MidiAccessDeniedError, MidiAccessError, MidiBackendError
from .base import HuMidiError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_backend_error,
    wrap_pydantic_error,
)

__all__ = [
    "ConfigFileInvalidError",
    "ConfigValidationError",
    # Config
    "ConfigurationError",
    "ErrorContext",
    # Base
    "HuMidiError",
    # Access
    "MidiAccessDeniedError",
    "MidiAccessError",
    "MidiBackendError",
    "format_error_for_display",
    # Handlers
    "wrap_backend_error",
    "wrap_pydantic_error",
]
