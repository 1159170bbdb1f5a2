"""Root of the humidi error hierarchy.

Every error humidi raises on purpose derives from HuMidiError, so callers
embedding the engine can catch one type. Each error carries two messages:
a short one that the CLI prints, and a detailed one that goes to the log.
"""


class HuMidiError(Exception):
    """
    Base exception for humidi.

    Attributes:
        user_message: Short message printed by the CLI
        technical_message: Detailed message written to the log
        recoverable: False when retrying in the same session cannot succeed
        recovery_hint: What the user can do about it, if anything
    """

    def __init__(
        self,
        user_message: str,
        technical_message: str | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, as the CLI shows it."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
