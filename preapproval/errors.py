"""Wizard error types."""


class WizardError(Exception):
    """Base class for recoverable wizard errors."""


class AnswerValidationError(WizardError):
    """An answer failed the checks for its step. Blocks advancing, nothing else."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
