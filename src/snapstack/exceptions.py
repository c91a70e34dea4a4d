class SnapstackError(Exception):
    """Base exception for all expected snapstack errors."""

    message: str
    exit_code: int

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigurationError(SnapstackError):
    """Configuration related errors (env vars, options)."""


class InvalidIndexError(SnapstackError):
    """Index outside the valid range for the attempted operation."""


class InvalidTemplateError(SnapstackError):
    """Template is not a mapping of unary handlers."""


class InvalidSequenceError(SnapstackError):
    """Sequence setter given something that is not an ordered sequence of records."""


class BoundaryError(SnapstackError):
    """Undo at the first record or redo at the last one."""


class PersistenceError(SnapstackError):
    """Saving or loading a persisted state failed."""


class InvalidInputError(SnapstackError):
    """User input validation errors."""
