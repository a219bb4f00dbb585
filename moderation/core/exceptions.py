"""Exception hierarchy for the moderation service.

Provider adapters translate third-party failures into the classification
errors below so callers can decide per kind whether to fail open or closed.
"""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class InvalidContentError(AppError):
    """Raised when the text submitted for classification is not usable."""
    pass


class ContentTooLongError(InvalidContentError):
    """Raised when content exceeds the configured maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Content length {length} exceeds the maximum of {max_length} characters"
        )
        self.length = length
        self.max_length = max_length


class ClassificationError(AppError):
    """Base class for failures of a classification call."""
    pass


class ProviderUnavailableError(ClassificationError):
    """Raised when the generation provider cannot be reached or errors out.

    Transient: callers may retry with backoff.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, original_error)
        self.status_code = status_code


class ProviderTimeoutError(ProviderUnavailableError):
    """Raised when the provider call does not complete within its time bound."""
    pass


class ProviderRefusedError(ClassificationError):
    """Raised when the provider declines to answer under its content policy."""
    pass


class SchemaValidationFailedError(ClassificationError):
    """Raised when provider output does not decode against the response schema."""

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        raw_output: Optional[str] = None,
    ):
        super().__init__(message, original_error)
        self.raw_output = raw_output
