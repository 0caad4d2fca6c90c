"""Custom exceptions with structured error payloads."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception with structured error response."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to problem+json style payload."""
        return {
            "error": self.error_code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class ValidationError(AppException):
    """Validation failed."""

    error_code = "VALIDATION_ERROR"
    message = "Validation failed"


class PriceValidationError(ValidationError):
    """A price record failed schema or bounds validation."""

    error_code = "INVALID_PRICE"
    message = "Invalid price record"

    @property
    def errors(self) -> list[dict[str, str]]:
        """Offending fields as ``{"field", "message"}`` entries."""
        return self.details.get("errors", [])


class ConfigurationError(AppException):
    """Scoring configuration is inconsistent."""

    error_code = "CONFIGURATION_ERROR"
    message = "Invalid scoring configuration"
