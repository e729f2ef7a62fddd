"""Custom exceptions for receipt extraction."""

from typing import Any, Optional


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class ExtractionRejectedError(ExtractionError):
    """Raised in strict mode when a resolved result is internally inconsistent."""

    code = "EXTRACTION_REJECTED"

    def __init__(self, message: str, field: str, value: Any = None):
        self.value = value
        super().__init__(message, field=field)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "value": self.value,
        }
