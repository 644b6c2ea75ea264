"""Custom exceptions for diff view operations."""

from typing import Any


class DiffError(Exception):
    """Base exception for diff view operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class DiffSourceError(DiffError):
    """Raised when a diff source is requested with invalid arguments (e.g. out-of-range commit index)."""


class DiffSettingsError(DiffError):
    """Raised when a settings file contains invalid values."""
