"""Honeycomb backlink exporter error hierarchy and exceptions."""

from __future__ import annotations


class BacklinkError(Exception):
    """Base exception for all backlink exporter errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(BacklinkError):
    """Raised when configuration is invalid or conflicting."""
    pass


class PreconditionViolation(BacklinkError, ValueError):
    """Raised when an identifier buffer has the wrong length.

    This is a caller error: the batch cannot be translated and the
    violation propagates out of the push operation.
    """
    pass


class SerializationError(BacklinkError):
    """Raised when a link event payload cannot be constructed."""
    pass


class DeliveryError(BacklinkError):
    """Raised when sending a link event to the backend fails."""
    pass
