"""Exception hierarchy for btshow.

Every failure the tracker client can hit is raised as a subclass of
``BtshowError`` so callers can tell transport trouble, malformed replies and
tracker-side refusals apart without parsing messages.
"""

from __future__ import annotations

from typing import Any


class BtshowError(Exception):
    """Base exception for all btshow errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize btshow error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class NetworkError(BtshowError):
    """Network-related errors."""


class TransportError(NetworkError):
    """Socket resolution, connect, send or receive failure."""


class TrackerTimeoutError(TransportError):
    """No datagram arrived before the receive timeout expired."""


class TrackerError(NetworkError):
    """Tracker communication errors."""


class TrackerReportedError(TrackerError):
    """The tracker answered with an error action.

    ``message`` holds the tracker's own text verbatim.
    """


class ProtocolError(BtshowError):
    """UDP tracker protocol errors."""


class TruncatedResponseError(ProtocolError):
    """Received fewer bytes than the reply to the request must contain."""


class ProtocolMismatchError(ProtocolError):
    """Reply action or transaction ID does not match the request."""


class ValidationError(BtshowError, ValueError):
    """Data validation errors."""


class InvalidInfoHashError(ValidationError):
    """Info hash is not 20 bytes (or 40 hex characters)."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""
