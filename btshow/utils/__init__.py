"""Shared utilities: errors, logging, clock and input parsing helpers."""

from __future__ import annotations

from btshow.utils.exceptions import (
    BtshowError,
    NetworkError,
    ProtocolError,
    ProtocolMismatchError,
    TrackerError,
    TrackerReportedError,
    TrackerTimeoutError,
    TransportError,
    TruncatedResponseError,
    ValidationError,
)
from btshow.utils.time import Clock

__all__ = [
    "BtshowError",
    "Clock",
    "NetworkError",
    "ProtocolError",
    "ProtocolMismatchError",
    "TrackerError",
    "TrackerReportedError",
    "TrackerTimeoutError",
    "TransportError",
    "TruncatedResponseError",
    "ValidationError",
]
