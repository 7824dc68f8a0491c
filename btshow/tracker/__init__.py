"""UDP tracker protocol (BEP 15): codec, handshake and scrape."""

from __future__ import annotations

from btshow.tracker.client import UDPTrackerClient
from btshow.tracker.codec import (
    PROTOCOL_ID,
    ScrapeStat,
    TrackerAction,
    TrackerRequest,
    decode_response,
    encode_connect,
    encode_scrape,
)
from btshow.tracker.connection import ConnectionManager, ConnectionState
from btshow.tracker.scrape import ScrapeCoordinator, ScrapeResult
from btshow.tracker.transport import UDPTransport

__all__ = [
    "PROTOCOL_ID",
    "ConnectionManager",
    "ConnectionState",
    "ScrapeCoordinator",
    "ScrapeResult",
    "ScrapeStat",
    "TrackerAction",
    "TrackerRequest",
    "UDPTrackerClient",
    "UDPTransport",
    "decode_response",
    "encode_connect",
    "encode_scrape",
]
