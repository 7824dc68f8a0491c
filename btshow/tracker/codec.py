"""UDP tracker wire codec (BEP 15).

Pure functions that build connect/scrape datagrams and validate replies.
All integers are big-endian. Nothing here touches a socket.
"""

from __future__ import annotations

import random
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from btshow.utils.exceptions import (
    InvalidInfoHashError,
    ProtocolMismatchError,
    TrackerReportedError,
    TruncatedResponseError,
    ValidationError,
)

PROTOCOL_ID = 0x41727101980
INFO_HASH_LENGTH = 20
REQUEST_HEADER_LENGTH = 16
RESPONSE_HEADER_LENGTH = 8
CONNECT_RESPONSE_LENGTH = 16
SCRAPE_ENTRY_LENGTH = 12

_REQUEST_HEADER = struct.Struct("!QII")
_RESPONSE_HEADER = struct.Struct("!II")
_CONNECTION_ID = struct.Struct("!Q")
_SCRAPE_ENTRY = struct.Struct("!III")

_random = random.SystemRandom()


class TrackerAction(Enum):
    """UDP tracker actions."""

    CONNECT = 0
    ANNOUNCE = 1
    SCRAPE = 2
    ERROR = 3


@dataclass(frozen=True)
class TrackerRequest:
    """An encoded request and what its reply must look like."""

    action: TrackerAction
    transaction_id: int
    raw: bytes
    expected_length: int


@dataclass(frozen=True)
class ScrapeStat:
    """Swarm statistics for one info hash."""

    seeders: int
    completed: int
    leechers: int


def generate_transaction_id() -> int:
    """Return a uniformly random 32-bit transaction ID."""
    return _random.getrandbits(32)


def encode_connect() -> TrackerRequest:
    """Build a 16-byte connect request with a fresh transaction ID."""
    transaction_id = generate_transaction_id()
    raw = _REQUEST_HEADER.pack(
        PROTOCOL_ID,
        TrackerAction.CONNECT.value,
        transaction_id,
    )
    return TrackerRequest(
        action=TrackerAction.CONNECT,
        transaction_id=transaction_id,
        raw=raw,
        expected_length=CONNECT_RESPONSE_LENGTH,
    )


def coerce_info_hashes(info_hashes: Sequence[bytes]) -> list[bytes]:
    """Return ``info_hashes`` as a list of ``bytes``, checking each one.

    Raises:
        InvalidInfoHashError: If an item is not bytes-like or not 20 bytes long

    """
    hashes = []
    for index, info_hash in enumerate(info_hashes):
        if not isinstance(info_hash, (bytes, bytearray, memoryview)):
            msg = f"Invalid info_hash type: {type(info_hash).__name__} (expected bytes)"
            raise InvalidInfoHashError(msg, {"index": index})
        info_hash = bytes(info_hash)
        if len(info_hash) != INFO_HASH_LENGTH:
            msg = f"Invalid info_hash length: {len(info_hash)} (expected {INFO_HASH_LENGTH})"
            raise InvalidInfoHashError(msg, {"index": index})
        hashes.append(info_hash)
    return hashes


def encode_scrape(connection_id: int, info_hashes: Sequence[bytes]) -> TrackerRequest:
    """Build a scrape request for ``info_hashes``.

    The hashes are written in the order given; the reply carries one stat
    triple per hash in that same order.

    Args:
        connection_id: Connection ID obtained from the connect handshake
        info_hashes: One or more 20-byte info hashes

    Returns:
        Encoded request of ``16 + 20 * len(info_hashes)`` bytes

    Raises:
        ValidationError: If no hashes are given
        InvalidInfoHashError: If any hash is not 20 bytes of bytes-like data

    """
    if not info_hashes:
        msg = "At least one info hash is required for a scrape"
        raise ValidationError(msg)

    hashes = coerce_info_hashes(info_hashes)

    transaction_id = generate_transaction_id()
    header = _REQUEST_HEADER.pack(
        connection_id,
        TrackerAction.SCRAPE.value,
        transaction_id,
    )
    return TrackerRequest(
        action=TrackerAction.SCRAPE,
        transaction_id=transaction_id,
        raw=header + b"".join(hashes),
        expected_length=RESPONSE_HEADER_LENGTH + SCRAPE_ENTRY_LENGTH * len(hashes),
    )


def decode_response(
    data: bytes,
    expected_action: TrackerAction,
    expected_transaction_id: int,
    expected_length: int,
) -> bytes:
    """Validate a reply against the request that elicited it.

    Returns ``data`` unchanged when it is well formed; the caller reads the
    action-specific payload from offset 8.

    The length is checked before anything is read, so an error reply shorter
    than ``expected_length`` is reported as truncated.

    Raises:
        TruncatedResponseError: Fewer than ``expected_length`` bytes
        TrackerReportedError: The tracker answered with the error action
        ProtocolMismatchError: Action or transaction ID differs from the request

    """
    minimum = max(expected_length, RESPONSE_HEADER_LENGTH)
    if len(data) < minimum:
        msg = "Response too short"
        raise TruncatedResponseError(
            msg, {"expected": minimum, "received": len(data)}
        )

    action, transaction_id = _RESPONSE_HEADER.unpack_from(data, 0)
    if action == TrackerAction.ERROR.value:
        message = data[RESPONSE_HEADER_LENGTH:].decode("utf-8", errors="replace")
        raise TrackerReportedError(message)
    if action != expected_action.value:
        msg = f"Unexpected action in response: {action} (wanted {expected_action.value})"
        raise ProtocolMismatchError(msg)
    if transaction_id != expected_transaction_id:
        msg = "Transaction ID mismatch"
        raise ProtocolMismatchError(
            msg,
            {"expected": expected_transaction_id, "received": transaction_id},
        )

    return data


def parse_connection_id(data: bytes) -> int:
    """Read the 64-bit connection ID from a validated connect reply."""
    return _CONNECTION_ID.unpack_from(data, RESPONSE_HEADER_LENGTH)[0]


def parse_scrape_stats(data: bytes, count: int) -> list[ScrapeStat]:
    """Read ``count`` stat triples from a validated scrape reply.

    Each 12-byte entry is laid out as seeders, leechers, completed.
    """
    stats = []
    for idx in range(count):
        seeders, leechers, completed = _SCRAPE_ENTRY.unpack_from(
            data, RESPONSE_HEADER_LENGTH + SCRAPE_ENTRY_LENGTH * idx
        )
        stats.append(
            ScrapeStat(seeders=seeders, completed=completed, leechers=leechers)
        )
    return stats
