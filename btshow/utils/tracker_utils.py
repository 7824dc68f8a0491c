"""Tracker address and info hash parsing helpers."""

from __future__ import annotations

import binascii

from btshow.utils.exceptions import InvalidInfoHashError, ValidationError

INFO_HASH_HEX_LENGTH = 40


def parse_tracker_address(address: str) -> tuple[str, int]:
    """Split a tracker address into ``(host, port)``.

    Accepts ``host:port``, ``[v6addr]:port`` and ``udp://host:port/announce``.
    """
    url = address.strip()
    if url.lower().startswith("udp://"):
        url = url[6:]
    elif "://" in url:
        msg = f"Only UDP trackers are supported: {address!r}"
        raise ValidationError(msg)

    # Drop any announce path
    url = url.split("/", 1)[0]

    if url.startswith("["):
        host, sep, rest = url[1:].partition("]")
        if not sep or not rest.startswith(":"):
            msg = f"Tracker address must include a port: {address!r}"
            raise ValidationError(msg)
        port_str = rest[1:]
    else:
        if ":" not in url:
            msg = f"Tracker address must include a port: {address!r}"
            raise ValidationError(msg)
        host, port_str = url.rsplit(":", 1)

    if not host:
        msg = f"Tracker address has no host: {address!r}"
        raise ValidationError(msg)

    try:
        port = int(port_str)
    except ValueError as e:
        msg = f"Invalid tracker port: {port_str!r}"
        raise ValidationError(msg) from e
    if not 0 < port < 65536:
        msg = f"Tracker port out of range: {port}"
        raise ValidationError(msg)

    return host, port


def parse_info_hash(value: str) -> bytes:
    """Decode a 40-character hex info hash into its 20 raw bytes."""
    text = value.strip()
    if len(text) != INFO_HASH_HEX_LENGTH:
        msg = f"Info hash must be {INFO_HASH_HEX_LENGTH} hex characters: {value!r}"
        raise InvalidInfoHashError(msg)
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        msg = f"Info hash is not valid hex: {value!r}"
        raise InvalidInfoHashError(msg) from e
