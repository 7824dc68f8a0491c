"""Batched scrape requests and per-info-hash demultiplexing."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from btshow.tracker.codec import (
    ScrapeStat,
    coerce_info_hashes,
    encode_scrape,
    parse_scrape_stats,
)
from btshow.utils.exceptions import ValidationError

if TYPE_CHECKING:
    from btshow.tracker.connection import ConnectionManager

ScrapeResult = dict[bytes, ScrapeStat]


class ScrapeCoordinator:
    """Scrapes a tracker through an injected :class:`ConnectionManager`."""

    def __init__(self, connection: ConnectionManager):
        """Initialize scrape coordinator."""
        self.connection = connection
        self.logger = logging.getLogger(__name__)

    def scrape(self, info_hashes: Sequence[bytes]) -> ScrapeResult:
        """Fetch swarm statistics for ``info_hashes`` in one round trip.

        Args:
            info_hashes: Non-empty ordered sequence of 20-byte info hashes

        Returns:
            Mapping of info hash to its stats. If a hash is listed twice the
            stats from its later position win.

        Raises:
            InvalidInfoHashError: An item is not 20 bytes of bytes-like data;
                nothing is sent
            BtshowError: Any handshake, transport or protocol failure, unchanged

        """
        info_hashes = coerce_info_hashes(info_hashes)
        if not info_hashes:
            msg = "At least one info hash is required for a scrape"
            raise ValidationError(msg)

        self.connection.connect()

        request = encode_scrape(self.connection.connection_id, info_hashes)
        response = self.connection.request(request)
        stats = parse_scrape_stats(response, len(info_hashes))

        result: ScrapeResult = {}
        for info_hash, stat in zip(info_hashes, stats):
            result[info_hash] = stat

        self.logger.debug(
            "Scraped %d info hashes (%d distinct)", len(info_hashes), len(result)
        )
        return result
