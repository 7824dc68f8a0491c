"""UDP tracker client wiring transport, handshake and scrape together."""

from __future__ import annotations

from typing import TYPE_CHECKING

from btshow.tracker.connection import CONNECTION_ID_LIFETIME, ConnectionManager
from btshow.tracker.scrape import ScrapeCoordinator, ScrapeResult
from btshow.tracker.transport import UDPTransport
from btshow.utils.tracker_utils import parse_tracker_address

if TYPE_CHECKING:
    from btshow.models import TrackerConfig
    from btshow.utils.time import Clock


class UDPTrackerClient:
    """Scrape client bound to one tracker endpoint.

    Example::

        with UDPTrackerClient("tracker.opentrackr.org:1337", timeout=5) as client:
            stats = client.scrape(info_hash)

    """

    def __init__(
        self,
        address: str,
        timeout: float | None = None,
        clock: Clock | None = None,
        connection_id_lifetime: float = CONNECTION_ID_LIFETIME,
    ):
        """Initialize UDP tracker client.

        Args:
            address: ``host:port`` or ``udp://host:port[/announce]``
            timeout: Receive timeout in seconds; ``None`` blocks forever
            clock: Time source for connection ID expiry
            connection_id_lifetime: Seconds a connection ID stays reusable

        """
        self.address = address
        host, port = parse_tracker_address(address)
        self.connection = ConnectionManager(
            UDPTransport(host, port, timeout=timeout),
            clock=clock,
            connection_id_lifetime=connection_id_lifetime,
        )
        self.coordinator = ScrapeCoordinator(self.connection)

    @classmethod
    def from_config(
        cls, config: TrackerConfig, address: str | None = None
    ) -> UDPTrackerClient:
        """Create a client from tracker configuration."""
        return cls(
            address or config.host,
            timeout=config.timeout,
            connection_id_lifetime=config.connection_id_lifetime,
        )

    def scrape(self, *info_hashes: bytes) -> ScrapeResult:
        """Scrape the tracker for one or more 20-byte info hashes."""
        return self.coordinator.scrape(info_hashes)

    def close(self) -> None:
        """Close the underlying socket."""
        self.connection.close()

    def __enter__(self) -> UDPTrackerClient:
        """Return the client."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the client."""
        self.close()
