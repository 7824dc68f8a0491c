"""Connect handshake and connection ID lifetime for one tracker endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from btshow.tracker.codec import (
    TrackerRequest,
    decode_response,
    encode_connect,
    parse_connection_id,
)
from btshow.utils.time import Clock

if TYPE_CHECKING:
    from btshow.tracker.transport import UDPTransport

# BEP 15: a connection ID may be reused for one minute after it was issued
CONNECTION_ID_LIFETIME = 60.0


@dataclass(frozen=True)
class ConnectionState:
    """Connection ID issued by the tracker and when we received it."""

    connection_id: int
    established_at: float


class ConnectionManager:
    """Owns the transport and a cached, time-limited connection ID."""

    def __init__(
        self,
        transport: UDPTransport,
        clock: Clock | None = None,
        connection_id_lifetime: float = CONNECTION_ID_LIFETIME,
    ):
        """Initialize connection manager.

        Args:
            transport: Channel to the tracker; closed by :meth:`close`
            clock: Time source for the expiry check
            connection_id_lifetime: Seconds a connection ID stays reusable

        """
        self.transport = transport
        self.clock = clock or Clock()
        self.connection_id_lifetime = connection_id_lifetime
        self._state: ConnectionState | None = None
        self.logger = logging.getLogger(__name__)

    @property
    def state(self) -> ConnectionState | None:
        """Cached connection state, expired or not."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Return True if a connection ID is held and has not expired."""
        if self._state is None:
            return False
        age = self.clock.now() - self._state.established_at
        return age < self.connection_id_lifetime

    @property
    def connection_id(self) -> int:
        """Current connection ID. Call :meth:`connect` first."""
        if self._state is None:
            msg = "No connection ID; connect() has not succeeded"
            raise RuntimeError(msg)
        return self._state.connection_id

    def connect(self) -> None:
        """Ensure an unexpired connection ID is held.

        Performs the handshake only when there is no cached ID or it has
        expired. On failure the cached state is left as it was.
        """
        if self.is_connected:
            self.logger.debug("Reusing connection ID for %s", self._endpoint)
            return

        response = self.request(encode_connect())
        connection_id = parse_connection_id(response)
        self._state = ConnectionState(
            connection_id=connection_id,
            established_at=self.clock.now(),
        )
        self.logger.debug(
            "Received connection ID %d from %s", connection_id, self._endpoint
        )

    def request(self, request: TrackerRequest) -> bytes:
        """Send ``request`` and return its validated reply.

        Exactly one send and one receive; no retry.
        """
        self.transport.send(request.raw)
        data = self.transport.receive(request.expected_length)
        return decode_response(
            data,
            request.action,
            request.transaction_id,
            request.expected_length,
        )

    def invalidate(self) -> None:
        """Forget the cached connection ID so the next connect handshakes."""
        self._state = None

    def close(self) -> None:
        """Release the transport. Idempotent."""
        self.transport.close()

    @property
    def _endpoint(self) -> str:
        return f"{self.transport.host}:{self.transport.port}"

    def __enter__(self) -> ConnectionManager:
        """Return the manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the manager."""
        self.close()
