"""Blocking, connected UDP socket used to talk to a single tracker."""

from __future__ import annotations

import logging
import socket

from btshow.utils.exceptions import TrackerTimeoutError, TransportError

# Large enough for any reply a scrape or connect can legally produce
DEFAULT_RECEIVE_SIZE = 2048


class UDPTransport:
    """Single-peer datagram channel with blocking send/receive."""

    def __init__(self, host: str, port: int, timeout: float | None = None):
        """Initialize UDP transport.

        Args:
            host: Tracker host name or address
            port: Tracker UDP port
            timeout: Receive timeout in seconds; ``None`` blocks forever

        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: socket.socket | None = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_open(self) -> bool:
        """Return True while the underlying socket is open."""
        return self._sock is not None

    def open(self) -> None:
        """Resolve the tracker and connect a datagram socket to it."""
        if self._sock is not None:
            return

        try:
            addresses = socket.getaddrinfo(
                self.host, self.port, type=socket.SOCK_DGRAM
            )
        except OSError as e:
            msg = f"Failed to resolve tracker address {self.host}:{self.port}"
            raise TransportError(msg, {"error": str(e)}) from e

        last_error: OSError | None = None
        for family, socktype, proto, _canonname, sockaddr in addresses:
            sock = socket.socket(family, socktype, proto)
            try:
                sock.settimeout(self.timeout)
                sock.connect(sockaddr)
            except OSError as e:
                sock.close()
                last_error = e
                continue
            self._sock = sock
            self.logger.debug(
                "Opened UDP channel to %s:%s via %s", self.host, self.port, sockaddr
            )
            return

        msg = f"Failed to dial tracker {self.host}:{self.port}"
        raise TransportError(msg, {"error": str(last_error)})

    def send(self, data: bytes) -> None:
        """Send one datagram, opening the socket first if needed."""
        self.open()
        assert self._sock is not None  # nosec B101 - set by open()
        try:
            self._sock.send(data)
        except OSError as e:
            msg = "Failed to send request"
            raise TransportError(msg, {"error": str(e)}) from e
        self.logger.debug("Sent %d bytes to %s:%s", len(data), self.host, self.port)

    def receive(self, bufsize: int = DEFAULT_RECEIVE_SIZE) -> bytes:
        """Block until one datagram arrives and return it."""
        if self._sock is None:
            msg = "UDP transport is not open"
            raise TransportError(msg)
        try:
            data = self._sock.recv(max(bufsize, DEFAULT_RECEIVE_SIZE))
        except socket.timeout as e:
            msg = f"Timed out waiting for tracker response after {self.timeout}s"
            raise TrackerTimeoutError(msg) from e
        except OSError as e:
            msg = "Failed to receive response"
            raise TransportError(msg, {"error": str(e)}) from e
        self.logger.debug(
            "Received %d bytes from %s:%s", len(data), self.host, self.port
        )
        return data

    def close(self) -> None:
        """Close the socket. Safe to call repeatedly."""
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        sock.close()
        self.logger.debug("Closed UDP channel to %s:%s", self.host, self.port)

    def __enter__(self) -> UDPTransport:
        """Open the transport."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the transport."""
        self.close()
