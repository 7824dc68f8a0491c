"""Pytest configuration and shared fixtures for btshow tests."""

from __future__ import annotations

import logging
import struct
from collections.abc import Callable
from typing import Union

import pytest

from btshow.config import config as config_module

Reply = Union[bytes, Exception, Callable[[bytes], bytes]]


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("integration", "marks tests as integration tests"),
        ("tracker", "marks tests as tracker tests"),
        ("config", "marks tests as configuration tests"),
        ("cli", "marks tests as CLI tests"),
        ("utils", "marks tests as utility tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep tests away from user config files and BTSHOW_* variables."""
    for env_name in config_module.ENV_MAPPINGS:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # setup_logging stops propagation, which hides records from caplog
    package_logger = logging.getLogger("btshow")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


class FakeTransport:
    """In-memory stand-in for UDPTransport.

    Each queued reply is either raw bytes, an exception to raise from
    ``receive``, or a callable building the reply from the last sent datagram.
    """

    def __init__(self, replies: list[Reply] | None = None):
        self.host = "tracker.test"
        self.port = 6969
        self.sent: list[bytes] = []
        self.replies: list[Reply] = list(replies or [])
        self.receive_sizes: list[int] = []
        self.closed = False
        self.close_calls = 0

    def send(self, data: bytes) -> None:
        self.sent.append(data)

    def receive(self, bufsize: int = 2048) -> bytes:
        self.receive_sizes.append(bufsize)
        if not self.replies:
            msg = "FakeTransport has no reply queued"
            raise AssertionError(msg)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(self.sent[-1])
        return reply

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def transaction_id_of(request: bytes) -> int:
    """Transaction ID field of an encoded request."""
    return struct.unpack_from("!I", request, 12)[0]


def connect_reply(connection_id: int) -> Callable[[bytes], bytes]:
    """Build a connect reply echoing the request's transaction ID."""

    def _reply(request: bytes) -> bytes:
        return struct.pack("!IIQ", 0, transaction_id_of(request), connection_id)

    return _reply


def scrape_reply(*entries: tuple[int, int, int]) -> Callable[[bytes], bytes]:
    """Build a scrape reply from (seeders, leechers, completed) triples."""

    def _reply(request: bytes) -> bytes:
        body = b"".join(struct.pack("!III", *entry) for entry in entries)
        return struct.pack("!II", 2, transaction_id_of(request)) + body

    return _reply


def error_reply(message: str) -> Callable[[bytes], bytes]:
    """Build a tracker error reply."""

    def _reply(request: bytes) -> bytes:
        return struct.pack("!II", 3, transaction_id_of(request)) + message.encode()

    return _reply


@pytest.fixture
def fake_transport():
    """Create an empty FakeTransport."""
    return FakeTransport()


@pytest.fixture
def fake_clock():
    """Create a FakeClock."""
    return FakeClock()
