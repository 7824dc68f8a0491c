"""Time/clock abstraction to aid testability of connection expiry."""

from __future__ import annotations

import time as _time


class Clock:
    """Clock abstraction to aid testability."""

    def now(self) -> float:
        """Return a monotonic timestamp in seconds."""
        return _time.monotonic()
