"""btshow - BitTorrent UDP tracker scrape client."""

from __future__ import annotations

__version__ = "1.0.0"
