"""Command line interface for btshow."""

from __future__ import annotations

from btshow.cli.main import cli, main

__all__ = ["cli", "main"]
