"""Configuration management.

This module handles configuration loading and validation.
"""

from __future__ import annotations

from btshow.config.config import (
    Config,
    ConfigManager,
    get_config,
    get_config_manager,
    init_config,
    reload_config,
    reset_config,
    set_config,
)

__all__ = [
    "Config",
    "ConfigManager",
    "get_config",
    "get_config_manager",
    "init_config",
    "reload_config",
    "reset_config",
    "set_config",
]
