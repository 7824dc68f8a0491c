"""Unit tests for configuration loading."""

from __future__ import annotations

import json

import pytest
import toml

from btshow.config import config as config_module
from btshow.config.config import ConfigManager, get_config, init_config, reload_config
from btshow.models import Config, LogLevel
from btshow.utils.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit, pytest.mark.config]


class TestConfigManager:
    """Test defaults, file and environment layers."""

    def test_defaults(self):
        """Test defaults when no file or environment is present."""
        manager = ConfigManager()

        assert manager.config_file is None
        assert manager.config.tracker.host == "tracker.opentrackr.org:1337"
        assert manager.config.tracker.timeout == 10.0
        assert manager.config.tracker.connection_id_lifetime == 60.0
        assert manager.config.observability.log_level == LogLevel.WARNING

    def test_load_from_file(self, tmp_path):
        """Test values from an explicit TOML file."""
        path = tmp_path / "custom.toml"
        path.write_text(
            '[tracker]\nhost = "udp://epider.me:6969"\ntimeout = 2.5\n',
            encoding="utf-8",
        )

        manager = ConfigManager(path)

        assert manager.config_file == path
        assert manager.config.tracker.host == "udp://epider.me:6969"
        assert manager.config.tracker.timeout == 2.5

    def test_discovers_cwd_file(self, tmp_path):
        """Test btshow.toml in the working directory is picked up."""
        (tmp_path / "btshow.toml").write_text(
            '[observability]\nlog_level = "debug"\n', encoding="utf-8"
        )

        manager = ConfigManager()

        assert manager.config.observability.log_level == LogLevel.DEBUG

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test BTSHOW_* variables win over the file."""
        path = tmp_path / "custom.toml"
        path.write_text('[tracker]\ntimeout = 2.5\n', encoding="utf-8")
        monkeypatch.setenv("BTSHOW_TRACKER_TIMEOUT", "7.5")
        monkeypatch.setenv("BTSHOW_TRACKER_HOST", "example.org:1")
        monkeypatch.setenv("BTSHOW_CONNECTION_ID_LIFETIME", "30")
        monkeypatch.setenv("BTSHOW_STRUCTURED_LOGGING", "true")

        manager = ConfigManager(path)

        assert manager.config.tracker.timeout == 7.5
        assert manager.config.tracker.host == "example.org:1"
        assert manager.config.tracker.connection_id_lifetime == 30.0
        assert manager.config.observability.structured_logging is True

    def test_env_none_timeout(self, monkeypatch):
        """Test a timeout of none disables the receive timeout."""
        monkeypatch.setenv("BTSHOW_TRACKER_TIMEOUT", "none")

        assert ConfigManager().config.tracker.timeout is None

    def test_invalid_value(self, monkeypatch):
        """Test out-of-range values raise ConfigurationError."""
        monkeypatch.setenv("BTSHOW_TRACKER_TIMEOUT", "-1")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigManager()

    def test_invalid_host(self, monkeypatch):
        """Test a tracker host without a port is rejected."""
        monkeypatch.setenv("BTSHOW_TRACKER_HOST", "no-port.example")

        with pytest.raises(ConfigurationError):
            ConfigManager()

    def test_unreadable_file_falls_back(self, tmp_path):
        """Test a malformed TOML file is ignored with defaults applied."""
        path = tmp_path / "broken.toml"
        path.write_text("[tracker\nhost = ", encoding="utf-8")

        manager = ConfigManager(path)

        assert manager.config == Config()

    def test_export_toml_round_trip(self):
        """Test exported TOML parses back to the same values."""
        manager = ConfigManager()

        data = toml.loads(manager.export("toml"))

        assert Config(**data) == manager.config

    def test_export_json(self):
        """Test JSON export."""
        data = json.loads(ConfigManager().export("json"))

        assert data["tracker"]["connection_id_lifetime"] == 60.0

    def test_export_unknown_format(self):
        """Test unsupported export formats are rejected."""
        with pytest.raises(ConfigurationError):
            ConfigManager().export("yaml")


class TestGlobalConfig:
    """Test module-level accessors."""

    def test_get_config_creates_manager(self):
        """Test get_config lazily builds the global manager."""
        assert config_module._config_manager is None

        config = get_config()

        assert isinstance(config, Config)
        assert get_config() is config

    def test_init_config_replaces_global(self, tmp_path):
        """Test init_config installs a manager for the given file."""
        path = tmp_path / "c.toml"
        path.write_text('[tracker]\ntimeout = 3.0\n', encoding="utf-8")

        init_config(path)

        assert get_config().tracker.timeout == 3.0

    def test_reload_picks_up_changes(self, tmp_path):
        """Test reload_config rereads the file."""
        path = tmp_path / "c.toml"
        path.write_text('[tracker]\ntimeout = 3.0\n', encoding="utf-8")
        init_config(path)

        path.write_text('[tracker]\ntimeout = 4.0\n', encoding="utf-8")

        assert reload_config().tracker.timeout == 4.0

    def test_reload_without_init(self):
        """Test reload before initialization fails."""
        with pytest.raises(ConfigurationError):
            reload_config()
