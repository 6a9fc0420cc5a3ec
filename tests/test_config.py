"""
Tests for Config — layered YAML settings

These tests validate:
- Config hierarchy (env > project > user > defaults)
- Validation returning error messages
- get/set with section.setting keys
"""

import yaml
import pytest

from ambit.config import Config, ConfigManager, DisplayConfig, LoggingConfig, ScanConfig
from ambit.parsing.scanner import DEFAULT_EXCLUDE_DIRS


@pytest.fixture
def manager(tmp_path, monkeypatch):
    monkeypatch.delenv("AMBIT_FORMAT", raising=False)
    monkeypatch.delenv("AMBIT_LOG_LEVEL", raising=False)
    project = tmp_path / "project"
    project.mkdir()
    return ConfigManager(project, user_dir=tmp_path / "home" / ".ambit")


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))


class TestDefaults:
    """Default values and validation."""

    def test_defaults(self, manager):
        config = manager.load()
        assert config.display.format == "text"
        assert config.display.symbols == "auto"
        assert config.scan.exclude_dirs == list(DEFAULT_EXCLUDE_DIRS)
        assert config.scan.max_file_size == 300_000
        assert config.logging.level == "WARNING"
        assert config.logging.event_log is None
        assert config.validate() is None

    def test_display_validation(self):
        assert "Unknown format" in DisplayConfig(format="xml").validate()
        assert "Unknown symbols" in DisplayConfig(symbols="emoji").validate()

    def test_scan_validation(self):
        assert ScanConfig(max_file_size=0).validate() is not None
        assert ScanConfig(exclude_dirs=[""]).validate() is not None

    def test_logging_validation(self):
        assert LoggingConfig(level="debug").validate() is None
        assert "Unknown log level" in LoggingConfig(level="LOUD").validate()

    def test_round_trip_dict(self):
        config = Config()
        config.display.format = "csv"
        assert Config.from_dict(config.to_dict()) == config


class TestHierarchy:
    """Layer precedence."""

    def test_user_config(self, manager):
        write_yaml(manager.user_config_path, {"display": {"format": "json"}})
        assert manager.load().display.format == "json"

    def test_project_overrides_user(self, manager):
        write_yaml(manager.user_config_path, {"display": {"format": "json", "symbols": "ascii"}})
        write_yaml(manager.project_config_path, {"display": {"format": "csv"}})
        config = manager.load()
        assert config.display.format == "csv"
        # Deep merge keeps the user's other display settings
        assert config.display.symbols == "ascii"

    def test_environment_overrides_files(self, manager, monkeypatch):
        write_yaml(manager.project_config_path, {"display": {"format": "csv"}, "logging": {"level": "INFO"}})
        monkeypatch.setenv("AMBIT_FORMAT", "json")
        monkeypatch.setenv("AMBIT_LOG_LEVEL", "DEBUG")
        config = manager.load()
        assert config.display.format == "json"
        assert config.logging.level == "DEBUG"

    def test_malformed_file_is_ignored(self, manager):
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("display: [unclosed\n")
        assert manager.load().display.format == "text"

    def test_non_mapping_file_is_ignored(self, manager):
        write_yaml(manager.project_config_path, ["a", "b"])
        assert manager.load().display.format == "text"


class TestGetSet:
    """section.setting access."""

    def test_set_persists_to_project(self, manager):
        assert manager.set("display.format", "json") is None
        data = yaml.safe_load(manager.project_config_path.read_text())
        assert data["display"]["format"] == "json"
        assert ConfigManager(manager.project_dir, user_dir=manager.user_dir).get("display.format") == "json"

    def test_set_user_scope(self, manager):
        assert manager.set("logging.level", "info", scope="user") is None
        assert manager.user_config_path.exists()
        assert manager.get("logging.level") == "INFO"

    def test_set_exclude_dirs(self, manager):
        assert manager.set("scan.exclude_dirs", "vendor, out") is None
        assert manager.get("scan.exclude_dirs") == "vendor,out"

    def test_set_invalid_value(self, manager):
        error = manager.set("display.format", "xml")
        assert "Unknown format" in error
        assert not manager.project_config_path.exists()
        assert manager.get("display.format") == "text"

    def test_set_bad_integer(self, manager):
        assert "positive integer" in manager.set("scan.max_file_size", "big")

    @pytest.mark.parametrize("key,fragment", [
        ("format", "Invalid key format"),
        ("display.colour", "Unknown display setting"),
        ("llm.provider", "Unknown section"),
    ])
    def test_set_bad_keys(self, manager, key, fragment):
        assert fragment in manager.set(key, "x")

    def test_get_unknown(self, manager):
        assert manager.get("display.colour") is None
        assert manager.get("nope") is None

    def test_display(self, manager):
        text = manager.display()
        assert "Format: text" in text
        assert str(manager.project_config_path) in text
