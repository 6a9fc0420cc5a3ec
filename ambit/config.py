"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (AMBIT_FORMAT, AMBIT_LOG_LEVEL)
  2. Project config (.ambit/config.yaml)
  3. User config (~/.ambit/config.yaml)
  4. Defaults
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .parsing.scanner import DEFAULT_EXCLUDE_DIRS, DEFAULT_MAX_FILE_SIZE


logger = logging.getLogger(__name__)

VALID_SYMBOLS = ("unicode", "ascii", "auto")
VALID_FORMATS = ("text", "csv", "json")
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "text"   # "text" | "csv" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.symbols not in VALID_SYMBOLS:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(VALID_SYMBOLS)}"
        if self.format not in VALID_FORMATS:
            return f"Unknown format '{self.format}'. Valid: {', '.join(VALID_FORMATS)}"
        return None


@dataclass
class ScanConfig:
    """Project scan settings."""
    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not isinstance(self.max_file_size, int) or self.max_file_size <= 0:
            return f"max_file_size must be a positive integer, got '{self.max_file_size}'"
        if any(not isinstance(d, str) or not d for d in self.exclude_dirs):
            return "exclude_dirs must be a list of directory names"
        return None


@dataclass
class LoggingConfig:
    """Diagnostics and event-log settings."""
    level: str = "WARNING"
    event_log: Optional[str] = None  # path; None = no event log

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.level.upper() not in VALID_LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(VALID_LEVELS)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.display, self.scan, self.logging):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format,
            },
            "scan": {
                "exclude_dirs": list(self.scan.exclude_dirs),
                "max_file_size": self.scan.max_file_size,
            },
            "logging": {
                "level": self.logging.level,
                "event_log": self.logging.event_log,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        display_data = data.get("display") or {}
        scan_data = data.get("scan") or {}
        logging_data = data.get("logging") or {}

        return cls(
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "text"),
            ),
            scan=ScanConfig(
                exclude_dirs=list(scan_data.get("exclude_dirs", DEFAULT_EXCLUDE_DIRS)),
                max_file_size=scan_data.get("max_file_size", DEFAULT_MAX_FILE_SIZE),
            ),
            logging=LoggingConfig(
                level=logging_data.get("level", "WARNING"),
                event_log=logging_data.get("event_log"),
            ),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment
      2. Project config (.ambit/config.yaml)
      3. User config (~/.ambit/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".ambit"
    USER_CONFIG_FILE = "config.yaml"
    PROJECT_CONFIG_DIR = ".ambit"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.user_dir = Path(user_dir) if user_dir else self.USER_CONFIG_DIR
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.user_dir / self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("AMBIT_FORMAT"):
            config_data.setdefault("display", {})["format"] = os.environ["AMBIT_FORMAT"]
        if os.environ.get("AMBIT_LOG_LEVEL"):
            config_data.setdefault("logging", {})["level"] = os.environ["AMBIT_LOG_LEVEL"]

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        """Read one config layer; a missing or malformed file is skipped."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.format")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.format')"

        section, setting = parts

        if section == "display":
            if setting == "symbols":
                config.display.symbols = value
            elif setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols, format"
            error = config.display.validate()

        elif section == "scan":
            if setting == "exclude_dirs":
                config.scan.exclude_dirs = [d.strip() for d in value.split(",") if d.strip()]
            elif setting == "max_file_size":
                try:
                    config.scan.max_file_size = int(value)
                except ValueError:
                    return f"max_file_size must be a positive integer, got '{value}'"
            else:
                return f"Unknown scan setting: {setting}. Valid: exclude_dirs, max_file_size"
            error = config.scan.validate()

        elif section == "logging":
            if setting == "level":
                config.logging.level = value.upper()
            elif setting == "event_log":
                config.logging.event_log = value or None
            else:
                return f"Unknown logging setting: {setting}. Valid: level, event_log"
            error = config.logging.validate()

        else:
            return f"Unknown section: {section}. Valid: display, scan, logging"

        if error:
            # Drop the invalid in-memory value
            self._config = None
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "display":
            if setting == "symbols":
                return config.display.symbols
            elif setting == "format":
                return config.display.format
        elif section == "scan":
            if setting == "exclude_dirs":
                return ",".join(config.scan.exclude_dirs)
            elif setting == "max_file_size":
                return str(config.scan.max_file_size)
        elif section == "logging":
            if setting == "level":
                return config.logging.level
            elif setting == "event_log":
                return config.logging.event_log

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()

        lines = [
            "Configuration:",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
            "",
            "Scan:",
            f"  Exclude dirs: {', '.join(config.scan.exclude_dirs)}",
            f"  Max file size: {config.scan.max_file_size}",
            "",
            "Logging:",
            f"  Level: {config.logging.level}",
            f"  Event log: {config.logging.event_log or '(none)'}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
