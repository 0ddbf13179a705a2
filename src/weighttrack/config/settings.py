"""Application settings and configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from weighttrack.errors import ConfigurationError

CONFIG_ENV_VAR = "WEIGHTTRACK_CONFIG"

VALID_LOG_FORMATS = ("plain", "json")
VALID_OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".weighttrack"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "weighttrack.db"


def default_config_path() -> Path:
    """Config file location, honoring WEIGHTTRACK_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _default_config_dir() / "config.yaml"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "plain"  # "plain" or "json"


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    history_days: int = 30
    output_format: str = "table"  # "table" or "json"


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses WEIGHTTRACK_CONFIG
                or ~/.weighttrack/config.yaml

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a value in the file is invalid
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        settings = cls()

        # Parse database config
        if "database" in data:
            db_data = data["database"] or {}
            if "path" in db_data:
                settings.database.path = Path(db_data["path"]).expanduser()

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"] or {}
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()
            if "format" in log_data:
                if log_data["format"] not in VALID_LOG_FORMATS:
                    raise ConfigurationError(
                        f"logging.format must be one of {VALID_LOG_FORMATS}, "
                        f"got '{log_data['format']}'"
                    )
                settings.logging.format = log_data["format"]

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "history_days" in def_data:
                try:
                    settings.defaults.history_days = int(def_data["history_days"])
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(
                        f"defaults.history_days must be an integer, "
                        f"got '{def_data['history_days']}'"
                    ) from e
            if "output_format" in def_data:
                if def_data["output_format"] not in VALID_OUTPUT_FORMATS:
                    raise ConfigurationError(
                        f"defaults.output_format must be one of {VALID_OUTPUT_FORMATS}, "
                        f"got '{def_data['output_format']}'"
                    )
                settings.defaults.output_format = def_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses the default location
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
            "defaults": {
                "history_days": self.defaults.history_days,
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
