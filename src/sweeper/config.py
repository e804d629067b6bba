"""Configuration management for sweeper."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SweeperConfig:
    """Configuration for the sweeper commands."""

    # Default age threshold for `scan`
    scan_older_than_days: int = 30

    # Levels below each project folder inspected for the newest mtime
    max_depth: int = 3

    # Archive settings
    archive_dest: Path | None = None
    archive_older_than_days: int = 30

    # Default age threshold for `delete`
    delete_older_than_days: int = 90

    # Extra extension -> category mappings for `organize`
    categories: dict[str, str] = field(default_factory=dict)

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / ".config/sweeper/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> SweeperConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        Raises:
            ValueError: If the file is not valid YAML or holds invalid values.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        with config_path.open(encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config in {config_path}: expected a mapping")

        try:
            config = cls._from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid config in {config_path}: {e}") from e
        config.validate()
        return config

    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{name}' must be a mapping")
        return section

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> SweeperConfig:
        """Create config from dictionary."""
        config = cls()

        if "scan" in data:
            scan = cls._section(data, "scan")
            if "older_than_days" in scan:
                config.scan_older_than_days = int(scan["older_than_days"])
            if "max_depth" in scan:
                config.max_depth = int(scan["max_depth"])

        if "archive" in data:
            archive = cls._section(data, "archive")
            if archive.get("destination"):
                config.archive_dest = Path(os.path.expanduser(archive["destination"]))
            if "older_than_days" in archive:
                config.archive_older_than_days = int(archive["older_than_days"])

        if "delete" in data:
            delete = cls._section(data, "delete")
            if "older_than_days" in delete:
                config.delete_older_than_days = int(delete["older_than_days"])

        if "categories" in data:
            config.categories = {str(ext): str(label) for ext, label in cls._section(data, "categories").items()}

        if "logging" in data:
            logging_cfg = cls._section(data, "logging")
            if logging_cfg.get("file"):
                config.log_file = Path(os.path.expanduser(logging_cfg["file"]))
            if "level" in logging_cfg:
                config.log_level = str(logging_cfg["level"]).upper()

        return config

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: On the first invalid setting.

        """
        for name in ("scan_older_than_days", "archive_older_than_days", "delete_older_than_days"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.max_depth < 0:
            raise ValueError("max_depth must not be negative")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "scan": {
                "older_than_days": self.scan_older_than_days,
                "max_depth": self.max_depth,
            },
            "archive": {
                "destination": str(self.archive_dest) if self.archive_dest else None,
                "older_than_days": self.archive_older_than_days,
            },
            "delete": {
                "older_than_days": self.delete_older_than_days,
            },
            "categories": dict(self.categories),
            "logging": {
                "file": str(self.log_file) if self.log_file else None,
                "level": self.log_level,
            },
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
