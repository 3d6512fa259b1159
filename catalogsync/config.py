"""
Configuration - settings file and environment.
Values come from the dataclass defaults, then an optional JSON settings
file, then CATALOGSYNC_* environment variables (a .env file is honoured).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from catalogsync.utils.json_utils import load_json, save_json

logger = logging.getLogger("catalogsync.config")


__all__ = ["Config", "ENV_PREFIX", "load_config"]

ENV_PREFIX = "CATALOGSYNC_"


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """
    Central configuration for catalog reconciliation.
    Locations, the reference locale and output settings.
    """

    SETTINGS_FILE: Path = Path("catalogsync.json")

    LOCALES_DIR: Path = Path("locales")
    REFERENCE_LOCALE: str = "en"

    # Output
    JSON_INDENT: int = 2
    TOP_SECTIONS: int = 10

    # Backups taken before a catalog is overwritten
    CREATE_BACKUPS: bool = True
    MAX_BACKUPS: int = 5
    BACKUP_DIR: Path | None = None  # None = <LOCALES_DIR>/backups

    # Remote patch sources
    HTTP_TIMEOUT: float = 10.0

    LOG_LEVEL: str = "INFO"

    def load(self, use_env: bool = True) -> Config:
        """Apply the settings file and environment on top of the current values."""
        self._load_settings()
        if use_env:
            self._load_env()
        return self

    def _load_settings(self) -> None:
        """Load settings from the JSON settings file, if present."""
        if not self.SETTINGS_FILE.exists():
            return

        data = load_json(self.SETTINGS_FILE)
        if not isinstance(data, dict):
            logger.error("Settings file %s must contain a JSON object", self.SETTINGS_FILE)
            return

        base = self.SETTINGS_FILE.parent
        if data.get("locales_dir"):
            self.LOCALES_DIR = base / data["locales_dir"]
        if data.get("backup_dir"):
            self.BACKUP_DIR = base / data["backup_dir"]
        self.REFERENCE_LOCALE = data.get("reference_locale", self.REFERENCE_LOCALE)
        self.LOG_LEVEL = data.get("log_level", self.LOG_LEVEL)

        create_backups = data.get("create_backups", self.CREATE_BACKUPS)
        if isinstance(create_backups, str):
            create_backups = _to_bool(create_backups)
        self.CREATE_BACKUPS = bool(create_backups)

        for key, attr, convert in (
            ("json_indent", "JSON_INDENT", int),
            ("top_sections", "TOP_SECTIONS", int),
            ("max_backups", "MAX_BACKUPS", int),
            ("http_timeout", "HTTP_TIMEOUT", float),
        ):
            if key not in data:
                continue
            try:
                setattr(self, attr, convert(data[key]))
            except (TypeError, ValueError) as e:
                logger.error("Invalid value for '%s' in %s: %s", key, self.SETTINGS_FILE, e)

    def _load_env(self) -> None:
        """Override values from CATALOGSYNC_* environment variables."""
        load_dotenv()

        def env(name: str) -> str | None:
            return os.getenv(ENV_PREFIX + name) or None

        if env("LOCALES_DIR"):
            self.LOCALES_DIR = Path(env("LOCALES_DIR"))
        if env("BACKUP_DIR"):
            self.BACKUP_DIR = Path(env("BACKUP_DIR"))
        if env("REFERENCE_LOCALE"):
            self.REFERENCE_LOCALE = env("REFERENCE_LOCALE")
        if env("CREATE_BACKUPS"):
            self.CREATE_BACKUPS = _to_bool(env("CREATE_BACKUPS"))
        if env("LOG_LEVEL"):
            self.LOG_LEVEL = env("LOG_LEVEL")
        try:
            if env("JSON_INDENT"):
                self.JSON_INDENT = int(env("JSON_INDENT"))
            if env("MAX_BACKUPS"):
                self.MAX_BACKUPS = int(env("MAX_BACKUPS"))
            if env("HTTP_TIMEOUT"):
                self.HTTP_TIMEOUT = float(env("HTTP_TIMEOUT"))
        except ValueError as e:
            logger.error("Invalid numeric setting in environment: %s", e)

    @property
    def backup_dir(self) -> Path:
        return self.BACKUP_DIR if self.BACKUP_DIR else self.LOCALES_DIR / "backups"

    def _relative_to_settings(self, path: Path) -> str:
        # stored the way _load_settings reads it back
        if path.is_absolute():
            return str(path)
        return os.path.relpath(path, self.SETTINGS_FILE.parent)

    def save(self) -> bool:
        """Save the current configuration to the settings file."""
        data = {
            "locales_dir": self._relative_to_settings(self.LOCALES_DIR),
            "reference_locale": self.REFERENCE_LOCALE,
            "json_indent": self.JSON_INDENT,
            "top_sections": self.TOP_SECTIONS,
            "create_backups": self.CREATE_BACKUPS,
            "max_backups": self.MAX_BACKUPS,
            "backup_dir": self._relative_to_settings(self.BACKUP_DIR) if self.BACKUP_DIR else None,
            "http_timeout": self.HTTP_TIMEOUT,
            "log_level": self.LOG_LEVEL,
        }
        return save_json(self.SETTINGS_FILE, data)


def load_config(settings_file: Path | None = None, use_env: bool = True) -> Config:
    """Build a Config from defaults, the settings file and the environment.

    Args:
        settings_file: Settings file to read instead of the default.
        use_env: Read CATALOGSYNC_* variables (and a .env file).

    Returns:
        The populated Config.
    """
    cfg = Config() if settings_file is None else Config(SETTINGS_FILE=settings_file)
    return cfg.load(use_env=use_env)
