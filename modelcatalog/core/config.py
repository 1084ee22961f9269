"""Configuration management for the model catalog.

The catalog itself is static; configuration only decides which built-in
providers are exposed and fills in a few deployment-specific values. Settings
live in ``~/.modelcatalog.json`` (or a YAML file) and may be redirected with the
``MODELCATALOG_CONFIG`` environment variable.
"""

import json
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from modelcatalog.utils.log import get_logger


logger = get_logger()

CONFIG_ENV_VAR = "MODELCATALOG_CONFIG"
_YAML_SUFFIXES = {".yaml", ".yml"}


class CatalogConfig(BaseModel):
    """User-level catalog settings."""

    model_config = {"populate_by_name": True}

    # Provider keys hidden from the catalog
    disabled_providers: list[str] = Field(default_factory=list)

    # Interpolated into the free-trial provider's long description
    free_trial_limit: int = Field(default=50, ge=0)

    # Console log level override (DEBUG, INFO, WARNING, ...)
    log_level: Optional[str] = None

    # Directory for dated debug log files
    log_dir: Optional[Path] = None

    @field_validator("disabled_providers")
    @classmethod
    def _strip_keys(cls, value: list[str]) -> list[str]:
        return [key.strip() for key in value if key and key.strip()]


def default_config_path() -> Path:
    """Config location, honouring ``MODELCATALOG_CONFIG``."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".modelcatalog.json"


class ConfigManager:
    """Loads and saves the catalog configuration with a cached read."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self.config_path = config_path or default_config_path()
        self._config: Optional[CatalogConfig] = None

    def _read(self) -> dict:
        text = self.config_path.read_text(encoding="utf-8")
        if self.config_path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("configuration root must be a mapping")
        return data

    def get_config(self) -> CatalogConfig:
        """Load and return configuration, falling back to defaults on error."""
        if self._config is None:
            if self.config_path.exists():
                try:
                    self._config = CatalogConfig(**self._read())
                    logger.debug(
                        "[config] Loaded catalog configuration",
                        extra={
                            "path": str(self.config_path),
                            "disabled_providers": len(self._config.disabled_providers),
                        },
                    )
                except (
                    json.JSONDecodeError,
                    yaml.YAMLError,
                    OSError,
                    UnicodeDecodeError,
                    ValidationError,
                    ValueError,
                    TypeError,
                ) as e:
                    logger.warning(
                        "Error loading catalog config: %s: %s",
                        type(e).__name__,
                        e,
                        extra={"error": str(e), "path": str(self.config_path)},
                    )
                    self._config = CatalogConfig()
            else:
                self._config = CatalogConfig()
                logger.debug(
                    "[config] Catalog config not found; using defaults",
                    extra={"path": str(self.config_path)},
                )
        return self._config

    def save_config(self, config: CatalogConfig) -> None:
        """Save configuration as JSON (YAML paths are written as YAML)."""
        self._config = config
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        if self.config_path.suffix.lower() in _YAML_SUFFIXES:
            self.config_path.write_text(
                yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False), encoding="utf-8"
            )
        else:
            self.config_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(
            "[config] Saved catalog configuration",
            extra={"path": str(self.config_path)},
        )

    def invalidate(self) -> None:
        """Drop the cached configuration so the next read hits disk."""
        self._config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the process-wide config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def set_config_path(path: Optional[Path]) -> ConfigManager:
    """Point the process-wide manager at ``path`` (or the default location)."""
    global _config_manager
    _config_manager = ConfigManager(path)
    return _config_manager


def get_config() -> CatalogConfig:
    """Get catalog configuration."""
    return get_config_manager().get_config()


def save_config(config: CatalogConfig) -> None:
    """Save catalog configuration."""
    get_config_manager().save_config(config)
