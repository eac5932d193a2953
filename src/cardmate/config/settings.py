"""Configuration settings for cardmate."""

from pathlib import Path
from typing import Any

import yaml

from cardmate.config.env import EnvConfig
from cardmate.config.logging_config import load_error_aggregation_config
from cardmate.config.logging_config import load_logging_config
from cardmate.config.types import AppConfig
from cardmate.config.types import CourseLookupConfig
from cardmate.config.types import GlobalConfig
from cardmate.config.types import StoreConfig
from cardmate.config.utils import deep_merge
from cardmate.config.utils import get_config_dir
from cardmate.config.utils import get_config_paths
from cardmate.config.validation import validate_config
from cardmate.exceptions import ConfigError


class ConfigurationManager:
    """Centralized configuration management with caching."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config: AppConfig | None = None
        self._config_path: Path | None = None
        self._initialized = True

    @property
    def config(self) -> AppConfig:
        """Get the current configuration, loading it if necessary."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load_config() first.")
        return self._config

    def load_config(self, config_dir: str | None = None) -> AppConfig:
        """Load configuration with caching."""
        if self._config is not None:
            return self._config

        self._config_path = get_config_dir(config_dir)
        self._config = build_app_config(self._config_path, _load_global_config(self._config_path))
        validate_config(self._config)
        return self._config

    def reload_config(self, config_dir: str | None = None) -> AppConfig:
        """Force reload configuration."""
        self._config = None
        return self.load_config(config_dir or (str(self._config_path) if self._config_path else None))

def _load_global_config(config_path: Path) -> GlobalConfig:
    """Load config.yaml merged over defaults; environment variables win."""
    global_config = EnvConfig.get_global_config()

    config_file = get_config_paths(config_path)["config"]
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_file}", {"error": str(e)}) from e
        if not isinstance(loaded_config, dict):
            raise ConfigError(f"Configuration file {config_file} must contain a mapping")
        global_config = deep_merge(global_config, loaded_config)
        EnvConfig.update_config_from_env(global_config)  # type: ignore[arg-type]

    return global_config

def build_app_config(config_path: Path, global_config: GlobalConfig | dict[str, Any]) -> AppConfig:
    """Convert the merged configuration dictionary into an AppConfig."""
    store = dict(global_config.get('store') or {})
    lookup = dict(global_config.get('course_lookup') or {})
    try:
        return AppConfig(
            config_dir=str(config_path),
            user_id=global_config.get('user_id'),
            store=StoreConfig(**store),
            course_lookup=CourseLookupConfig(**lookup),
            preferences_file=global_config.get('preferences_file', 'preferences.json'),
            logging=load_logging_config(global_config.get('logging')),
            error_aggregation=load_error_aggregation_config(global_config.get('error_aggregation')),
        )
    except TypeError as e:
        raise ConfigError(f"Unknown configuration option: {e}") from e

def load_config(config_dir: str | None = None) -> AppConfig:
    """Load configuration using the ConfigurationManager."""
    config_manager = ConfigurationManager()
    return config_manager.load_config(config_dir)
