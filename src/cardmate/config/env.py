"""Environment variable handling for configuration."""

import os
from typing import Any

from cardmate.config.types import DEFAULT_DGCR_URL
from cardmate.config.types import GlobalConfig


class EnvConfig:
    """Environment variable configuration."""

    # Mapping of environment variables to configuration paths
    ENV_MAPPING = {
        'CARDMATE_USER_ID': ('user_id',),
        'CARDMATE_STORE_BACKEND': ('store', 'backend'),
        'CARDMATE_STORE_PATH': ('store', 'path'),
        'CARDMATE_STORE_URL': ('store', 'url'),
        'CARDMATE_STORE_API_KEY': ('store', 'api_key'),
        'CARDMATE_STORE_ACCESS_TOKEN': ('store', 'access_token'),
        'CARDMATE_DGCR_URL': ('course_lookup', 'base_url'),
        'CARDMATE_DGCR_API_KEY': ('course_lookup', 'api_key'),
        'CARDMATE_PREFERENCES_FILE': ('preferences_file',),
        'CARDMATE_LOG_LEVEL': ('logging', 'level'),
        'CARDMATE_LOG_FILE': ('logging', 'file'),
    }

    @staticmethod
    def get_env_value(env_var: str, default: Any | None = None) -> Any | None:
        """Get value from environment variable with default."""
        return os.getenv(env_var, default)

    @staticmethod
    def _set_nested_value(config: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
        """Set value in nested dictionary using path tuple."""
        current = config
        for part in path[:-1]:
            if part not in current or current[part] is None:
                current[part] = {}
            current = current[part]
        current[path[-1]] = value

    @classmethod
    def update_config_from_env(cls, config: dict[str, Any]) -> None:
        """Update configuration dictionary with environment variables.

        Args:
            config: Configuration dictionary to update
        """
        for env_var, path in cls.ENV_MAPPING.items():
            value = cls.get_env_value(env_var)
            if value is not None:
                cls._set_nested_value(config, path, value)

    @classmethod
    def get_global_config(cls) -> GlobalConfig:
        """Get default configuration, with environment values applied."""
        config: GlobalConfig = {
            'user_id': None,
            'store': {
                'backend': 'sqlite',
                'path': 'cardmate.db',
            },
            'course_lookup': {
                'base_url': DEFAULT_DGCR_URL,
                'api_key': '',
            },
            'preferences_file': 'preferences.json',
            'logging': {
                'level': 'WARNING',
                'file': None,
                'max_size': 10,
                'backup_count': 5,
            },
            'error_aggregation': {},
        }
        cls.update_config_from_env(config)  # type: ignore[arg-type]
        return config
