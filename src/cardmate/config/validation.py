"""Configuration validation utilities."""

import logging
from pathlib import Path

from cardmate.config.types import AppConfig
from cardmate.exceptions import ConfigError

SUPPORTED_BACKENDS = ('sqlite', 'rest')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

def validate_directories(config: AppConfig) -> None:
    """Create the configuration directory and the log directory if needed."""
    Path(config.config_dir).mkdir(parents=True, exist_ok=True)

    if config.logging.file:
        log_dir = Path(config.resolve(config.logging.file)).parent
        log_dir.mkdir(parents=True, exist_ok=True)

def validate_store_config(config: AppConfig) -> None:
    """Validate the relational store section."""
    backend = config.store.backend
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigError(
            f"Unsupported store backend: {backend}",
            {"supported": list(SUPPORTED_BACKENDS)}
        )

    if backend == 'rest':
        missing = [name for name in ('url', 'api_key') if not getattr(config.store, name)]
        if missing:
            raise ConfigError(
                "REST store requires url and api_key",
                {"missing_fields": missing}
            )
        if not config.store.url.startswith(('http://', 'https://')):
            raise ConfigError(f"Invalid store url: {config.store.url}")

def validate_logging_config(config: AppConfig) -> None:
    if config.logging.level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level: {config.logging.level}",
            {"supported": list(LOG_LEVELS)}
        )

def validate_config(config: AppConfig) -> None:
    """
    Validate configuration.

    Args:
        config: AppConfig object to validate

    Raises:
        ConfigError: If configuration is invalid
    """
    validate_store_config(config)
    validate_logging_config(config)
    try:
        validate_directories(config)
    except OSError as e:
        raise ConfigError(
            f"Unable to prepare configuration directories: {e!s}",
            {"config_dir": config.config_dir}
        ) from e
    logging.getLogger(__name__).debug(f"Configuration validated for {config.config_dir}")
