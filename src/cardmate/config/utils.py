"""Configuration utility functions."""

import os
from copy import deepcopy
from pathlib import Path
from typing import Any
from typing import TypeVar


T = TypeVar('T', bound=dict[str, Any])

DEFAULT_CONFIG_DIR = "~/.cardmate"

def deep_merge(base: T, override: T) -> T:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to override base values

    Returns:
        Merged dictionary
    """
    result = deepcopy(base)

    for key, value in override.items():
        if (
            key in result and
            isinstance(result[key], dict) and
            isinstance(value, dict)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result

def resolve_path(
    path: str | Path,
    base_dir: str | Path | None = None,
    create: bool = False
) -> Path:
    """Resolve path relative to base directory.

    Args:
        path: Path to resolve
        base_dir: Base directory for relative paths
        create: Whether to create the directory

    Returns:
        Resolved Path object
    """
    path = Path(path).expanduser()

    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir).expanduser() / path

    if create:
        path.mkdir(parents=True, exist_ok=True)

    return path

def get_config_dir(config_dir: str | Path | None = None) -> Path:
    """Configuration directory from argument, environment or default."""
    return resolve_path(config_dir or os.getenv("CARDMATE_CONFIG_DIR", DEFAULT_CONFIG_DIR))

def get_config_paths(config_dir: str | Path | None = None) -> dict[str, Path]:
    """Get configuration file paths.

    Args:
        config_dir: Base configuration directory
    """
    base_path = get_config_dir(config_dir)
    return {
        'config': base_path / 'config.yaml',
    }
