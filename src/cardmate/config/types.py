"""Configuration type definitions."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, TypedDict

from cardmate.config.logging_config import ErrorAggregationConfig, LoggingConfig

DEFAULT_DGCR_URL = "https://www.dgcoursereview.com/api_test"

class StoreSection(TypedDict, total=False):
    """``store`` section of config.yaml."""
    backend: str
    path: str
    url: str
    api_key: str
    access_token: str

class CourseLookupSection(TypedDict, total=False):
    """``course_lookup`` section of config.yaml."""
    base_url: str
    api_key: str

class LoggingSection(TypedDict, total=False):
    """``logging`` section of config.yaml."""
    level: str
    file: Optional[str]
    max_size: int  # in MB
    backup_count: int

class GlobalConfig(TypedDict, total=False):
    """Raw configuration structure after merging environment and file."""
    user_id: Optional[str]
    store: StoreSection
    course_lookup: CourseLookupSection
    preferences_file: str
    logging: LoggingSection
    error_aggregation: Dict[str, Any]

@dataclass
class StoreConfig:
    """Relational store connection settings."""
    backend: str = "sqlite"
    path: str = "cardmate.db"
    url: Optional[str] = None
    api_key: Optional[str] = None
    access_token: Optional[str] = None

@dataclass
class CourseLookupConfig:
    """Course database lookup settings."""
    base_url: str = DEFAULT_DGCR_URL
    api_key: str = ""

@dataclass
class AppConfig:
    """Application configuration."""
    config_dir: str
    user_id: Optional[str] = None
    store: StoreConfig = field(default_factory=StoreConfig)
    course_lookup: CourseLookupConfig = field(default_factory=CourseLookupConfig)
    preferences_file: str = "preferences.json"
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    error_aggregation: ErrorAggregationConfig = field(default_factory=ErrorAggregationConfig)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return getattr(self, key, default)

    def resolve(self, path: str) -> str:
        """Resolve a path relative to the configuration directory."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return str(candidate)
        return str(Path(self.config_dir) / candidate)

    @property
    def store_path(self) -> str:
        return self.resolve(self.store.path)

    @property
    def preferences_path(self) -> str:
        return self.resolve(self.preferences_file)
