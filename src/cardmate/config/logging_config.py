"""Logging configuration types and loading utilities."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

@dataclass
class ErrorAggregationConfig:
    """Error aggregation configuration."""
    enabled: bool = False
    report_interval: int = 3600
    error_threshold: int = 5
    time_threshold: int = 300
    categorize_by: List[str] = field(default_factory=lambda: ['service'])

@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: Optional[str] = None
    max_size: int = 10  # in MB
    backup_count: int = 5
    json_file: bool = True
    sensitive_fields: List[str] = field(
        default_factory=lambda: ['api_key', 'apikey', 'key', 'token', 'access_token', 'authorization', 'password']
    )
    libraries: Dict[str, str] = field(default_factory=lambda: {'urllib3': 'WARNING', 'requests': 'WARNING'})

def load_logging_config(config_dict: Optional[Dict[str, Any]] = None) -> LoggingConfig:
    """Build a LoggingConfig from the ``logging`` section of config.yaml."""
    config_dict = dict(config_dict or {})
    known = {k: v for k, v in config_dict.items() if k in LoggingConfig.__dataclass_fields__}
    return LoggingConfig(**known)

def load_error_aggregation_config(config_dict: Optional[Dict[str, Any]] = None) -> ErrorAggregationConfig:
    """Build an ErrorAggregationConfig from the ``error_aggregation`` section."""
    config_dict = dict(config_dict or {})
    known = {k: v for k, v in config_dict.items() if k in ErrorAggregationConfig.__dataclass_fields__}
    return ErrorAggregationConfig(**known)
