"""Logging configuration utilities."""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from cardmate.config.logging_config import LoggingConfig
from cardmate.config.logging_filters import SensitiveDataFilter


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_timestamp: bool = True):
        """Initialize formatter.

        Args:
            include_timestamp: Whether to include timestamp in output
        """
        self.include_timestamp = include_timestamp
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        data: dict[str, Any] = {
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if self.include_timestamp:
            data['timestamp'] = datetime.fromtimestamp(record.created).isoformat()

        if record.exc_info:
            data['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            data.update(record.extra_fields)

        return json.dumps(data, default=str)

class ColoredFormatter(logging.Formatter):
    """Formatter that adds color to console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with color."""
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S,%f')[:-3]
        msg = record.getMessage()

        context = ""
        if hasattr(record, 'extra_fields'):
            fields = [f"\n    {key}: {value}" for key, value in record.extra_fields.items()]
            if fields:
                context = " |" + "".join(fields)

        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        line = f"{timestamp} - {record.name} - {record.levelname} - {msg}{context}"
        if not self.use_color:
            return line
        color = self.COLORS.get(record.levelname, self.RESET)
        return f"{color}{line}{self.RESET}"

def get_console_handler(formatter: logging.Formatter) -> logging.StreamHandler:
    """Create console handler writing to stderr, leaving stdout to command output."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    return console_handler

def get_file_handler(
    log_file: str | Path,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int
) -> logging.handlers.RotatingFileHandler:
    """Create rotating file handler.

    Args:
        log_file: Path to log file
        formatter: Formatter to use
        max_bytes: Maximum file size in bytes
        backup_count: Number of backup files to keep
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count
    )
    file_handler.setFormatter(formatter)
    return file_handler

def setup_logging(
    config: LoggingConfig | None = None,
    dev_mode: bool = False,
    verbose: bool = False,
    log_file: str | None = None
) -> None:
    """Set up logging configuration."""
    config = config or LoggingConfig()

    if dev_mode:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = getattr(logging, config.level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    sensitive_filter = SensitiveDataFilter(set(config.sensitive_fields))

    console_handler = get_console_handler(ColoredFormatter(use_color=sys.stderr.isatty()))
    console_handler.setLevel(level)
    console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    target_file = log_file or config.file
    if target_file:
        formatter: logging.Formatter
        if config.json_file:
            formatter = JsonFormatter(include_timestamp=True)
        else:
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler = get_file_handler(
            target_file,
            formatter,
            config.max_size * 1024 * 1024,
            config.backup_count
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(sensitive_filter)
        root_logger.addHandler(file_handler)
        # File handler sees everything; the console keeps its own threshold
        root_logger.setLevel(logging.DEBUG)

    # Quiet down chatty libraries unless in dev mode
    if not dev_mode:
        for library, library_level in config.libraries.items():
            logging.getLogger(library).setLevel(getattr(logging, library_level.upper(), logging.WARNING))
