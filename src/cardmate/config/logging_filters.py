"""Logging filters."""

import logging
import re
from typing import Any


class SensitiveDataFilter(logging.Filter):
    """Filter to mask API keys and tokens in log records."""

    MASK = '***MASKED***'

    def __init__(self, sensitive_fields: set[str] | None = None):
        """Initialize filter.

        Args:
            sensitive_fields: Set of field names to mask
        """
        super().__init__()
        self.sensitive_fields = {f.lower() for f in (sensitive_fields or {
            'api_key', 'apikey', 'key', 'token', 'access_token', 'authorization', 'password'
        })}
        names = "|".join(sorted(re.escape(f) for f in self.sensitive_fields))
        # key=value pairs as they appear in query strings and context suffixes
        self._pattern = re.compile(rf"(?i)\b({names})=([^&\s|]+)")

    def _mask_sensitive_data(self, obj: Any) -> Any:
        """Recursively mask sensitive data in object."""
        if isinstance(obj, dict):
            return {
                k: self.MASK if str(k).lower() in self.sensitive_fields else self._mask_sensitive_data(v)
                for k, v in obj.items()
            }
        if isinstance(obj, list):
            return [self._mask_sensitive_data(item) for item in obj]
        return obj

    def mask_text(self, text: str) -> str:
        return self._pattern.sub(lambda m: f"{m.group(1)}={self.MASK}", text)

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in log record."""
        if hasattr(record, 'extra_fields'):
            record.extra_fields = self._mask_sensitive_data(record.extra_fields)
        message = record.getMessage()
        masked = self.mask_text(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True
