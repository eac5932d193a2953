"""Centralized error definitions for the cardmate application."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import requests

from cardmate.config.error_aggregator import aggregate_error
from cardmate.error_codes import ErrorCode


logger = logging.getLogger(__name__)

@dataclass
class CardmateError(Exception):
    """Base exception for all cardmate errors."""
    message: str
    code: ErrorCode
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Code: {self.code.value}, Details: {self.details})"
        return f"{self.message} (Code: {self.code.value})"

    @property
    def user_message(self) -> str:
        """Message suitable for showing inline to the user."""
        return self.message

class APIError(CardmateError):
    """Base class for HTTP API errors."""
    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.REQUEST_FAILED,
        response: requests.Response | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, code, details)
        self.response = response

class APITimeoutError(APIError):
    """API timeout error."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.TIMEOUT, details=details)

class APIResponseError(APIError):
    """API response error."""
    def __init__(self, message: str, response: requests.Response | None = None):
        super().__init__(message, ErrorCode.INVALID_RESPONSE, response=response)

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

class APIValidationError(APIError):
    """API validation error."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.VALIDATION_FAILED, details=details)

class CourseLookupError(CardmateError):
    """Course database lookup failed."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.LOOKUP_FAILED, details)

class StoreError(CardmateError):
    """Relational store operation failed."""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORE_ERROR, details: dict[str, Any] | None = None):
        super().__init__(message, code, details)

class StoreConstraintError(StoreError):
    """A write was rejected by a store constraint (foreign key, unique key)."""
    def __init__(self, message: str, table: str, details: dict[str, Any] | None = None):
        details = details or {}
        details["table"] = table
        super().__init__(message, ErrorCode.CONSTRAINT_VIOLATION, details)

class AuthError(CardmateError):
    """Authentication error."""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED, details: dict[str, Any] | None = None):
        super().__init__(message, code, details)

class ConfigError(CardmateError):
    """Configuration error."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)

class ValidationError(CardmateError):
    """Validation error."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.VALIDATION_FAILED, details)

class RoundStateError(CardmateError):
    """Operation not possible in the current round state."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.ROUND_STATE_INVALID, details)

@contextmanager
def handle_errors(
    error_type: type[CardmateError],
    service: str,
    operation: str
) -> Iterator[None]:
    """Log and aggregate errors raised inside the block, then re-raise.

    Args:
        error_type: The expected error type
        service: The service name
        operation: The operation name
    """
    try:
        yield
    except error_type as e:
        logger.warning(f"{service}.{operation} failed: {e}")
        aggregate_error(str(e), service, e.__traceback__)
        raise
    except Exception as e:
        # Log unexpected error with traceback
        logger.error(
            f"Unexpected error in {service}.{operation}: {e}",
            exc_info=True
        )
        aggregate_error(str(e), service, e.__traceback__)
        raise
