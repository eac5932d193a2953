"""
Disc golf scorekeeping application.
"""

__version__ = '0.1.0'

from .exceptions import (
    APIError,
    APIResponseError,
    APITimeoutError,
    AuthError,
    CardmateError,
    ConfigError,
    CourseLookupError,
    RoundStateError,
    StoreConstraintError,
    StoreError,
    ValidationError,
)

__all__ = [
    'APIError',
    'APIResponseError',
    'APITimeoutError',
    'AuthError',
    'CardmateError',
    'ConfigError',
    'CourseLookupError',
    'RoundStateError',
    'StoreConstraintError',
    'StoreError',
    'ValidationError',
]
