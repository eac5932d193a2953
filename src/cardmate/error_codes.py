"""Error codes for the cardmate application."""

from enum import Enum

class ErrorCode(Enum):
    """Enumeration of all possible error codes."""
    # Authentication Errors
    AUTH_FAILED = "auth_failed"
    NOT_SIGNED_IN = "not_signed_in"
    PROFILE_MISSING = "profile_missing"
    
    # API Errors
    REQUEST_FAILED = "request_failed"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    
    # Data Errors
    INVALID_RESPONSE = "invalid_response"
    MISSING_DATA = "missing_data"
    VALIDATION_FAILED = "validation_failed"
    
    # Configuration Errors
    CONFIG_INVALID = "config_invalid"
    CONFIG_MISSING = "config_missing"
    
    # Store Errors
    STORE_ERROR = "store_error"
    CONSTRAINT_VIOLATION = "constraint_violation"
    
    # Course Lookup Errors
    LOOKUP_FAILED = "lookup_failed"
    
    # Round Errors
    ROUND_STATE_INVALID = "round_state_invalid"
