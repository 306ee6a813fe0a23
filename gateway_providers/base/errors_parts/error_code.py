"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration used across provider adapters, the
registry and the request signer. Values are lowercase snake_case and are
considered a stable public contract for logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    NOT_FOUND = "not_found"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_RESPONSE = "empty_response"
    UPSTREAM_API = "upstream_api"
    FUNCTION_CALL_PARSE = "function_call_parse"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
