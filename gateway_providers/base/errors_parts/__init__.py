"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `gateway_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .conditions import (
    ConfigNotFoundError,
    EmptyResponseError,
    FunctionCallParseError,
    MalformedUpstreamResponseError,
    MissingCredentialsError,
    ProviderNotFoundError,
    UnsupportedCapabilityError,
    UpstreamAPIError,
    is_retryable_generation,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigNotFoundError",
    "ProviderNotFoundError",
    "UnsupportedCapabilityError",
    "MalformedUpstreamResponseError",
    "EmptyResponseError",
    "UpstreamAPIError",
    "MissingCredentialsError",
    "FunctionCallParseError",
    "is_retryable_generation",
]
