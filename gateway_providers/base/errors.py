"""Unified provider error taxonomy public surface.

This module re-exports the implementations under
``gateway_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts import (
    ConfigNotFoundError,
    EmptyResponseError,
    ErrorCode,
    FunctionCallParseError,
    MalformedUpstreamResponseError,
    MissingCredentialsError,
    ProviderError,
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
