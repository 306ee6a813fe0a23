"""
Concrete error conditions raised by the translation layer.

Each class pins a single :class:`ErrorCode` so callers can either catch the
specific condition or the common :class:`ProviderError` base and branch on
``code``. None of these are retried by the core; ``retryable`` is only a
hint for a caller's policy around the whole call.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ConfigNotFoundError(ProviderError):
    """No provider configuration is registered under the requested name."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message, provider=provider, model=model)


class ProviderNotFoundError(ConfigNotFoundError):
    """No adapter constructor is registered under the requested name."""


class UnsupportedCapabilityError(ProviderError):
    """Schema output or streaming was requested from an adapter lacking it."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.UNSUPPORTED, message=message, provider=provider, model=model)


class MalformedUpstreamResponseError(ProviderError):
    """A response body or stream chunk could not be decoded as JSON."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: Optional[str] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_RESPONSE,
            message=message,
            provider=provider,
            model=model,
            raw=raw,
        )


class EmptyResponseError(ProviderError):
    """The body decoded fine but carried no usable content."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_RESPONSE,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
        )


class UpstreamAPIError(ProviderError):
    """The vendor returned a structured error payload; ``message`` is verbatim."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.UPSTREAM_API,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
        )


class MissingCredentialsError(ProviderError):
    """Signing was attempted without access key and secret key material."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, provider=provider, model=model)


class FunctionCallParseError(ProviderError):
    """An embedded ``<function_call>`` span did not contain valid JSON.

    Attributes:
        index: Zero-based position of the offending span in the text.
        span: The raw text found between the tags.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int,
        span: str,
        provider: str = "function_call",
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FUNCTION_CALL_PARSE,
            message=message,
            provider=provider,
            raw=raw,
        )
        self.index = index
        self.span = span


def is_retryable_generation(exc: BaseException) -> bool:
    """Return True when a caller may retry the whole generation call.

    Only empty responses and structured upstream errors qualify; malformed
    bodies, missing credentials and capability errors never do.
    """
    return isinstance(exc, (EmptyResponseError, UpstreamAPIError))


__all__ = [
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
