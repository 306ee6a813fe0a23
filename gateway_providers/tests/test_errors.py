"""Error taxonomy: codes, retry hints and string form."""

from __future__ import annotations

import pytest

from gateway_providers.base.errors import (
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
from gateway_providers.base.constants import RESPONSE_PARSER_RETRY_ATTEMPTS


@pytest.mark.parametrize(
    "exc, code, retryable",
    [
        (ConfigNotFoundError("m", provider="p"), ErrorCode.NOT_FOUND, False),
        (ProviderNotFoundError("m", provider="p"), ErrorCode.NOT_FOUND, False),
        (UnsupportedCapabilityError("m", provider="p"), ErrorCode.UNSUPPORTED, False),
        (MalformedUpstreamResponseError("m", provider="p"), ErrorCode.MALFORMED_RESPONSE, False),
        (EmptyResponseError("m", provider="p"), ErrorCode.EMPTY_RESPONSE, True),
        (UpstreamAPIError("m", provider="p"), ErrorCode.UPSTREAM_API, True),
        (MissingCredentialsError("m", provider="p"), ErrorCode.AUTH, False),
        (FunctionCallParseError("m", index=0, span="{"), ErrorCode.FUNCTION_CALL_PARSE, False),
    ],
)
def test_codes_and_retry_hints(exc, code, retryable):
    assert isinstance(exc, ProviderError)
    assert exc.code is code
    assert exc.retryable is retryable
    assert is_retryable_generation(exc) is retryable


def test_str_includes_provider_model_and_code():
    exc = UpstreamAPIError("rate limited", provider="openai", model="gpt-4o")
    assert str(exc) == "openai:gpt-4o upstream_api: rate limited"


def test_error_code_is_string_enum():
    assert ErrorCode("not_found") is ErrorCode.NOT_FOUND


def test_retry_hint_constant():
    assert RESPONSE_PARSER_RETRY_ATTEMPTS == 5
