"""Pytest configuration for the gateway providers test suite.

Every test starts from a clean environment: provider keys, AWS credentials,
``LLM_*`` settings and the external config file variable are removed, and
the parsed config file cache is reset.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from gateway_providers.base.models import CanonicalMessage
from gateway_providers.config import CONFIG_FILE_ENV, reset_config_cache
from gateway_providers.config.env import AwsCredentials

_ENV_VARS = (
    CONFIG_FILE_ENV,
    "PROVIDERS_LOG_LEVEL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_ENDPOINT",
    "ANTHROPIC_API_KEY",
    "CLAUDE_API_KEY",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_API_KEY",
    "GROQ_API_KEY",
    "BEDROCK_MODEL",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS",
    "LLM_TOP_P",
    "LLM_SEED",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def aws_credentials() -> AwsCredentials:
    """Static credentials from the public SigV4 documentation examples."""
    return AwsCredentials(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",  # pragma: allowlist secret
        region="us-east-1",
    )


@pytest.fixture()
def conversation() -> list:
    return [
        CanonicalMessage(role="system", content="Be terse"),
        CanonicalMessage(role="user", content="Hi"),
        CanonicalMessage(role="assistant", content="Hello."),
        CanonicalMessage(role="user", content="Weather?"),
    ]
