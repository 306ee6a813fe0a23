"""Provider configurations shipped with every registry.

``azure-openai`` has no endpoint: deployments are per-tenant, so callers
set one with ``set_endpoint`` (or register their own config). ``bedrock`` is
``CUSTOM`` because its shapes depend on the model family; it is served by
the signed gateway adapter, never by the generic one.
"""

from __future__ import annotations

from typing import Dict

from ..base.dto.provider_config import ProviderConfig, WireFormat
from ..config.defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_DEFAULT_ENDPOINT,
    BEDROCK_ENDPOINT_TEMPLATE,
    DEEPSEEK_DEFAULT_ENDPOINT,
    GROQ_DEFAULT_ENDPOINT,
    MISTRAL_DEFAULT_ENDPOINT,
    OPENAI_DEFAULT_ENDPOINT,
    OPENROUTER_DEFAULT_ENDPOINT,
)

_JSON = {"Content-Type": "application/json"}


def _openai_shaped(name: str, endpoint: str, *, auth_header: str = "Authorization", auth_prefix: str = "Bearer ") -> ProviderConfig:
    return ProviderConfig(
        name=name,
        wire_format=WireFormat.OPENAI,
        endpoint=endpoint,
        auth_header=auth_header,
        auth_prefix=auth_prefix,
        required_headers=dict(_JSON),
        supports_schema=True,
        supports_streaming=True,
    )


def standard_configs() -> Dict[str, ProviderConfig]:
    """Return a fresh name -> config mapping of the built-in providers."""
    configs = [
        _openai_shaped("openai", OPENAI_DEFAULT_ENDPOINT),
        _openai_shaped("azure-openai", "", auth_header="api-key", auth_prefix=""),
        _openai_shaped("groq", GROQ_DEFAULT_ENDPOINT),
        _openai_shaped("deepseek", DEEPSEEK_DEFAULT_ENDPOINT),
        _openai_shaped("mistral", MISTRAL_DEFAULT_ENDPOINT),
        _openai_shaped("openrouter", OPENROUTER_DEFAULT_ENDPOINT),
        ProviderConfig(
            name="anthropic",
            wire_format=WireFormat.ANTHROPIC,
            endpoint=ANTHROPIC_DEFAULT_ENDPOINT,
            auth_header="x-api-key",
            auth_prefix="",
            required_headers={**_JSON, "anthropic-version": ANTHROPIC_API_VERSION},
            supports_schema=True,
            supports_streaming=True,
        ),
        ProviderConfig(
            name="bedrock",
            wire_format=WireFormat.CUSTOM,
            endpoint=BEDROCK_ENDPOINT_TEMPLATE,
            auth_header="",
            auth_prefix="",
            required_headers=dict(_JSON),
            supports_schema=True,
            supports_streaming=True,
        ),
    ]
    return {c.name: c for c in configs}


__all__ = ["standard_configs"]
