"""gateway_providers.config.env
============================

Environment variable mapping for provider credentials.

Purpose
-------
- Map provider names to the environment variables holding their API keys
  (canonical name first, then aliases).
- Resolve the AWS credential triple and region used by the signed gateway
  adapter.

Failure Modes
-------------
Helpers never raise for unknown providers or unset variables; they return
``None`` (or empty credentials) and let the caller decide. Signing is where
missing AWS material becomes an error.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .defaults import BEDROCK_DEFAULT_REGION

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "azure-openai": "AZURE_OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "anthropic": ("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"),
    "azure-openai": ("AZURE_OPENAI_API_KEY", "AZURE_API_KEY"),
}

AWS_ACCESS_KEY_ENV = "AWS_ACCESS_KEY_ID"
AWS_SECRET_KEY_ENV = "AWS_SECRET_ACCESS_KEY"  # pragma: allowlist secret - env var name
AWS_SESSION_TOKEN_ENV = "AWS_SESSION_TOKEN"
AWS_REGION_ENVS = ("AWS_REGION", "AWS_DEFAULT_REGION")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder or test token.

    Heuristics: contains 'placeholder', 'changeme' or 'example', or starts
    with 'test_'. Case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def env_prefix(provider: str) -> str:
    """Environment prefix for a provider name (``azure-openai`` -> ``AZURE_OPENAI``)."""
    return (provider or "").strip().upper().replace("-", "_")


def get_env_var_name(provider: str) -> Optional[str]:
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable env var names for ``provider``, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first non-empty, non-placeholder key."""
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


@dataclass(frozen=True)
class AwsCredentials:
    """Resolved signing material. ``repr`` never shows the secret parts."""

    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""
    region: str = BEDROCK_DEFAULT_REGION

    @property
    def complete(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    def __repr__(self) -> str:
        return f"AwsCredentials(access_key_id={self.access_key_id[:4]!r}..., region={self.region!r})"


def resolve_aws_region(default: str = BEDROCK_DEFAULT_REGION) -> str:
    """``AWS_REGION`` then ``AWS_DEFAULT_REGION`` then ``default``."""
    for name in AWS_REGION_ENVS:
        if val := os.environ.get(name):
            return val
    return default


def resolve_aws_credentials() -> AwsCredentials:
    """Read the AWS credential triple and region from the environment."""
    return AwsCredentials(
        access_key_id=os.environ.get(AWS_ACCESS_KEY_ENV, ""),
        secret_access_key=os.environ.get(AWS_SECRET_KEY_ENV, ""),
        session_token=os.environ.get(AWS_SESSION_TOKEN_ENV, ""),
        region=resolve_aws_region(),
    )


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "AwsCredentials",
    "is_placeholder",
    "env_prefix",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "resolve_aws_region",
    "resolve_aws_credentials",
]
