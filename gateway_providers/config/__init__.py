"""Unified configuration layer for the gateway adapters.

Merge order (later wins)
------------------------
1. Built-in defaults (``DEFAULTS``)
2. Optional external file (JSON or YAML) named by ``PROVIDERS_CONFIG_FILE``
3. Environment variables ``<PROVIDER>_API_KEY``, ``<PROVIDER>_MODEL``,
   ``<PROVIDER>_ENDPOINT`` (``azure-openai`` reads ``AZURE_OPENAI_*``)
4. In-code overrides passed to :func:`get_provider_config`

External Config File
--------------------
JSON is tried first, then YAML. Provider sections are keyed by name; an
optional ``providers`` list declares extra configuration-driven providers::

    openai:
      model: gpt-4o-mini
    providers:
      - name: together
        wire_format: openai
        endpoint: https://api.together.xyz/v1/chat/completions
        supports_schema: true
        supports_streaming: true

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* get_model(provider) -> str | None
* load_provider_configs() -> list[ProviderConfig]
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_ENDPOINT,
    ANTHROPIC_DEFAULT_MODEL,
    BEDROCK_DEFAULT_MODEL,
    BEDROCK_DEFAULT_REGION,
    DEEPSEEK_DEFAULT_ENDPOINT,
    DEEPSEEK_DEFAULT_MODEL,
    GROQ_DEFAULT_ENDPOINT,
    GROQ_DEFAULT_MODEL,
    MISTRAL_DEFAULT_ENDPOINT,
    MISTRAL_DEFAULT_MODEL,
    OPENAI_DEFAULT_ENDPOINT,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_ENDPOINT,
    OPENROUTER_DEFAULT_MODEL,
)
from .env import AWS_REGION_ENVS, env_prefix, is_placeholder, resolve_aws_region, resolve_provider_key
from .settings import GenerationSettings, load_generation_settings

if TYPE_CHECKING:  # pragma: no cover
    from ..base.dto.provider_config import ProviderConfig

CONFIG_FILE_ENV = "PROVIDERS_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "endpoint": OPENAI_DEFAULT_ENDPOINT},
    "azure-openai": {},
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL, "endpoint": ANTHROPIC_DEFAULT_ENDPOINT},
    "groq": {"model": GROQ_DEFAULT_MODEL, "endpoint": GROQ_DEFAULT_ENDPOINT},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL, "endpoint": DEEPSEEK_DEFAULT_ENDPOINT},
    "mistral": {"model": MISTRAL_DEFAULT_MODEL, "endpoint": MISTRAL_DEFAULT_ENDPOINT},
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL, "endpoint": OPENROUTER_DEFAULT_ENDPOINT},
    "bedrock": {"model": BEDROCK_DEFAULT_MODEL, "region": BEDROCK_DEFAULT_REGION},
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "endpoint": "ENDPOINT",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None


def reset_config_cache() -> None:
    """Forget the parsed external file so the next lookup re-reads it."""
    global _FILE_CACHE
    _FILE_CACHE = None


def _parse_config_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return yaml.safe_load(text)


def _load_external_config() -> Dict[str, Any]:
    """Parse the file named by ``PROVIDERS_CONFIG_FILE`` once per process.

    A missing variable or file yields ``{}``. A file that is neither JSON
    nor YAML raises ``yaml.YAMLError``.
    """
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    data: Any = {}
    if path and Path(path).is_file():
        data = _parse_config_text(Path(path).read_text(encoding="utf-8")) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None and not is_placeholder(val):
            out[field] = val
    if "api_key" not in out:
        key, _ = resolve_provider_key(provider)
        if key:
            out["api_key"] = key
    if provider == "bedrock" and any(os.getenv(n) for n in AWS_REGION_ENVS):
        out["region"] = resolve_aws_region()
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged settings mapping for one provider."""
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg
    cfg |= _env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def load_provider_configs() -> List["ProviderConfig"]:
    """Validate the external file's ``providers`` list into config models.

    Raises:
        pydantic.ValidationError: an entry is missing ``name`` or has an
            unknown ``wire_format``.
    """
    from ..base.dto.provider_config import ProviderConfig

    entries = _load_external_config().get("providers") or []
    return [ProviderConfig.model_validate(entry) for entry in entries]


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "GenerationSettings",
    "get_provider_config",
    "get_model",
    "load_generation_settings",
    "load_provider_configs",
    "reset_config_cache",
]
