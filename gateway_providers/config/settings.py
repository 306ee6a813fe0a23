"""Global generation settings.

``GenerationSettings`` is the process-wide configuration adapters seed their
defaults from via ``set_default_options``. Values come from ``LLM_*``
environment variables; unset variables fall back to the package defaults.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field

from .defaults import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE


class GenerationSettings(BaseModel):
    """Sampling defaults applied to every adapter built by the container."""

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    seed: Optional[int] = None


_ENV_FIELDS = {
    "temperature": "LLM_TEMPERATURE",
    "max_tokens": "LLM_MAX_TOKENS",
    "top_p": "LLM_TOP_P",
    "seed": "LLM_SEED",
}


def load_generation_settings(**overrides: object) -> GenerationSettings:
    """Build settings from the environment, then explicit ``overrides``.

    Raises:
        pydantic.ValidationError: a variable or override is out of range or
            not a number.
    """
    data = {field: os.environ[env] for field, env in _ENV_FIELDS.items() if os.environ.get(env)}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationSettings.model_validate(data)


__all__ = ["GenerationSettings", "load_generation_settings"]
