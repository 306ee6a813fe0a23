"""Declarative configuration of a configuration-driven provider.

Purpose
-------
A ``ProviderConfig`` fully describes how the generic adapter talks to a
vendor: the wire-format variant selects the translation branch, the rest
supplies endpoint, authentication and capability data. Configs are created
when a registry is built (or registered later) and are read-mostly for the
life of the process, so the model is frozen.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_copy``.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireFormat(str, Enum):
    """Closed set of wire-format variants."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    CUSTOM = "custom"


class ProviderConfig(BaseModel):
    """Wire and capability description for one named provider.

    Attributes
    ----------
    name:
        Registry name, also returned by the adapter's ``name``.
    wire_format:
        Translation branch. ``CUSTOM`` cannot be served by the generic adapter.
    endpoint:
        URL template; ``{model}`` is replaced by the adapter's model id.
        May be empty when callers always set an explicit endpoint.
    auth_header / auth_prefix:
        Header carrying the credential and the text placed before it.
    required_headers:
        Static headers sent with every request.
    endpoint_params:
        Query parameters appended to the endpoint.
    supports_schema / supports_streaming:
        Capability flags checked before a request is built.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    name: str
    wire_format: WireFormat = WireFormat.OPENAI
    endpoint: str = ""
    auth_header: str = "Authorization"
    auth_prefix: str = "Bearer "
    required_headers: Dict[str, str] = Field(default_factory=lambda: {"Content-Type": "application/json"})
    endpoint_params: Dict[str, str] = Field(default_factory=dict)
    supports_schema: bool = False
    supports_streaming: bool = False

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("provider config name must not be blank")
        return value

    @field_validator("wire_format", mode="before")
    @classmethod
    def _coerce_wire_format(cls, value: object) -> object:
        # file-based configs spell variants loosely ("OpenAI", "claude")
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "claude":
                return WireFormat.ANTHROPIC
            return lowered
        return value


__all__ = ["WireFormat", "ProviderConfig"]
