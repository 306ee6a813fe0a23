"""
Provider-agnostic interfaces (Protocols) for the translation layer.

Re-exports the single-class modules under
``gateway_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import (
    Provider,
    ProviderConstructor,
    SupportsJSONSchema,
    SupportsStreaming,
)

__all__ = [
    "Provider",
    "ProviderConstructor",
    "SupportsJSONSchema",
    "SupportsStreaming",
]
