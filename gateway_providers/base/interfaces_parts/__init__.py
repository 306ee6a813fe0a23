"""Interface parts package; prefer importing from ``base.interfaces``."""

from .capabilities import SupportsJSONSchema, SupportsStreaming
from .constructor import ProviderConstructor
from .provider import Provider

__all__ = ["Provider", "ProviderConstructor", "SupportsJSONSchema", "SupportsStreaming"]
