"""ProviderConstructor Protocol (single-class module)."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

from .provider import Provider


class ProviderConstructor(Protocol):
    """Callable the registry invokes to build an adapter.

    Takes ``(credential, model, extra_headers)``. Configuration-driven
    constructors raise ``ConfigNotFoundError`` when their config is missing.
    """

    def __call__(
        self, api_key: str, model: str, extra_headers: Optional[Mapping[str, str]] = None
    ) -> Provider:  # pragma: no cover - protocol
        ...
