"""Capability marker Protocols.

Callers query these instead of guessing whether structured output is sent
natively or embedded in the prompt.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SupportsJSONSchema(Protocol):
    """Capability for adapters that accept a response schema."""

    def supports_json_schema(self) -> bool:  # pragma: no cover - trivial
        """Return True if schema-constrained requests can be built."""
        ...


@runtime_checkable
class SupportsStreaming(Protocol):
    """Capability for adapters that can build streaming requests."""

    def supports_streaming(self) -> bool:  # pragma: no cover - trivial
        """Return True if ``prepare_stream_request`` is available."""
        ...
