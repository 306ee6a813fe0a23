"""gateway_providers package

Wire-format translation layer between one canonical request model and the
JSON shapes of multiple LLM vendors.

Purpose:
    Build vendor request bodies and headers, decode vendor responses and
    stream chunks back into a canonical :class:`Response` or
    :class:`StreamEvent`, and sign gateway requests. Transport is the
    caller's job: adapters never open connections.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Registry and DI: :class:`ProviderRegistry`, :class:`ProvidersContainer`,
      :func:`create`
    - Canonical model: :class:`RequestBuilder`, :class:`CanonicalMessage`,
      :class:`Response`, :class:`StreamEvent`
"""

from typing import Mapping, Optional

from .base.errors import ErrorCode, ProviderError
from .base.interfaces import Provider
from .base.models import CanonicalMessage, CanonicalRequest, RequestBuilder, Response, ToolSpec
from .base.registry import ProviderRegistry
from .base.streaming import StreamEvent, StreamSignal, accumulate_events, decode_stream
from .base.utils.function_calls import (
    clean_response,
    clean_response_calls,
    extract_function_calls,
    format_function_call,
)
from .di import ProvidersContainer, build_container

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ProviderError",
    "ErrorCode",
    # Core helpers
    "create",
    "ProviderRegistry",
    "ProvidersContainer",
    "build_container",
    # Canonical model
    "Provider",
    "CanonicalMessage",
    "CanonicalRequest",
    "RequestBuilder",
    "Response",
    "ToolSpec",
    "StreamEvent",
    "StreamSignal",
    "accumulate_events",
    "decode_stream",
    # Function-call grammar
    "clean_response",
    "clean_response_calls",
    "extract_function_calls",
    "format_function_call",
]


def create(
    provider_name: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    extra_headers: Optional[Mapping[str, str]] = None,
    container: Optional[ProvidersContainer] = None,
) -> Provider:
    """Construct an adapter through a container (a fresh one when omitted).

    Long-lived callers should build one :class:`ProvidersContainer` and reuse
    it so the registry is constructed only once.

    Raises
    ------
    ProviderNotFoundError
        ``provider_name`` is not registered.
    """
    return (container or build_container()).provider(
        provider_name, api_key=api_key, model=model, extra_headers=extra_headers
    )
