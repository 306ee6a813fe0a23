"""
Providers Base Package

Provider-agnostic contracts shared by every adapter:
- Models: canonical request/message/response shapes and the option bag
- Interfaces: the provider contract and capability protocols
- Errors: the unified error taxonomy
- Registry: thread-safe name -> constructor/config lookup
"""

from .adapter_base import BaseProvider
from .dto import FunctionCallDTO, ProviderConfig, WireFormat
from .errors import ErrorCode, ProviderError
from .interfaces import Provider, ProviderConstructor, SupportsJSONSchema, SupportsStreaming
from .models import (
    CanonicalMessage,
    CanonicalRequest,
    OptionBag,
    RequestBuilder,
    Response,
    ToolSpec,
    Usage,
)
from .registry import ProviderRegistry, builtin_provider_names
from .streaming import StreamEvent, StreamSignal, accumulate_events, decode_stream

__all__ = [
    # Models
    "CanonicalMessage",
    "CanonicalRequest",
    "OptionBag",
    "RequestBuilder",
    "Response",
    "ToolSpec",
    "Usage",
    "FunctionCallDTO",
    "ProviderConfig",
    "WireFormat",
    # Interfaces
    "Provider",
    "ProviderConstructor",
    "SupportsJSONSchema",
    "SupportsStreaming",
    "BaseProvider",
    # Errors
    "ErrorCode",
    "ProviderError",
    # Registry
    "ProviderRegistry",
    "builtin_provider_names",
    # Streaming
    "StreamEvent",
    "StreamSignal",
    "accumulate_events",
    "decode_stream",
]
