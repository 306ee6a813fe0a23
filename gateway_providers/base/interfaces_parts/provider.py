"""Provider Protocol (single-class module).

The operation set every adapter implements. Request builders return the
JSON body as bytes; response readers accept the bytes an external
transport received.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ..dto.function_call import FunctionCallDTO
from ..models import CanonicalMessage, Response
from ..streaming.events import StreamEvent
from ..streaming.sse import Chunk


@runtime_checkable
class Provider(Protocol):
    """Contract shared by configuration-driven and specialized adapters.

    Capability violations are contract errors: asking for schema output or a
    stream from an adapter whose flag is false raises
    ``UnsupportedCapabilityError`` and builds nothing.
    """

    @property
    def name(self) -> str:
        """Registry name of the adapter, e.g. ``"openai"``."""
        ...

    @property
    def model(self) -> str:
        ...

    def endpoint(self) -> str:
        """Target URL, possibly depending on the model id and query params."""
        ...

    def headers(self) -> Dict[str, str]:
        """Static headers, then auth header, then extra headers (later wins)."""
        ...

    def prepare_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        ...

    def prepare_request_with_schema(
        self, prompt: str, options: Optional[Mapping[str, Any]], schema: Mapping[str, Any]
    ) -> bytes:
        ...

    def prepare_request_with_messages(
        self, messages: Sequence[CanonicalMessage], options: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        ...

    def prepare_request_with_messages_and_schema(
        self,
        messages: Sequence[CanonicalMessage],
        options: Optional[Mapping[str, Any]],
        schema: Mapping[str, Any],
    ) -> bytes:
        """Messages body constrained to ``schema``; raises when unsupported."""
        ...

    def prepare_stream_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        ...

    def parse_response(self, body: bytes) -> Response:
        ...

    def parse_stream_response(self, chunk: Chunk) -> StreamEvent:
        ...

    def extract_function_calls(self, raw: str) -> List[FunctionCallDTO]:
        ...

    def supports_json_schema(self) -> bool:
        ...

    def supports_streaming(self) -> bool:
        ...

    def set_option(self, key: str, value: Any) -> None:
        ...

    def set_default_options(self, settings: Any) -> None:
        ...

    def set_extra_headers(self, headers: Optional[Mapping[str, str]]) -> None:
        ...
