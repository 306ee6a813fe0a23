"""Common base for the wire shapes of the configuration-driven adapter.

A shape turns canonical inputs plus a merged :class:`OptionBag` into a
request body dict and turns response bytes back into canonical values. It
holds only the provider name and model id used in errors and log context.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Sequence

from ..base.errors import MalformedUpstreamResponseError, UpstreamAPIError
from ..base.log_support import LogContext
from ..base.models import CanonicalMessage, OptionBag, Response
from ..base.streaming import StreamEvent, decode_json_payload
from ..base.streaming.sse import Chunk, chunk_text


class WireShape(ABC):
    """Body builder and response reader for one wire-format variant."""

    def __init__(self, provider: str, model: str, logger: logging.Logger) -> None:
        self.provider = provider
        self.model = model
        self._logger = logger

    @abstractmethod
    def build_prompt_body(self, prompt: str, options: OptionBag) -> Dict[str, Any]:
        ...

    @abstractmethod
    def build_schema_body(self, prompt: str, options: OptionBag, schema: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def build_messages_body(self, messages: Sequence[CanonicalMessage], options: OptionBag) -> Dict[str, Any]:
        ...

    @abstractmethod
    def build_messages_schema_body(
        self, messages: Sequence[CanonicalMessage], options: OptionBag, schema: Mapping[str, Any]
    ) -> Dict[str, Any]:
        ...

    @abstractmethod
    def parse_response(self, body: bytes) -> Response:
        ...

    @abstractmethod
    def parse_stream_chunk(self, chunk: Chunk) -> StreamEvent:
        ...

    def stream_options(self) -> Dict[str, Any]:
        """Extra per-call options a streaming request needs besides ``stream``."""
        return {}

    # ---------------------------------------------------------------- helpers
    def _log_ctx(self) -> LogContext:
        return LogContext(provider=self.provider, model=self.model)

    def _decode_body(self, body: bytes) -> Dict[str, Any]:
        text = chunk_text(body, self.provider, self.model)
        payload = decode_json_payload(text, self.provider, self.model)
        if not isinstance(payload, dict):
            raise MalformedUpstreamResponseError(
                f"expected a JSON object, got {type(payload).__name__}",
                provider=self.provider,
                model=self.model,
            )
        self._raise_for_error(payload)
        return payload

    def _raise_for_error(self, payload: Mapping[str, Any]) -> None:
        """Surface an embedded ``error`` object (or string) verbatim."""
        error = payload.get("error")
        message: Optional[str] = None
        if isinstance(error, Mapping):
            message = error.get("message") or None
        elif isinstance(error, str) and error:
            message = error
        if message:
            raise UpstreamAPIError(str(message), provider=self.provider, model=self.model)


__all__ = ["WireShape"]
