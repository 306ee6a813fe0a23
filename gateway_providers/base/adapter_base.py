"""Shared adapter state and behaviour.

Purpose
-------
``BaseProvider`` holds what every adapter carries for its lifetime: the
credential, the model id, a default :class:`OptionBag` and an extra-header
bag. It implements the option setters, the function-call post-processing
and the ``prepare`` dispatcher; subclasses implement the wire shapes.

Concurrency
-----------
The option and header bags are plain mutable state. One adapter instance
must not be shared by callers that mutate options concurrently; adapters
hold no connections, so constructing one per caller is cheap.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from .constants import KEY_MAX_TOKENS, KEY_SEED, KEY_STREAM, KEY_TEMPERATURE, KEY_TOP_P
from .dto.function_call import FunctionCallDTO
from .errors import UnsupportedCapabilityError
from .log_support import LogContext, mask_headers
from .logging import get_logger, log_event
from .models import CanonicalMessage, CanonicalRequest, OptionBag, Response
from .streaming.events import StreamEvent
from .streaming.sse import Chunk
from .utils.function_calls import extract_function_calls

if TYPE_CHECKING:  # pragma: no cover
    from ..config.settings import GenerationSettings


class BaseProvider(ABC):
    """Common base for configuration-driven and specialized adapters."""

    def __init__(
        self,
        api_key: str,
        model: str,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._api_key = api_key or ""
        self._model = model
        self._options = OptionBag()
        self._extra_headers: Dict[str, str] = dict(extra_headers or {})
        self._logger = get_logger(f"gateway_providers.{type(self).__module__.rsplit('.', 2)[-2]}")

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    def model(self) -> str:
        return self._model

    @property
    def options(self) -> OptionBag:
        """Copy of the adapter defaults; mutate through :meth:`set_option`."""
        return self._options.copy()

    @property
    def extra_headers(self) -> Dict[str, str]:
        return dict(self._extra_headers)

    # ------------------------------------------------------------------ options
    def set_option(self, key: str, value: Any) -> None:
        """Set one adapter default; per-call options still override it."""
        self._options[key] = value
        log_event(self._logger, "option.set", self._log_ctx(), level=logging.DEBUG, key=key)

    def set_default_options(self, settings: "GenerationSettings") -> None:
        """Seed defaults from global generation settings.

        Temperature and max tokens are always copied; top-p and the seed only
        when set.
        """
        self.set_option(KEY_TEMPERATURE, settings.temperature)
        self.set_option(KEY_MAX_TOKENS, settings.max_tokens)
        if settings.top_p is not None:
            self.set_option(KEY_TOP_P, settings.top_p)
        if settings.seed is not None:
            self.set_option(KEY_SEED, settings.seed)

    def set_extra_headers(self, headers: Optional[Mapping[str, str]]) -> None:
        """Replace the extra-header bag (``None`` clears it)."""
        self._extra_headers = dict(headers or {})

    def _merged_options(self, options: Optional[Mapping[str, Any]]) -> OptionBag:
        """Adapter defaults overlaid with per-call options (per-call wins)."""
        return self._options.merged(options)

    # ------------------------------------------------------------ capabilities
    @abstractmethod
    def supports_json_schema(self) -> bool:
        ...

    @abstractmethod
    def supports_streaming(self) -> bool:
        ...

    def _require_schema_support(self) -> None:
        if not self.supports_json_schema():
            raise UnsupportedCapabilityError(
                f"provider {self.name} does not support JSON schema validation",
                provider=self.name,
                model=self._model,
            )

    def _require_streaming_support(self) -> None:
        if not self.supports_streaming():
            raise UnsupportedCapabilityError(
                f"provider {self.name} does not support streaming",
                provider=self.name,
                model=self._model,
            )

    # ---------------------------------------------------------- wire contract
    @abstractmethod
    def endpoint(self) -> str:
        ...

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        ...

    @abstractmethod
    def prepare_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        ...

    @abstractmethod
    def prepare_request_with_schema(
        self, prompt: str, options: Optional[Mapping[str, Any]], schema: Mapping[str, Any]
    ) -> bytes:
        ...

    @abstractmethod
    def prepare_request_with_messages(
        self, messages: Sequence[CanonicalMessage], options: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        ...

    @abstractmethod
    def prepare_request_with_messages_and_schema(
        self,
        messages: Sequence[CanonicalMessage],
        options: Optional[Mapping[str, Any]],
        schema: Mapping[str, Any],
    ) -> bytes:
        ...

    @abstractmethod
    def prepare_stream_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        ...

    @abstractmethod
    def parse_response(self, body: bytes) -> Response:
        ...

    @abstractmethod
    def parse_stream_response(self, chunk: Chunk) -> StreamEvent:
        ...

    def prepare(self, request: CanonicalRequest) -> bytes:
        """Build the body for a :class:`CanonicalRequest`.

        Messages take precedence over the prompt. A schema selects the schema
        builder, for messages as well as for a prompt, and a ``stream`` option
        the streaming builder; asking for both is rejected since no adapter
        streams structured output.

        Raises:
            UnsupportedCapabilityError: a schema was given to an adapter
                without schema support, or streaming to one without
                streaming support.
        """
        options = request.call_options()
        if request.response_schema is not None and request.stream:
            raise UnsupportedCapabilityError(
                "structured output cannot be combined with streaming",
                provider=self.name,
                model=self._model,
            )
        if request.response_schema is not None:
            self._require_schema_support()
        if request.has_messages():
            if request.response_schema is not None:
                return self.prepare_request_with_messages_and_schema(
                    request.messages, options, request.response_schema
                )
            if request.stream:
                self._require_streaming_support()
                options[KEY_STREAM] = True
            return self.prepare_request_with_messages(request.messages, options)
        if request.response_schema is not None:
            return self.prepare_request_with_schema(request.prompt, options, request.response_schema)
        if request.stream:
            return self.prepare_stream_request(request.prompt, options)
        return self.prepare_request(request.prompt, options)

    # ------------------------------------------------------- function calling
    def extract_function_calls(self, raw: str) -> List[FunctionCallDTO]:
        """Parse every ``<function_call>`` span found in generated text."""
        return extract_function_calls(raw)

    def handle_function_calls(self, raw: str) -> Optional[bytes]:
        """Return the embedded calls as a JSON array, or ``None`` when there are none."""
        calls = self.extract_function_calls(raw)
        if not calls:
            return None
        return json.dumps([c.to_wire() for c in calls], ensure_ascii=False).encode("utf-8")

    # ---------------------------------------------------------------- helpers
    def _log_ctx(self, **extra: Any) -> LogContext:
        return LogContext(provider=self.name, model=self._model, extra=extra)

    def _log_prepared(self, kind: str, body: Dict[str, Any]) -> None:
        log_event(
            self._logger,
            "request.prepare",
            self._log_ctx(),
            level=logging.DEBUG,
            kind=kind,
            keys=sorted(body),
            headers=mask_headers(self.headers()),
        )

    @staticmethod
    def _encode(body: Dict[str, Any]) -> bytes:
        return json.dumps(body, ensure_ascii=False).encode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, model={self._model!r})"


__all__ = ["BaseProvider"]
