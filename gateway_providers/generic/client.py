"""GenericProvider: configuration-driven adapter.

Serves any vendor whose API is OpenAI-shaped or Anthropic-shaped from a
:class:`ProviderConfig` alone. The config's wire format selects one of two
closed shapes; ``CUSTOM`` configs are rejected at construction because they
need a specialized adapter.

Key behaviors:
* Option precedence: adapter defaults < per-call options < explicit
  system/tools/tool-choice fields.
* Capability flags are enforced before any body is built.
* Headers merge as required headers, then the auth header (only when a
  credential is set), then extra headers; later entries win.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Type
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..base.adapter_base import BaseProvider
from ..base.constants import KEY_STREAM
from ..base.dto.provider_config import ProviderConfig, WireFormat
from ..base.errors import ConfigNotFoundError, ErrorCode, ProviderError, UnsupportedCapabilityError
from ..base.interfaces import ProviderConstructor
from ..base.models import CanonicalMessage, Response
from ..base.streaming import StreamEvent
from ..base.streaming.sse import Chunk
from .anthropic_shape import AnthropicShape
from .openai_shape import OpenAIShape
from .shape_base import WireShape

if TYPE_CHECKING:  # pragma: no cover
    from ..base.registry import ProviderRegistry

_SHAPES: Dict[WireFormat, Type[WireShape]] = {
    WireFormat.OPENAI: OpenAIShape,
    WireFormat.ANTHROPIC: AnthropicShape,
}


class GenericProvider(BaseProvider):
    """Adapter whose behaviour is fully described by a :class:`ProviderConfig`.

    Exactly one of ``config`` or ``registry`` is normally given; with a
    registry the config is looked up by ``provider_name``.

    Raises:
        ConfigNotFoundError: no config could be resolved for the name.
        UnsupportedCapabilityError: the config's wire format is ``CUSTOM``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        provider_name: str,
        extra_headers: Optional[Mapping[str, str]] = None,
        *,
        config: Optional[ProviderConfig] = None,
        registry: Optional["ProviderRegistry"] = None,
    ) -> None:
        if config is None:
            if registry is None:
                raise ConfigNotFoundError(
                    f"no provider config for {provider_name}: pass config or registry",
                    provider=provider_name,
                    model=model,
                )
            config = registry.get_provider_config(provider_name)
        shape_cls = _SHAPES.get(config.wire_format)
        if shape_cls is None:
            raise UnsupportedCapabilityError(
                f"{config.wire_format.value} wire format requires a specialized adapter",
                provider=config.name,
                model=model,
            )
        self._config = config
        self._endpoint_override = ""
        super().__init__(api_key, model, extra_headers)
        self._shape = shape_cls(config.name, model, self._logger)

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> ProviderConfig:
        return self._config

    # --------------------------------------------------------------- transport
    def endpoint(self) -> str:
        """Resolved URL: an explicit override, else the templated config endpoint."""
        if self._endpoint_override:
            return self._endpoint_override
        endpoint = self._config.endpoint.replace("{model}", self._model)
        if not endpoint:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message=f"provider {self.name} has no endpoint configured; call set_endpoint",
                provider=self.name,
                model=self._model,
            )
        if self._config.endpoint_params:
            parts = urlsplit(endpoint)
            query = dict(parse_qsl(parts.query, keep_blank_values=True))
            query.update(self._config.endpoint_params)
            endpoint = urlunsplit(parts._replace(query=urlencode(sorted(query.items()))))
        return endpoint

    def set_endpoint(self, endpoint: str) -> None:
        """Override the configured endpoint for this adapter only."""
        self._endpoint_override = endpoint

    def headers(self) -> Dict[str, str]:
        headers = dict(self._config.required_headers)
        if self._api_key and self._config.auth_header:
            headers[self._config.auth_header] = self._config.auth_prefix + self._api_key
        headers.update(self._extra_headers)
        return headers

    # ---------------------------------------------------------- capabilities
    def supports_json_schema(self) -> bool:
        return self._config.supports_schema

    def supports_streaming(self) -> bool:
        return self._config.supports_streaming

    # -------------------------------------------------------- request builders
    def prepare_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        merged = self._merged_options(options)
        if merged.stream:
            self._require_streaming_support()
        body = self._shape.build_prompt_body(prompt, merged)
        self._log_prepared("prompt", body)
        return self._encode(body)

    def prepare_request_with_schema(
        self, prompt: str, options: Optional[Mapping[str, Any]], schema: Mapping[str, Any]
    ) -> bytes:
        self._require_schema_support()
        body = self._shape.build_schema_body(prompt, self._merged_options(options), schema)
        self._log_prepared("schema", body)
        return self._encode(body)

    def prepare_request_with_messages(
        self, messages: Sequence[CanonicalMessage], options: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        merged = self._merged_options(options)
        if merged.stream:
            self._require_streaming_support()
        body = self._shape.build_messages_body(messages, merged)
        self._log_prepared("messages", body)
        return self._encode(body)

    def prepare_request_with_messages_and_schema(
        self,
        messages: Sequence[CanonicalMessage],
        options: Optional[Mapping[str, Any]],
        schema: Mapping[str, Any],
    ) -> bytes:
        self._require_schema_support()
        body = self._shape.build_messages_schema_body(messages, self._merged_options(options), schema)
        self._log_prepared("messages_schema", body)
        return self._encode(body)

    def prepare_stream_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        self._require_streaming_support()
        stream_options: Dict[str, Any] = dict(options or {})
        stream_options[KEY_STREAM] = True
        return self.prepare_request(prompt, stream_options)

    # -------------------------------------------------------- response readers
    def parse_response(self, body: bytes) -> Response:
        return self._shape.parse_response(body)

    def parse_stream_response(self, chunk: Chunk) -> StreamEvent:
        return self._shape.parse_stream_chunk(chunk)


def generic_constructor(name: str, registry: "ProviderRegistry") -> ProviderConstructor:
    """Return a registry constructor that resolves ``name``'s config on each call.

    Resolving lazily means a config registered (or replaced) after the
    constructor is honoured by the next ``registry.get``.
    """

    def construct(api_key: str, model: str, extra_headers: Optional[Mapping[str, str]] = None) -> GenericProvider:
        return GenericProvider(api_key, model, name, extra_headers, registry=registry)

    return construct


__all__ = ["GenericProvider", "generic_constructor"]
