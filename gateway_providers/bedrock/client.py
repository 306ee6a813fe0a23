"""BedrockProvider: signed gateway adapter fronting several model families.

Summary
-------
One provider name serves Anthropic, Meta, Mistral, Cohere, Amazon and AI21
models whose payloads are incompatible. The family is classified from the
model id once, at construction, and every builder and reader dispatches on
it through the tables in :mod:`.payloads`.

Authentication is AWS SigV4 rather than a bearer header: :meth:`headers`
returns only the static JSON headers and caller extras, and the transport
signs on send, either with :meth:`auth` (an ``httpx.Auth``) or with the
header dict from :meth:`signed_headers`.

Streaming
---------
The stream endpoint (``invoke-with-response-stream``) delivers raw JSON
event objects, optionally wrapped as ``{"bytes": <base64>}`` (or
``{"chunk": {"bytes": ...}}``). Anthropic models emit typed delta events;
the other families emit a flat token field and signal the end through a
stop reason.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence
from urllib.parse import quote

from ..base.adapter_base import BaseProvider
from ..base.errors import EmptyResponseError, MalformedUpstreamResponseError, UpstreamAPIError
from ..base.interfaces import ProviderConstructor
from ..base.log_support import LogContext
from ..base.models import CanonicalMessage, Response, Usage
from ..base.models_parts.message import append_to_last_user_turn
from ..base.streaming import StreamEvent, decode_json_payload, strip_data_prefix
from ..base.streaming.sse import Chunk, chunk_text
from ..base.utils.function_calls import render_function_calls
from ..config.defaults import BEDROCK_ENDPOINT_TEMPLATE, BEDROCK_STREAM_ENDPOINT_TEMPLATE
from ..config.env import AwsCredentials, resolve_aws_credentials
from ..generic.anthropic_shape import usage_from_anthropic
from .auth import SigV4Auth
from .families import ModelFamily, classify_model_family
from .payloads import build_messages_body, build_prompt_body, read_response, schema_prompt, schema_suffix
from .signing import SigV4Signer

if TYPE_CHECKING:  # pragma: no cover
    from ..base.registry import ProviderRegistry

REGION_OPTION = "region"
_INVOCATION_METRICS = "amazon-bedrock-invocationMetrics"
_STOP_FIELDS = ("stop_reason", "completionReason", "finish_reason")


def _usage_from_metrics(payload: Mapping[str, Any]) -> Optional[Usage]:
    metrics = payload.get(_INVOCATION_METRICS)
    if not isinstance(metrics, Mapping):
        return None
    input_tokens = metrics.get("inputTokenCount")
    output_tokens = metrics.get("outputTokenCount")
    total = input_tokens + output_tokens if input_tokens is not None and output_tokens is not None else None
    return Usage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total)


def _flat_stream_text(payload: Mapping[str, Any]) -> str:
    token = payload.get("token")
    if isinstance(token, Mapping) and token.get("text"):
        return token["text"]
    if payload.get("generation"):
        return payload["generation"]
    outputs = payload.get("outputs")
    if isinstance(outputs, list) and outputs and isinstance(outputs[0], Mapping):
        return outputs[0].get("text") or ""
    return payload.get("outputText") or payload.get("text") or ""


class BedrockProvider(BaseProvider):
    """Gateway adapter; ``api_key`` is unused, AWS credentials sign instead.

    Args:
        credentials: Signing material. Defaults to the ``AWS_*`` environment
            variables at construction time.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        extra_headers: Optional[Mapping[str, str]] = None,
        *,
        credentials: Optional[AwsCredentials] = None,
        provider_name: str = "bedrock",
    ) -> None:
        self._provider_name = provider_name
        self._credentials = credentials if credentials is not None else resolve_aws_credentials()
        self._family = classify_model_family(model)
        super().__init__(api_key, model, extra_headers)

    @property
    def name(self) -> str:
        return self._provider_name

    @property
    def family(self) -> ModelFamily:
        return self._family

    @property
    def region(self) -> str:
        return self._credentials.region

    @property
    def credentials(self) -> AwsCredentials:
        return self._credentials

    def set_option(self, key: str, value: Any) -> None:
        """``region`` retargets the endpoint and signing scope; other keys are options."""
        if key == REGION_OPTION:
            self._credentials = dataclasses.replace(self._credentials, region=str(value))
            return
        super().set_option(key, value)

    # --------------------------------------------------------------- transport
    def _url(self, template: str) -> str:
        return template.format(region=self.region, model=quote(self._model, safe=""))

    def endpoint(self) -> str:
        return self._url(BEDROCK_ENDPOINT_TEMPLATE)

    def stream_endpoint(self) -> str:
        return self._url(BEDROCK_STREAM_ENDPOINT_TEMPLATE)

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        headers.update(self._extra_headers)
        return headers

    def signed_headers(self, body: bytes, *, stream: bool = False, now: Optional[datetime] = None) -> Dict[str, str]:
        """Return :meth:`headers` plus the SigV4 headers for ``body``.

        Raises:
            MissingCredentialsError: no access key or secret key.
        """
        url = self.stream_endpoint() if stream else self.endpoint()
        signer = SigV4Signer(self._credentials, provider=self.name)
        return signer.sign("POST", url, self.headers(), body, now=now)

    def auth(self) -> SigV4Auth:
        """``httpx`` auth hook signing with this adapter's credentials and region."""
        return SigV4Auth(self._credentials)

    # ---------------------------------------------------------- capabilities
    def supports_json_schema(self) -> bool:
        return True

    def supports_streaming(self) -> bool:
        return True

    # -------------------------------------------------------- request builders
    def prepare_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        body = build_prompt_body(self._family, prompt, self._merged_options(options))
        self._log_prepared("prompt", body)
        return self._encode(body)

    def prepare_request_with_schema(
        self, prompt: str, options: Optional[Mapping[str, Any]], schema: Mapping[str, Any]
    ) -> bytes:
        return self.prepare_request(schema_prompt(prompt, schema), options)

    def prepare_request_with_messages(
        self, messages: Sequence[CanonicalMessage], options: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        body = build_messages_body(self._family, list(messages), self._merged_options(options))
        self._log_prepared("messages", body)
        return self._encode(body)

    def prepare_request_with_messages_and_schema(
        self,
        messages: Sequence[CanonicalMessage],
        options: Optional[Mapping[str, Any]],
        schema: Mapping[str, Any],
    ) -> bytes:
        """Embed the schema instruction in the last user turn."""
        self._require_schema_support()
        return self.prepare_request_with_messages(append_to_last_user_turn(messages, schema_suffix(schema)), options)

    def prepare_stream_request(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> bytes:
        """Same body as :meth:`prepare_request`; streaming is chosen by :meth:`stream_endpoint`."""
        return self.prepare_request(prompt, options)

    def _log_ctx(self, **extra: Any) -> LogContext:
        return LogContext(provider=self.name, model=self._model, family=self._family.value, extra=extra)

    # -------------------------------------------------------- response readers
    def _raise_for_error(self, payload: Mapping[str, Any]) -> None:
        error = payload.get("error")
        if isinstance(error, Mapping) and error.get("message"):
            raise UpstreamAPIError(str(error["message"]), provider=self.name, model=self._model)
        if isinstance(error, str) and error:
            raise UpstreamAPIError(error, provider=self.name, model=self._model)

    def parse_response(self, body: bytes) -> Response:
        """Read the family's output field.

        A body without the field but with a top-level ``message`` string is
        a gateway error (for example a throttling or validation response).
        """
        text = chunk_text(body, self.name, self._model)
        payload = decode_json_payload(text, self.name, self._model)
        if not isinstance(payload, dict):
            raise MalformedUpstreamResponseError("response is not a JSON object", provider=self.name, model=self._model)
        self._raise_for_error(payload)
        content, calls, usage = read_response(self._family, payload)
        if not content and not calls:
            if isinstance(payload.get("message"), str):
                raise UpstreamAPIError(payload["message"], provider=self.name, model=self._model)
            raise EmptyResponseError(
                f"no output in {self._family.value} response", provider=self.name, model=self._model
            )
        if calls:
            content = "\n".join(p for p in (content, render_function_calls(calls)) if p)
        return Response(text=content, function_calls=calls, usage=usage or _usage_from_metrics(payload), raw=payload)

    def _unwrap_event(self, payload: Any) -> Any:
        if isinstance(payload, Mapping) and isinstance(payload.get("chunk"), Mapping):
            payload = payload["chunk"]
        if isinstance(payload, Mapping) and isinstance(payload.get("bytes"), str):
            try:
                inner = base64.b64decode(payload["bytes"], validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as exc:
                raise MalformedUpstreamResponseError(
                    f"invalid event payload encoding: {exc}", provider=self.name, model=self._model, raw=exc
                ) from exc
            return decode_json_payload(inner, self.name, self._model)
        return payload

    def parse_stream_response(self, chunk: Chunk) -> StreamEvent:
        """Decode one gateway event object into a stream event."""
        data = strip_data_prefix(chunk, self.name, self._model)
        if data is None:
            return StreamEvent.skip(self.name, self._model)
        payload = self._unwrap_event(decode_json_payload(data, self.name, self._model))
        if not isinstance(payload, dict):
            raise MalformedUpstreamResponseError("stream event is not a JSON object", provider=self.name, model=self._model)
        self._raise_for_error(payload)
        if self._family.uses_messages:
            return self._anthropic_event(payload)
        return self._flat_event(payload)

    def _anthropic_event(self, payload: Dict[str, Any]) -> StreamEvent:
        event_type = payload.get("type")
        if event_type == "error":
            error = payload.get("error") or {}
            raise UpstreamAPIError(str(error.get("message") or "stream error"), provider=self.name, model=self._model)
        if event_type == "content_block_delta":
            delta = payload.get("delta") or {}
            if delta.get("type") == "text_delta" and delta.get("text"):
                return StreamEvent.token(self.name, self._model, delta["text"], raw=payload)
            return StreamEvent.skip(self.name, self._model, raw=payload)
        if event_type == "message_start":
            message = payload.get("message") or {}
            return StreamEvent.skip(self.name, self._model, usage=usage_from_anthropic(message.get("usage")), raw=payload)
        if event_type == "message_delta":
            return StreamEvent.skip(self.name, self._model, usage=usage_from_anthropic(payload.get("usage")), raw=payload)
        if event_type == "message_stop":
            return StreamEvent.end(self.name, self._model, usage=_usage_from_metrics(payload), raw=payload)
        return StreamEvent.skip(self.name, self._model, raw=payload)

    def _flat_event(self, payload: Dict[str, Any]) -> StreamEvent:
        text = _flat_stream_text(payload)
        usage = _usage_from_metrics(payload)
        if text:
            event = StreamEvent.token(self.name, self._model, text, raw=payload)
            event.usage = usage
            return event
        outputs = payload.get("outputs")
        first = outputs[0] if isinstance(outputs, list) and outputs and isinstance(outputs[0], Mapping) else {}
        stopped = payload.get("is_finished") or any(payload.get(f) or first.get(f) for f in _STOP_FIELDS)
        if stopped:
            return StreamEvent.end(self.name, self._model, usage=usage, raw=payload)
        if isinstance(payload.get("message"), str):
            raise UpstreamAPIError(payload["message"], provider=self.name, model=self._model)
        return StreamEvent.skip(self.name, self._model, usage=usage, raw=payload)


def bedrock_constructor(name: str, registry: "ProviderRegistry") -> ProviderConstructor:
    """Registry constructor; credentials are read from the environment per adapter."""

    def construct(api_key: str, model: str, extra_headers: Optional[Mapping[str, str]] = None) -> BedrockProvider:
        return BedrockProvider(api_key, model, extra_headers, provider_name=name)

    return construct


__all__ = ["BedrockProvider", "bedrock_constructor", "REGION_OPTION"]
