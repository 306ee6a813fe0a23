"""OpenAI-shaped chat-completions wire format.

Body layout: ``model``, ``messages``, the merged options, then ``tools`` and
``tool_choice``. A system instruction becomes a leading ``system`` message.
Schema requests ask for a JSON object and declare a synthetic
``output_formatter`` function whose parameters are the reduced schema.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.constants import (
    KEY_STREAM,
    KEY_SYSTEM_PROMPT,
    KEY_TOOL_CHOICE,
    KEY_TOOLS,
    OUTPUT_FORMATTER_DESCRIPTION,
    OUTPUT_FORMATTER_FUNCTION,
    SSE_DONE_SENTINEL,
)
from ..base.dto.function_call import FunctionCallDTO
from ..base.errors import EmptyResponseError, MalformedUpstreamResponseError
from ..base.logging import log_event
from ..base.models import CanonicalMessage, OptionBag, Response, ToolSpec, Usage
from ..base.streaming import StreamEvent, decode_json_payload, strip_data_prefix
from ..base.streaming.sse import Chunk
from ..base.utils.function_calls import render_function_calls
from ..base.utils.schema import clean_schema_for_openai
from .shape_base import WireShape


def tool_to_openai(tool: Any) -> Dict[str, Any]:
    spec = ToolSpec.coerce(tool)
    return {
        "type": "function",
        "function": {"name": spec.name, "description": spec.description, "parameters": spec.parameters},
    }


def message_to_openai(message: CanonicalMessage) -> Dict[str, Any]:
    wire: Dict[str, Any] = dict(message.metadata)
    wire["role"] = message.role
    wire["content"] = message.content
    return wire


def usage_from_openai(data: Any) -> Optional[Usage]:
    if not isinstance(data, Mapping):
        return None
    prompt_details = data.get("prompt_tokens_details") or {}
    completion_details = data.get("completion_tokens_details") or {}
    return Usage(
        input_tokens=data.get("prompt_tokens"),
        cached_input_tokens=prompt_details.get("cached_tokens"),
        output_tokens=data.get("completion_tokens"),
        reasoning_tokens=completion_details.get("reasoning_tokens"),
        total_tokens=data.get("total_tokens"),
    )


def _decode_arguments(arguments: Any) -> Any:
    if not isinstance(arguments, str):
        return arguments
    if not arguments.strip():
        return {}
    try:
        return json.loads(arguments)
    except ValueError:
        return arguments


class OpenAIShape(WireShape):
    """Builds and reads OpenAI-shaped chat-completion payloads."""

    def stream_options(self) -> Dict[str, Any]:
        return {"stream_options": {"include_usage": True}}

    # ----------------------------------------------------------------- build
    def _body(self, messages: List[Dict[str, Any]], options: OptionBag) -> Dict[str, Any]:
        system_prompt = options.get(KEY_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            messages = [{"role": "system", "content": system_prompt}, *messages]
        body: Dict[str, Any] = {"model": self.model, "messages": messages}
        body.update(options.body_options())
        tools = options.get(KEY_TOOLS)
        if tools:
            body[KEY_TOOLS] = [tool_to_openai(t) for t in tools]
        if options.get(KEY_TOOL_CHOICE) is not None:
            body[KEY_TOOL_CHOICE] = options[KEY_TOOL_CHOICE]
        if body.get(KEY_STREAM) and "stream_options" not in body:
            body.update(self.stream_options())
        return body

    def build_prompt_body(self, prompt: str, options: OptionBag) -> Dict[str, Any]:
        return self._body([{"role": "user", "content": prompt}], options)

    def _apply_schema(self, body: Dict[str, Any], schema: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned, dropped = clean_schema_for_openai(dict(schema))
        if dropped:
            log_event(
                self._logger,
                "schema.clean",
                self._log_ctx(),
                level=logging.WARNING,
                dropped=dropped,
            )
        body["response_format"] = {"type": "json_object"}
        body["functions"] = [
            {
                "name": OUTPUT_FORMATTER_FUNCTION,
                "description": OUTPUT_FORMATTER_DESCRIPTION,
                "parameters": cleaned,
            }
        ]
        body["function_call"] = {"name": OUTPUT_FORMATTER_FUNCTION}
        return body

    def build_schema_body(self, prompt: str, options: OptionBag, schema: Mapping[str, Any]) -> Dict[str, Any]:
        return self._apply_schema(self.build_prompt_body(prompt, options), schema)

    def build_messages_body(self, messages: Sequence[CanonicalMessage], options: OptionBag) -> Dict[str, Any]:
        return self._body([message_to_openai(m) for m in messages], options)

    def build_messages_schema_body(
        self, messages: Sequence[CanonicalMessage], options: OptionBag, schema: Mapping[str, Any]
    ) -> Dict[str, Any]:
        return self._apply_schema(self.build_messages_body(messages, options), schema)

    # ------------------------------------------------------------------ read
    def _first_choice(self, choices: Any) -> Mapping[str, Any]:
        if not isinstance(choices, list) or not isinstance(choices[0], Mapping):
            raise MalformedUpstreamResponseError(
                "choices[0] is not an object", provider=self.provider, model=self.model
            )
        return choices[0]

    def _calls_from_message(self, message: Mapping[str, Any]) -> List[FunctionCallDTO]:
        calls: List[FunctionCallDTO] = []
        for tool_call in message.get("tool_calls") or []:
            if not isinstance(tool_call, Mapping):
                continue
            function = tool_call.get("function") or {}
            if isinstance(function, Mapping) and function.get("name"):
                calls.append(
                    FunctionCallDTO(name=function["name"], arguments=_decode_arguments(function.get("arguments")))
                )
        legacy = message.get("function_call")
        if isinstance(legacy, Mapping) and legacy.get("name"):
            calls.append(FunctionCallDTO(name=legacy["name"], arguments=_decode_arguments(legacy.get("arguments"))))
        return calls

    def parse_response(self, body: bytes) -> Response:
        payload = self._decode_body(body)
        choices = payload.get("choices") or []
        if not choices:
            raise EmptyResponseError("empty response from API", provider=self.provider, model=self.model)
        message = self._first_choice(choices).get("message") or {}
        if not isinstance(message, Mapping):
            raise MalformedUpstreamResponseError(
                "choices[0].message is not an object", provider=self.provider, model=self.model
            )
        content = message.get("content") or ""
        calls = self._calls_from_message(message)
        if not content and not calls:
            raise EmptyResponseError("no content or tool calls in response", provider=self.provider, model=self.model)
        parts = [content] if content else []
        if calls:
            parts.append(render_function_calls(calls))
        return Response(
            text="\n".join(parts),
            function_calls=calls,
            usage=usage_from_openai(payload.get("usage")),
            raw=payload,
        )

    def parse_stream_chunk(self, chunk: Chunk) -> StreamEvent:
        """Decode one ``data:`` line.

        ``[DONE]`` ends the stream. A ``finish_reason`` chunk is skipped
        rather than ending it so the trailing usage-only chunk, requested via
        ``stream_options.include_usage``, can still be read.
        """
        data = strip_data_prefix(chunk, self.provider, self.model)
        if data is None:
            return StreamEvent.skip(self.provider, self.model)
        if data == SSE_DONE_SENTINEL:
            return StreamEvent.end(self.provider, self.model)
        payload = decode_json_payload(data, self.provider, self.model)
        if not isinstance(payload, dict):
            raise MalformedUpstreamResponseError(
                "stream chunk is not a JSON object", provider=self.provider, model=self.model
            )
        self._raise_for_error(payload)
        usage = usage_from_openai(payload.get("usage"))
        choices = payload.get("choices") or []
        if not choices:
            return StreamEvent.skip(self.provider, self.model, usage=usage, raw=payload)
        delta = self._first_choice(choices).get("delta") or {}
        content = delta.get("content") if isinstance(delta, Mapping) else None
        content = content if isinstance(content, str) else ""
        if not content:
            return StreamEvent.skip(self.provider, self.model, usage=usage, raw=payload)
        event = StreamEvent.token(self.provider, self.model, content, raw=payload)
        event.usage = usage
        return event


__all__ = ["OpenAIShape", "tool_to_openai", "message_to_openai", "usage_from_openai"]
