"""Anthropic-shaped messages wire format.

The system instruction is a top-level ``system`` field, never a message,
and ``max_tokens`` is mandatory (1024 when neither the adapter nor the call
sets one). There is no native structured-output field, so schema requests
append the schema to the prompt as an instruction.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.constants import KEY_MAX_TOKENS, KEY_SYSTEM_PROMPT, KEY_TOOL_CHOICE, KEY_TOOLS, SSE_DONE_SENTINEL
from ..base.dto.function_call import FunctionCallDTO
from ..base.errors import EmptyResponseError, MalformedUpstreamResponseError
from ..base.models import CanonicalMessage, OptionBag, Response, ToolSpec, Usage
from ..base.models_parts.message import append_to_last_user_turn
from ..base.streaming import StreamEvent, decode_json_payload, strip_data_prefix
from ..base.streaming.sse import Chunk
from ..base.utils.function_calls import render_function_calls
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS
from .shape_base import WireShape

SCHEMA_INSTRUCTION = "\n\nPlease provide a response in the following JSON format: "


def schema_instruction(schema: Mapping[str, Any]) -> str:
    return SCHEMA_INSTRUCTION + json.dumps(schema, ensure_ascii=False, separators=(",", ":"))


def tool_to_anthropic(tool: Any) -> Dict[str, Any]:
    spec = ToolSpec.coerce(tool)
    return {"name": spec.name, "description": spec.description, "input_schema": spec.parameters}


def tool_choice_to_anthropic(choice: Any) -> Any:
    if isinstance(choice, str):
        return {"type": choice}
    return choice


def message_to_anthropic(message: CanonicalMessage) -> Dict[str, Any]:
    block: Dict[str, Any] = {"type": "text", "text": message.content}
    if message.cache_type:
        block["cache_control"] = {"type": message.cache_type}
    return {"role": message.role, "content": [block]}


def usage_from_anthropic(data: Any) -> Optional[Usage]:
    if not isinstance(data, Mapping):
        return None
    input_tokens = data.get("input_tokens")
    output_tokens = data.get("output_tokens")
    total = input_tokens + output_tokens if input_tokens is not None and output_tokens is not None else None
    return Usage(
        input_tokens=input_tokens,
        cached_input_tokens=data.get("cache_read_input_tokens"),
        output_tokens=output_tokens,
        total_tokens=total,
    )


class AnthropicShape(WireShape):
    """Builds and reads Anthropic-shaped message payloads."""

    # ----------------------------------------------------------------- build
    def _body(self, messages: List[Dict[str, Any]], options: OptionBag) -> Dict[str, Any]:
        body: Dict[str, Any] = {"model": self.model, "messages": messages}
        body.update(options.body_options())
        system_prompt = options.get(KEY_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            body["system"] = system_prompt
        tools = options.get(KEY_TOOLS)
        if tools:
            body[KEY_TOOLS] = [tool_to_anthropic(t) for t in tools]
        if options.get(KEY_TOOL_CHOICE) is not None:
            body[KEY_TOOL_CHOICE] = tool_choice_to_anthropic(options[KEY_TOOL_CHOICE])
        if body.get(KEY_MAX_TOKENS) is None:
            body[KEY_MAX_TOKENS] = ANTHROPIC_DEFAULT_MAX_TOKENS
        return body

    def build_prompt_body(self, prompt: str, options: OptionBag) -> Dict[str, Any]:
        return self._body([{"role": "user", "content": prompt}], options)

    def build_schema_body(self, prompt: str, options: OptionBag, schema: Mapping[str, Any]) -> Dict[str, Any]:
        return self.build_prompt_body(prompt + schema_instruction(schema), options)

    def build_messages_body(self, messages: Sequence[CanonicalMessage], options: OptionBag) -> Dict[str, Any]:
        # no system role in the messages API; such turns move to the system field
        system = [m.content for m in messages if m.role == "system"]
        if system and not options.get(KEY_SYSTEM_PROMPT):
            options = options.merged({KEY_SYSTEM_PROMPT: "\n".join(system)})
        return self._body([message_to_anthropic(m) for m in messages if m.role != "system"], options)

    def build_messages_schema_body(
        self, messages: Sequence[CanonicalMessage], options: OptionBag, schema: Mapping[str, Any]
    ) -> Dict[str, Any]:
        return self.build_messages_body(append_to_last_user_turn(messages, schema_instruction(schema)), options)

    # ------------------------------------------------------------------ read
    def parse_response(self, body: bytes) -> Response:
        payload = self._decode_body(body)
        content = payload.get("content") or []
        if not isinstance(content, list):
            raise MalformedUpstreamResponseError("content is not a list", provider=self.provider, model=self.model)
        if not content:
            raise EmptyResponseError("empty response from API", provider=self.provider, model=self.model)
        texts: List[str] = []
        calls: List[FunctionCallDTO] = []
        for block in content:
            if not isinstance(block, Mapping):
                continue
            if block.get("type") == "text":
                texts.append(block.get("text") or "")
            elif block.get("type") == "tool_use" and block.get("name"):
                calls.append(FunctionCallDTO(name=block["name"], arguments=block.get("input") or {}))
        text = "".join(texts)
        if not text and not calls:
            raise EmptyResponseError("no text or tool_use blocks in response", provider=self.provider, model=self.model)
        if calls:
            text = "\n".join(p for p in (text, render_function_calls(calls)) if p)
        return Response(text=text, function_calls=calls, usage=usage_from_anthropic(payload.get("usage")), raw=payload)

    def parse_stream_chunk(self, chunk: Chunk) -> StreamEvent:
        """Decode one event payload.

        ``content_block_delta`` text deltas are tokens, ``message_stop`` ends
        the stream, ``message_start``/``message_delta`` carry usage, and
        everything else (``ping``, block start/stop) is skipped.
        """
        data = strip_data_prefix(chunk, self.provider, self.model)
        if data is None:
            return StreamEvent.skip(self.provider, self.model)
        if data == SSE_DONE_SENTINEL:
            return StreamEvent.end(self.provider, self.model)
        payload = decode_json_payload(data, self.provider, self.model)
        if not isinstance(payload, dict):
            raise MalformedUpstreamResponseError(
                "stream event is not a JSON object", provider=self.provider, model=self.model
            )
        self._raise_for_error(payload)
        event_type = payload.get("type")
        if event_type == "content_block_delta":
            delta = payload.get("delta") or {}
            if delta.get("type") == "text_delta" and delta.get("text"):
                return StreamEvent.token(self.provider, self.model, delta["text"], raw=payload)
            return StreamEvent.skip(self.provider, self.model, raw=payload)
        if event_type == "message_start":
            message = payload.get("message") or {}
            return StreamEvent.skip(self.provider, self.model, usage=usage_from_anthropic(message.get("usage")), raw=payload)
        if event_type == "message_delta":
            return StreamEvent.skip(self.provider, self.model, usage=usage_from_anthropic(payload.get("usage")), raw=payload)
        if event_type == "message_stop":
            return StreamEvent.end(self.provider, self.model, raw=payload)
        return StreamEvent.skip(self.provider, self.model, raw=payload)


__all__ = [
    "AnthropicShape",
    "SCHEMA_INSTRUCTION",
    "schema_instruction",
    "tool_to_anthropic",
    "tool_choice_to_anthropic",
    "message_to_anthropic",
    "usage_from_anthropic",
]
