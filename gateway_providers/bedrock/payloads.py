"""Per-family request bodies and response readers for the Bedrock gateway.

Every family has its own field names for the prompt, the output-length
limit and the sampling parameters. The limit resolves as per-call option,
then adapter default, then the family default (4096, or 2048 for Meta's
``max_gen_len``; the generic ``inputText`` family has none and omits it).
Only fields the family understands are emitted.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..base.constants import KEY_SYSTEM_PROMPT, KEY_TOOL_CHOICE, KEY_TOOLS
from ..base.dto.function_call import FunctionCallDTO
from ..base.models import CanonicalMessage, OptionBag, Usage
from ..config.defaults import (
    BEDROCK_ANTHROPIC_VERSION,
    BEDROCK_DEFAULT_MAX_TOKENS,
    BEDROCK_META_DEFAULT_MAX_GEN_LEN,
)
from ..generic.anthropic_shape import message_to_anthropic, tool_choice_to_anthropic, tool_to_anthropic, usage_from_anthropic
from .families import ModelFamily

SCHEMA_INSTRUCTION = "\n\nPlease respond with a JSON object matching this schema:\n"

# option key -> wire field, per family
_SAMPLING_FIELDS: Dict[ModelFamily, Dict[str, str]] = {
    ModelFamily.ANTHROPIC: {"temperature": "temperature", "top_p": "top_p", "top_k": "top_k", "stop_sequences": "stop_sequences"},
    ModelFamily.META: {"temperature": "temperature", "top_p": "top_p"},
    ModelFamily.MISTRAL: {"temperature": "temperature", "top_p": "top_p", "top_k": "top_k", "stop": "stop"},
    ModelFamily.COHERE: {"temperature": "temperature", "top_p": "p", "top_k": "k", "stop_sequences": "stop_sequences"},
    ModelFamily.AMAZON: {"temperature": "temperature", "top_p": "topP", "stop_sequences": "stopSequences"},
    ModelFamily.AI21: {"temperature": "temperature", "top_p": "topP", "stop_sequences": "stopSequences"},
    ModelFamily.UNKNOWN: {"temperature": "temperature", "top_p": "topP", "stop_sequences": "stopSequences"},
}

_DEFAULT_MAX_TOKENS: Dict[ModelFamily, Optional[int]] = {
    ModelFamily.ANTHROPIC: BEDROCK_DEFAULT_MAX_TOKENS,
    ModelFamily.META: BEDROCK_META_DEFAULT_MAX_GEN_LEN,
    ModelFamily.MISTRAL: BEDROCK_DEFAULT_MAX_TOKENS,
    ModelFamily.COHERE: BEDROCK_DEFAULT_MAX_TOKENS,
    ModelFamily.AMAZON: None,
    ModelFamily.AI21: None,
    ModelFamily.UNKNOWN: None,
}


def resolve_max_tokens(family: ModelFamily, options: OptionBag) -> Optional[int]:
    """Merged option value when present, else the family default."""
    return options.max_tokens if options.max_tokens is not None else _DEFAULT_MAX_TOKENS[family]


def sampling_fields(family: ModelFamily, options: OptionBag) -> Dict[str, Any]:
    return {wire: options[key] for key, wire in _SAMPLING_FIELDS[family].items() if options.get(key) is not None}


# ------------------------------------------------------------------ builders
def _anthropic_body(messages: List[Dict[str, Any]], options: OptionBag) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
        "max_tokens": resolve_max_tokens(ModelFamily.ANTHROPIC, options),
        "messages": messages,
    }
    system_prompt = options.get(KEY_SYSTEM_PROMPT)
    if isinstance(system_prompt, str) and system_prompt:
        body["system"] = system_prompt
    body.update(sampling_fields(ModelFamily.ANTHROPIC, options))
    if options.get(KEY_TOOLS):
        body[KEY_TOOLS] = [tool_to_anthropic(t) for t in options[KEY_TOOLS]]
    if options.get(KEY_TOOL_CHOICE) is not None:
        body[KEY_TOOL_CHOICE] = tool_choice_to_anthropic(options[KEY_TOOL_CHOICE])
    return body


def _anthropic_prompt(prompt: str, options: OptionBag) -> Dict[str, Any]:
    return _anthropic_body([{"role": "user", "content": prompt}], options)


def _meta_prompt(prompt: str, options: OptionBag) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "prompt": f"[INST] {prompt} [/INST]",
        "max_gen_len": resolve_max_tokens(ModelFamily.META, options),
    }
    body.update(sampling_fields(ModelFamily.META, options))
    return body


def _mistral_prompt(prompt: str, options: OptionBag) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "prompt": f"<s>[INST] {prompt} [/INST]",
        "max_tokens": resolve_max_tokens(ModelFamily.MISTRAL, options),
    }
    body.update(sampling_fields(ModelFamily.MISTRAL, options))
    return body


def _cohere_prompt(prompt: str, options: OptionBag) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "message": prompt,
        "max_tokens": resolve_max_tokens(ModelFamily.COHERE, options),
    }
    body.update(sampling_fields(ModelFamily.COHERE, options))
    return body


def _generic_prompt(family: ModelFamily) -> Callable[[str, OptionBag], Dict[str, Any]]:
    def build(prompt: str, options: OptionBag) -> Dict[str, Any]:
        body: Dict[str, Any] = {"inputText": prompt}
        params = sampling_fields(family, options)
        max_tokens = resolve_max_tokens(family, options)
        if max_tokens is not None:
            params["maxTokenCount"] = max_tokens
        if params:
            body["textGenerationConfig"] = params
        return body

    return build


PROMPT_BUILDERS: Dict[ModelFamily, Callable[[str, OptionBag], Dict[str, Any]]] = {
    ModelFamily.ANTHROPIC: _anthropic_prompt,
    ModelFamily.META: _meta_prompt,
    ModelFamily.MISTRAL: _mistral_prompt,
    ModelFamily.COHERE: _cohere_prompt,
    ModelFamily.AMAZON: _generic_prompt(ModelFamily.AMAZON),
    ModelFamily.AI21: _generic_prompt(ModelFamily.AI21),
    ModelFamily.UNKNOWN: _generic_prompt(ModelFamily.UNKNOWN),
}


def build_prompt_body(family: ModelFamily, prompt: str, options: OptionBag) -> Dict[str, Any]:
    return PROMPT_BUILDERS[family](prompt, options)


def build_messages_body(family: ModelFamily, messages: List[CanonicalMessage], options: OptionBag) -> Dict[str, Any]:
    """Native message list for chat families, flattened prompt for the rest."""
    if family.uses_messages:
        # the messages API has no system role; lift those into the system field
        system = [m.content for m in messages if m.role == "system"]
        if system and not options.get(KEY_SYSTEM_PROMPT):
            options = options.merged({KEY_SYSTEM_PROMPT: "\n".join(system)})
        wire = [
            message_to_anthropic(m) if m.cache_type else {"role": m.role, "content": m.content}
            for m in messages
            if m.role != "system"
        ]
        return _anthropic_body(wire, options)
    prompt = "".join(f"{m.role}: {m.content}\n" for m in messages)
    return build_prompt_body(family, prompt, options)


def schema_suffix(schema: Mapping[str, Any]) -> str:
    return SCHEMA_INSTRUCTION + json.dumps(schema, indent=2, ensure_ascii=False)


def schema_prompt(prompt: str, schema: Mapping[str, Any]) -> str:
    return prompt + schema_suffix(schema)


# ------------------------------------------------------------------- readers
ParsedBody = Tuple[str, List[FunctionCallDTO], Optional[Usage]]


def _first(items: Any) -> Mapping[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        return items[0]
    return {}


def _read_anthropic(payload: Mapping[str, Any]) -> ParsedBody:
    texts: List[str] = []
    calls: List[FunctionCallDTO] = []
    for block in payload.get("content") or []:
        if not isinstance(block, Mapping):
            continue
        if block.get("type") == "text":
            texts.append(block.get("text") or "")
        elif block.get("type") == "tool_use" and block.get("name"):
            calls.append(FunctionCallDTO(name=block["name"], arguments=block.get("input") or {}))
    return "".join(texts), calls, usage_from_anthropic(payload.get("usage"))


def _read_meta(payload: Mapping[str, Any]) -> ParsedBody:
    prompt_tokens = payload.get("prompt_token_count")
    output_tokens = payload.get("generation_token_count")
    usage = None
    if prompt_tokens is not None or output_tokens is not None:
        total = (prompt_tokens or 0) + (output_tokens or 0)
        usage = Usage(input_tokens=prompt_tokens, output_tokens=output_tokens, total_tokens=total)
    return payload.get("generation") or "", [], usage


def _read_mistral(payload: Mapping[str, Any]) -> ParsedBody:
    return _first(payload.get("outputs")).get("text") or "", [], None


def _read_cohere(payload: Mapping[str, Any]) -> ParsedBody:
    return payload.get("text") or "", [], None


def _read_generic(payload: Mapping[str, Any]) -> ParsedBody:
    result = _first(payload.get("results"))
    usage = None
    if payload.get("inputTextTokenCount") is not None or result.get("tokenCount") is not None:
        usage = Usage(input_tokens=payload.get("inputTextTokenCount"), output_tokens=result.get("tokenCount"))
    return result.get("outputText") or "", [], usage


RESPONSE_READERS: Dict[ModelFamily, Callable[[Mapping[str, Any]], ParsedBody]] = {
    ModelFamily.ANTHROPIC: _read_anthropic,
    ModelFamily.META: _read_meta,
    ModelFamily.MISTRAL: _read_mistral,
    ModelFamily.COHERE: _read_cohere,
    ModelFamily.AMAZON: _read_generic,
    ModelFamily.AI21: _read_generic,
    ModelFamily.UNKNOWN: _read_generic,
}


def read_response(family: ModelFamily, payload: Mapping[str, Any]) -> ParsedBody:
    return RESPONSE_READERS[family](payload)


__all__ = [
    "SCHEMA_INSTRUCTION",
    "PROMPT_BUILDERS",
    "RESPONSE_READERS",
    "resolve_max_tokens",
    "sampling_fields",
    "build_prompt_body",
    "build_messages_body",
    "schema_suffix",
    "schema_prompt",
    "read_response",
]
