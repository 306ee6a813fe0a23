"""
Canonical request DTO and its fluent builder.

A request carries either a prompt or an ordered message list (every adapter
accepts both), plus optional system instruction, tool declarations,
tool-choice directive, response schema and a per-call :class:`OptionBag`.
``BaseProvider.prepare`` picks the matching request builder.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..constants import KEY_STREAM, KEY_SYSTEM_PROMPT, KEY_TOOL_CHOICE, KEY_TOOLS
from .message import CanonicalMessage
from .options import OptionBag
from .tool_spec import ToolSpec


@dataclass
class CanonicalRequest:
    """Provider-agnostic request assembled by callers.

    Attributes:
        prompt: Prompt text; ignored when ``messages`` is non-empty.
        messages: Ordered conversation turns.
        system_prompt: Optional system instruction.
        tools: Declared tools.
        tool_choice: Optional tool-choice directive (string or mapping).
        response_schema: Optional JSON Schema for structured output.
        options: Per-call option overrides.
    """

    prompt: str = ""
    messages: List[CanonicalMessage] = field(default_factory=list)
    system_prompt: Optional[str] = None
    tools: List[ToolSpec] = field(default_factory=list)
    tool_choice: Optional[Any] = None
    response_schema: Optional[Dict[str, Any]] = None
    options: OptionBag = field(default_factory=OptionBag)

    @property
    def stream(self) -> bool:
        return self.options.stream

    def has_messages(self) -> bool:
        return bool(self.messages)

    def call_options(self) -> OptionBag:
        """Flatten the request parts into the per-call option bag adapters read.

        The explicit fields are written after the free-form options so they
        win over same-named keys placed in ``options`` directly.
        """
        bag = self.options.copy()
        bag.pop(KEY_STREAM, None)
        if self.system_prompt:
            bag[KEY_SYSTEM_PROMPT] = self.system_prompt
        if self.tools:
            bag[KEY_TOOLS] = list(self.tools)
        if self.tool_choice is not None:
            bag[KEY_TOOL_CHOICE] = self.tool_choice
        return bag


class RequestBuilder:
    """Fluent builder for :class:`CanonicalRequest`.

    Example::

        request = (
            RequestBuilder()
            .with_system_prompt("Be terse")
            .with_prompt("Hi")
            .with_option("temperature", 0.2)
            .build()
        )
    """

    def __init__(self) -> None:
        self._request = CanonicalRequest()

    def with_prompt(self, prompt: str) -> "RequestBuilder":
        self._request.prompt = prompt
        return self

    def with_message(
        self,
        role: str,
        content: str,
        *,
        cache_type: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "RequestBuilder":
        self._request.messages.append(
            CanonicalMessage(role=role, content=content, cache_type=cache_type, metadata=dict(metadata or {}))
        )
        return self

    def with_messages(self, messages: Iterable[Union[CanonicalMessage, Mapping[str, Any]]]) -> "RequestBuilder":
        for message in messages:
            if not isinstance(message, CanonicalMessage):
                message = CanonicalMessage.from_mapping(message)
            self._request.messages.append(message)
        return self

    def with_system_prompt(self, system_prompt: str) -> "RequestBuilder":
        self._request.system_prompt = system_prompt
        return self

    def with_tools(self, tools: Iterable[Union[ToolSpec, Mapping[str, Any]]]) -> "RequestBuilder":
        self._request.tools.extend(ToolSpec.coerce(t) for t in tools)
        return self

    def with_tool_choice(self, tool_choice: Any) -> "RequestBuilder":
        self._request.tool_choice = tool_choice
        return self

    def with_response_schema(self, schema: Mapping[str, Any]) -> "RequestBuilder":
        self._request.response_schema = dict(schema)
        return self

    def with_option(self, key: str, value: Any) -> "RequestBuilder":
        self._request.options[key] = value
        return self

    def with_options(self, options: Mapping[str, Any]) -> "RequestBuilder":
        self._request.options.update(options)
        return self

    def streaming(self, enabled: bool = True) -> "RequestBuilder":
        self._request.options[KEY_STREAM] = enabled
        return self

    def build(self) -> CanonicalRequest:
        return self._request


__all__ = ["CanonicalRequest", "RequestBuilder"]
