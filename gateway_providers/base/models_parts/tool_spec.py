"""
Tool declaration DTO.

A ``ToolSpec`` names a callable the model may invoke together with the JSON
Schema of its parameters. Adapters translate it into their wire shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union


@dataclass
class ToolSpec:
    """Provider-agnostic function/tool declaration.

    Attributes:
        name: Function name the model refers to.
        description: Human-readable description shown to the model.
        parameters: JSON Schema object describing the arguments.
    """

    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    @classmethod
    def coerce(cls, value: Union["ToolSpec", Mapping[str, Any]]) -> "ToolSpec":
        """Accept a ``ToolSpec`` or a mapping in either common wire form.

        Mappings may be flat (``{"name", "description", "parameters"}``),
        OpenAI-shaped (``{"type": "function", "function": {...}}``) or
        Anthropic-shaped (``input_schema`` instead of ``parameters``).
        """
        if isinstance(value, ToolSpec):
            return value
        inner = value.get("function")
        data: Mapping[str, Any] = inner if isinstance(inner, Mapping) else value
        params = data.get("parameters", data.get("input_schema"))
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            parameters=dict(params) if params else {"type": "object", "properties": {}},
        )


__all__ = ["ToolSpec"]
