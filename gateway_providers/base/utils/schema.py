"""JSON Schema reduction for OpenAI-shaped structured output.

Strict structured output only accepts a small keyword subset. The reduction
keeps ``type``, ``properties``, ``required`` and ``items``, recurses into
properties and items, and closes every object with
``additionalProperties: false``. Anything else is dropped; the dropped
keyword paths are returned so the caller can log them.
"""
from __future__ import annotations

from typing import Any, List, Tuple

_KEPT_KEYWORDS = ("type", "properties", "required", "items")


def _clean(node: Any, path: str, dropped: List[str]) -> Any:
    if not isinstance(node, dict):
        return node
    result = {}
    for key, value in node.items():
        if key == "properties":
            props = value if isinstance(value, dict) else {}
            result[key] = {name: _clean(sub, f"{path}.properties.{name}", dropped) for name, sub in props.items()}
        elif key == "items":
            result[key] = _clean(value, f"{path}.items", dropped)
        elif key in _KEPT_KEYWORDS:
            result[key] = value
        elif key == "additionalProperties" and node.get("type") == "object":
            continue
        else:
            dropped.append(f"{path}.{key}")
    if node.get("type") == "object":
        result["additionalProperties"] = False
    return result


def clean_schema_for_openai(schema: Any) -> Tuple[Any, List[str]]:
    """Return ``(reduced_schema, dropped_keyword_paths)``; the input is not mutated."""
    dropped: List[str] = []
    return _clean(schema, "$", dropped), dropped


__all__ = ["clean_schema_for_openai"]
