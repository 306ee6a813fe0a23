"""
Canonical message DTO used across adapters.

Roles are provider-independent strings passed through unchanged; the
``Role`` literal only documents the common values.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

# Common message roles; adapters accept any string.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class CanonicalMessage:
    """One turn of a conversation in provider-agnostic form.

    Attributes:
        role: Author role, e.g. ``"user"``. Not re-interpreted by adapters.
        content: Plain text content.
        cache_type: Optional cache hint (e.g. ``"ephemeral"``) honoured by
            Anthropic-shaped adapters as ``cache_control``.
        metadata: Optional extra wire fields merged into OpenAI-shaped
            messages (e.g. ``{"name": "alice"}``).
    """

    role: str
    content: str
    cache_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CanonicalMessage":
        """Build a message from a plain mapping such as decoded JSON."""
        return cls(
            role=str(data.get("role", "user")),
            content=str(data.get("content", "")),
            cache_type=data.get("cache_type"),
            metadata=dict(data.get("metadata") or {}),
        )


def append_to_last_user_turn(messages: Sequence[CanonicalMessage], text: str) -> List[CanonicalMessage]:
    """Return a copy of ``messages`` with ``text`` appended to the last user turn.

    A conversation without a user turn gets ``text`` as a new trailing one.
    """
    out = list(messages)
    for index in range(len(out) - 1, -1, -1):
        if out[index].role == "user":
            out[index] = replace(out[index], content=out[index].content + text)
            return out
    out.append(CanonicalMessage(role="user", content=text.lstrip()))
    return out


__all__ = ["CanonicalMessage", "Role", "append_to_last_user_turn"]
