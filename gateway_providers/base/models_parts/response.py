"""
Normalized response returned by ``parse_response``.

``text`` already contains any tool calls rendered with the function-call
grammar; ``function_calls`` carries the same calls as structured values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..dto.function_call import FunctionCallDTO
from .usage import Usage


@dataclass
class Response:
    """Provider-agnostic result of one generation.

    Attributes:
        text: Generated text.
        function_calls: Structured tool calls found in the response body.
        usage: Usage counters when the vendor reported them.
        raw: Decoded response body for diagnostics; excluded from ``to_dict``.
    """

    text: str
    function_calls: List[FunctionCallDTO] = field(default_factory=list)
    usage: Optional[Usage] = None
    raw: Optional[Any] = None

    def __str__(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "function_calls": [c.model_dump() for c in self.function_calls],
            "usage": self.usage.to_dict() if self.usage else None,
        }


__all__ = ["Response"]
