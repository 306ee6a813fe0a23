"""DTO describing one structured function call.

Produced by the function-call grammar and by adapters that find native tool
calls in a response body. ``arguments`` is usually a mapping but may be any
JSON value a model emitted.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class FunctionCallDTO(BaseModel):
    """A function/tool invocation requested by a model.

    Parameters
    ----------
    name:
        The function/tool name chosen by the model.
    arguments:
        Decoded arguments payload. Defaults to an empty mapping.
    """

    name: str
    arguments: Any = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        """Return the ``{"name", "arguments"}`` mapping embedded in text spans."""
        return {"name": self.name, "arguments": self.arguments}


__all__ = ["FunctionCallDTO"]
