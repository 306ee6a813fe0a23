"""Structured logging context carried by adapter log events."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Provider/model context merged into every structured event.

    ``family`` is only populated by the gateway adapter; ``extra`` is merged
    shallowly and ``None`` values are pruned by :meth:`to_dict`.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    family: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
