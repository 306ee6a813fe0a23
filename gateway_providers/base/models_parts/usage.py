"""
Token usage reported by a vendor.

Values are copied from the response; nothing here counts tokens.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class Usage:
    """Normalized usage counters. ``None`` means the vendor did not report it."""

    input_tokens: Optional[int] = None
    cached_input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cached_output_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def merge(self, other: Optional["Usage"]) -> "Usage":
        """Return a copy where non-``None`` counters of ``other`` win.

        Streams report usage piecemeal (input on start, output on the final
        delta), so folding events keeps the latest value per counter.
        """
        if other is None:
            return Usage(**asdict(self))
        merged = asdict(self)
        for key, value in asdict(other).items():
            if value is not None:
                merged[key] = value
        return Usage(**merged)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


__all__ = ["Usage"]
