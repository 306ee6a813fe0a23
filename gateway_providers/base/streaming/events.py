"""Stream decode results.

Decoding one inbound chunk yields exactly one :class:`StreamEvent`: a token,
a skip (nothing to emit, keep reading) or the end of the sequence. End and
skip are normal control signals, never errors; malformed chunks raise
``MalformedUpstreamResponseError`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..models import Usage


class StreamSignal(str, Enum):
    """Classification of one decoded chunk."""

    TOKEN = "token"
    SKIP = "skip"
    END = "end"


@dataclass
class StreamEvent:
    """One decoded stream chunk.

    Fields:
      provider: adapter name that decoded the chunk
      model: model id
      signal: token / skip / end
      text: token text; empty for skip and end
      usage: usage counters carried by the chunk, if any
      raw: decoded JSON payload (optional, for debugging)
    """

    provider: str
    model: str
    signal: StreamSignal
    text: str = ""
    usage: Optional[Usage] = None
    raw: Any | None = None

    @classmethod
    def token(cls, provider: str, model: str, text: str, *, raw: Any = None) -> "StreamEvent":
        return cls(provider=provider, model=model, signal=StreamSignal.TOKEN, text=text, raw=raw)

    @classmethod
    def skip(cls, provider: str, model: str, *, usage: Optional[Usage] = None, raw: Any = None) -> "StreamEvent":
        return cls(provider=provider, model=model, signal=StreamSignal.SKIP, usage=usage, raw=raw)

    @classmethod
    def end(cls, provider: str, model: str, *, usage: Optional[Usage] = None, raw: Any = None) -> "StreamEvent":
        return cls(provider=provider, model=model, signal=StreamSignal.END, usage=usage, raw=raw)

    @property
    def is_token(self) -> bool:
        return self.signal is StreamSignal.TOKEN

    @property
    def is_skip(self) -> bool:
        return self.signal is StreamSignal.SKIP

    @property
    def is_end(self) -> bool:
        return self.signal is StreamSignal.END


__all__ = ["StreamSignal", "StreamEvent"]
