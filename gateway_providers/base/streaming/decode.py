"""Lazy stream decoding and folding.

``decode_stream`` turns the chunks supplied by an external stream reader
into :class:`StreamEvent` values one at a time and stops after the first
end event. Nothing is buffered beyond the current chunk, so the sequence
can only be restarted by re-reading the transport from the beginning.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Protocol

from ..models import Response, Usage
from .events import StreamEvent, StreamSignal
from .sse import Chunk


class ChunkDecoder(Protocol):
    def parse_stream_response(self, chunk: Chunk) -> StreamEvent:  # pragma: no cover - protocol
        ...


def decode_stream(provider: ChunkDecoder, chunks: Iterable[Chunk]) -> Iterator[StreamEvent]:
    """Yield one decoded event per chunk, ending after the end signal."""
    for chunk in chunks:
        event = provider.parse_stream_response(chunk)
        yield event
        if event.signal is StreamSignal.END:
            return


def iter_tokens(provider: ChunkDecoder, chunks: Iterable[Chunk]) -> Iterator[str]:
    """Yield only token text, hiding skip and end signals."""
    for event in decode_stream(provider, chunks):
        if event.signal is StreamSignal.TOKEN and event.text:
            yield event.text


def accumulate_events(events: Iterable[StreamEvent]) -> Response:
    """Fold a decoded stream back into a :class:`Response`.

    Token texts are concatenated in order; usage carried by any event is
    merged so that later counters win.
    """
    parts: List[str] = []
    usage: Optional[Usage] = None
    for event in events:
        if event.signal is StreamSignal.TOKEN:
            parts.append(event.text)
        if event.usage is not None:
            usage = event.usage if usage is None else usage.merge(event.usage)
    return Response(text="".join(parts), usage=usage)


__all__ = ["ChunkDecoder", "decode_stream", "iter_tokens", "accumulate_events"]
