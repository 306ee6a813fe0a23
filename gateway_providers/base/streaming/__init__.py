"""Streaming package: decode results, SSE framing and stream folding."""

from .decode import accumulate_events, decode_stream, iter_tokens
from .events import StreamEvent, StreamSignal
from .sse import chunk_text, decode_json_payload, strip_data_prefix

__all__ = [
    "StreamEvent",
    "StreamSignal",
    "decode_stream",
    "iter_tokens",
    "accumulate_events",
    "chunk_text",
    "strip_data_prefix",
    "decode_json_payload",
]
