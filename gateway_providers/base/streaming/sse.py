"""Server-sent-event framing helpers shared by the stream decoders."""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from ..constants import SSE_DATA_PREFIX
from ..errors import MalformedUpstreamResponseError

Chunk = Union[bytes, bytearray, str]


def chunk_text(chunk: Chunk, provider: str = "unknown", model: Optional[str] = None) -> str:
    """Decode a raw chunk to text and trim surrounding whitespace.

    Raises:
        MalformedUpstreamResponseError: the bytes are not valid UTF-8.
    """
    if isinstance(chunk, (bytes, bytearray)):
        try:
            chunk = bytes(chunk).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedUpstreamResponseError(
                f"response is not valid UTF-8: {exc}", provider=provider, model=model, raw=exc
            ) from exc
    return chunk.strip()


def strip_data_prefix(chunk: Chunk, provider: str = "unknown", model: Optional[str] = None) -> Optional[str]:
    """Return the payload of a ``data:`` line, or ``None`` for a non-data line.

    Empty lines, ``event:`` / ``id:`` / ``retry:`` fields and ``:`` comments
    carry nothing to decode. Lines without any SSE field prefix are returned
    as-is (some gateways send bare JSON objects).
    """
    text = chunk_text(chunk, provider, model)
    if not text or text.startswith(":"):
        return None
    if text.startswith(SSE_DATA_PREFIX):
        return text[len(SSE_DATA_PREFIX):].strip()
    if text.startswith("data:"):
        return text[len("data:"):].strip()
    if text.split(":", 1)[0] in ("event", "id", "retry"):
        return None
    return text


def decode_json_payload(payload: str, provider: str, model: Optional[str] = None) -> Any:
    """``json.loads`` that raises ``MalformedUpstreamResponseError`` on failure."""
    try:
        return json.loads(payload)
    except ValueError as exc:
        raise MalformedUpstreamResponseError(
            f"failed to decode response: {exc}", provider=provider, model=model, raw=exc
        ) from exc


__all__ = ["Chunk", "chunk_text", "strip_data_prefix", "decode_json_payload"]
