"""Tag-delimited function-call grammar.

Models that lack a native tool-call field embed calls in free text as::

    <function_call>{"name": "get_weather", "arguments": {"city": "Oslo"}}</function_call>

This module finds, parses, strips and renders such spans. Parsing is
tolerant of double encoding: when ``arguments`` is itself a JSON string that
decodes to an object, the decoded object replaces it. Spans are matched
lazily across newlines so pretty-printed JSON is accepted.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..constants import FUNCTION_CALL_CLOSE, FUNCTION_CALL_OPEN
from ..dto.function_call import FunctionCallDTO
from ..errors import ErrorCode, FunctionCallParseError, ProviderError

FUNCTION_CALL_PATTERN = re.compile(
    re.escape(FUNCTION_CALL_OPEN) + r"(.*?)" + re.escape(FUNCTION_CALL_CLOSE),
    re.DOTALL,
)


@dataclass
class FunctionCallResult:
    """Outcome of parsing one span; exactly one of ``call``/``error`` is set."""

    index: int
    span: str
    call: Optional[FunctionCallDTO] = None
    error: Optional[FunctionCallParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _decode_object_string(value: Any) -> Any:
    """Return the decoded object when ``value`` is a JSON-encoded object string."""
    if not isinstance(value, str):
        return value
    try:
        decoded = json.loads(value)
    except ValueError:
        return value
    return decoded if isinstance(decoded, dict) else value


def parse_function_call(span: str, index: int = 0) -> FunctionCallDTO:
    """Parse the JSON text found between the tags of one span.

    Raises:
        FunctionCallParseError: the span is not a JSON object with a string
            ``name``.
    """
    try:
        payload = json.loads(span)
    except ValueError as exc:
        raise FunctionCallParseError(
            f"invalid JSON in function call span {index}: {exc}", index=index, span=span, raw=exc
        ) from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("name"), str):
        raise FunctionCallParseError(
            f"function call span {index} must be an object with a string 'name'", index=index, span=span
        )
    arguments = _decode_object_string(payload.get("arguments", {}))
    return FunctionCallDTO(name=payload["name"], arguments=arguments)


def find_function_call_spans(text: str) -> List[str]:
    """Return the raw JSON text of every span in document order."""
    return [match.group(1) for match in FUNCTION_CALL_PATTERN.finditer(text)]


def extract_function_call_results(text: str) -> List[FunctionCallResult]:
    """Parse every span independently; a bad span does not hide the others."""
    results: List[FunctionCallResult] = []
    for index, span in enumerate(find_function_call_spans(text)):
        try:
            results.append(FunctionCallResult(index=index, span=span, call=parse_function_call(span, index)))
        except FunctionCallParseError as exc:
            results.append(FunctionCallResult(index=index, span=span, error=exc))
    return results


def extract_function_calls(text: str) -> List[FunctionCallDTO]:
    """Return all embedded calls in order; zero spans yields an empty list.

    Raises:
        FunctionCallParseError: for the first malformed span, after every
            span has been attempted.
    """
    results = extract_function_call_results(text)
    for result in results:
        if result.error is not None:
            raise result.error
    return [r.call for r in results if r.call is not None]


def clean_response(text: str) -> Tuple[str, List[str]]:
    """Remove every span from ``text`` and collect the span bodies.

    The text between spans is concatenated verbatim, nothing else changes.
    Span bodies are returned unparsed so callers can decide how to treat a
    malformed one.
    """
    pieces: List[str] = []
    spans: List[str] = []
    last = 0
    for match in FUNCTION_CALL_PATTERN.finditer(text):
        pieces.append(text[last : match.start()])
        spans.append(match.group(1))
        last = match.end()
    pieces.append(text[last:])
    return "".join(pieces), spans


def clean_response_calls(text: str) -> Tuple[str, List[FunctionCallDTO]]:
    """Like :func:`clean_response` but with the spans parsed, in document order.

    Raises:
        FunctionCallParseError: for the first malformed span.
    """
    cleaned, _ = clean_response(text)
    return cleaned, extract_function_calls(text)

def format_function_call(name: str, arguments: Any) -> str:
    """Render a call as a tagged span, the inverse of :func:`parse_function_call`."""
    payload = {"name": name, "arguments": _decode_object_string(arguments)}
    try:
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"function call arguments for {name!r} are not JSON serializable: {exc}",
            provider="function_call",
            raw=exc,
        ) from exc
    return f"{FUNCTION_CALL_OPEN}{body}{FUNCTION_CALL_CLOSE}"


def render_function_calls(calls: List[FunctionCallDTO]) -> str:
    """Render several calls joined by newlines, as adapters embed them in text."""
    return "\n".join(format_function_call(c.name, c.arguments) for c in calls)


__all__ = [
    "FUNCTION_CALL_PATTERN",
    "FunctionCallResult",
    "parse_function_call",
    "find_function_call_spans",
    "extract_function_call_results",
    "extract_function_calls",
    "clean_response",
    "clean_response_calls",
    "format_function_call",
    "render_function_calls",
]
