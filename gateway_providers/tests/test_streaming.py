"""Stream helpers shared by every adapter."""

from __future__ import annotations

import pytest

from gateway_providers.base.errors import MalformedUpstreamResponseError
from gateway_providers.base.models import Usage
from gateway_providers.base.streaming import (
    StreamEvent,
    StreamSignal,
    accumulate_events,
    chunk_text,
    decode_json_payload,
    decode_stream,
    iter_tokens,
    strip_data_prefix,
)
from gateway_providers.generic import GenericProvider, standard_configs

OPENAI_STREAM = [
    b'data: {"choices":[{"delta":{"role":"assistant"}}]}',
    b'data: {"choices":[{"delta":{"content":"Hel"}}]}',
    b"",
    b'data: {"choices":[{"delta":{"content":"lo"}}]}',
    b'data: {"choices":[{"delta":{},"finish_reason":"stop"}]}',
    b'data: {"choices":[],"usage":{"prompt_tokens":2,"completion_tokens":2,"total_tokens":4}}',
    b"data: [DONE]",
    b'data: {"choices":[{"delta":{"content":"after end"}}]}',
]


def _openai() -> GenericProvider:
    return GenericProvider("k", "gpt-4o-mini", "openai", config=standard_configs()["openai"])


@pytest.mark.parametrize(
    "chunk, expected",
    [
        ("data: {}", "{}"),
        ("data:{}", "{}"),
        ('  {"raw": true}  ', '{"raw": true}'),
        ("event: ping", None),
        ("id: 7", None),
        (": comment", None),
        ("", None),
    ],
)
def test_strip_data_prefix(chunk, expected):
    assert strip_data_prefix(chunk) == expected


def test_decode_json_payload_wraps_error():
    with pytest.raises(MalformedUpstreamResponseError) as info:
        decode_json_payload("{", "p", "m")
    assert info.value.provider == "p"


def test_decode_stream_stops_after_end():
    events = list(decode_stream(_openai(), OPENAI_STREAM))
    assert events[-1].signal is StreamSignal.END
    assert len(events) == len(OPENAI_STREAM) - 1


def test_iter_tokens_and_accumulate():
    assert list(iter_tokens(_openai(), OPENAI_STREAM)) == ["Hel", "lo"]
    response = accumulate_events(decode_stream(_openai(), OPENAI_STREAM))
    assert response.text == "Hello"
    assert response.usage.total_tokens == 4


def test_decode_stream_is_lazy():
    def chunks():
        yield b'data: {"choices":[{"delta":{"content":"a"}}]}'
        raise AssertionError("read past the first chunk")

    stream = decode_stream(_openai(), chunks())
    assert next(stream).text == "a"


def test_event_constructors():
    usage = Usage(total_tokens=1)
    assert StreamEvent.token("p", "m", "x").is_token
    assert StreamEvent.skip("p", "m", usage=usage).usage is usage
    end = StreamEvent.end("p", "m")
    assert end.is_end and end.text == ""


def test_chunk_text_wraps_invalid_utf8():
    with pytest.raises(MalformedUpstreamResponseError) as info:
        chunk_text(b"data: \xff", "openai", "gpt-4o-mini")
    assert (info.value.provider, info.value.model) == ("openai", "gpt-4o-mini")
    assert isinstance(info.value.__cause__, UnicodeDecodeError)
