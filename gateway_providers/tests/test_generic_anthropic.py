"""Anthropic-shaped request bodies, response parsing and stream decoding."""

from __future__ import annotations

import json

import pytest

from gateway_providers.base.errors import EmptyResponseError, UpstreamAPIError
from gateway_providers.base.models import CanonicalMessage, ToolSpec
from gateway_providers.base.streaming import StreamSignal
from gateway_providers.generic import GenericProvider, standard_configs
from gateway_providers.generic.anthropic_shape import SCHEMA_INSTRUCTION


def _anthropic() -> GenericProvider:
    return GenericProvider("ak-test", "claude-3-5-haiku-latest", "anthropic", config=standard_configs()["anthropic"])


def _body(raw: bytes) -> dict:
    return json.loads(raw)


def test_system_is_top_level_and_max_tokens_defaults():
    body = _body(_anthropic().prepare_request("Hi", {"system_prompt": "Be terse"}))
    assert body["system"] == "Be terse"
    assert body["max_tokens"] == 1024
    assert body["messages"] == [{"role": "user", "content": "Hi"}]
    assert all(m["role"] != "system" for m in body["messages"])


def test_adapter_max_tokens_wins_over_shape_default():
    adapter = _anthropic()
    adapter.set_option("max_tokens", 2000)
    assert _body(adapter.prepare_request("Hi"))["max_tokens"] == 2000
    assert _body(adapter.prepare_request("Hi", {"max_tokens": 10}))["max_tokens"] == 10


def test_schema_is_appended_to_prompt():
    schema = {"type": "object", "properties": {"a": {"type": "string"}}}
    body = _body(_anthropic().prepare_request_with_schema("Describe", None, schema))
    content = body["messages"][0]["content"]
    assert content == "Describe" + SCHEMA_INSTRUCTION + json.dumps(schema, separators=(",", ":"))
    assert "response_format" not in body


def test_messages_become_text_blocks_with_cache_hint(conversation):
    messages = list(conversation)
    messages[1] = CanonicalMessage(role="user", content="Hi", cache_type="ephemeral")
    body = _body(_anthropic().prepare_request_with_messages(messages))
    assert body["system"] == "Be terse"
    assert body["messages"][0] == {
        "role": "user",
        "content": [{"type": "text", "text": "Hi", "cache_control": {"type": "ephemeral"}}],
    }
    assert [m["role"] for m in body["messages"]] == ["user", "assistant", "user"]


def test_tools_use_input_schema_and_choice_object():
    tool = ToolSpec(name="lookup", parameters={"type": "object", "properties": {}})
    body = _body(_anthropic().prepare_request("x", {"tools": [tool], "tool_choice": "any"}))
    assert body["tools"] == [{"name": "lookup", "description": "", "input_schema": {"type": "object", "properties": {}}}]
    assert body["tool_choice"] == {"type": "any"}


def test_headers_carry_key_and_version():
    headers = _anthropic().headers()
    assert headers["x-api-key"] == "ak-test"
    assert headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in headers


def test_parse_concatenates_text_blocks():
    raw = {
        "content": [{"type": "text", "text": "Hello, "}, {"type": "text", "text": "world"}],
        "usage": {"input_tokens": 5, "output_tokens": 2},
    }
    response = _anthropic().parse_response(json.dumps(raw).encode())
    assert response.text == "Hello, world"
    assert response.usage.total_tokens == 7


def test_parse_tool_use_block():
    raw = {"content": [{"type": "tool_use", "id": "t1", "name": "lookup", "input": {"q": "x"}}]}
    response = _anthropic().parse_response(json.dumps(raw).encode())
    assert response.function_calls[0].to_wire() == {"name": "lookup", "arguments": {"q": "x"}}


def test_empty_content_list():
    with pytest.raises(EmptyResponseError):
        _anthropic().parse_response(b'{"content": []}')


def test_error_body():
    with pytest.raises(UpstreamAPIError) as info:
        _anthropic().parse_response(b'{"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}')
    assert info.value.message == "Overloaded"


def test_stream_events():
    adapter = _anthropic()
    delta = adapter.parse_stream_response('data: {"type":"content_block_delta","delta":{"type":"text_delta","text":"Hi"}}')
    assert delta.is_token and delta.text == "Hi"
    start = adapter.parse_stream_response('data: {"type":"message_start","message":{"usage":{"input_tokens":9,"output_tokens":1}}}')
    assert start.is_skip and start.usage.input_tokens == 9
    assert adapter.parse_stream_response("event: message_stop").is_skip
    assert adapter.parse_stream_response('data: {"type":"ping"}').is_skip
    assert adapter.parse_stream_response('data: {"type":"message_stop"}').signal is StreamSignal.END


def test_stream_error_event():
    with pytest.raises(UpstreamAPIError):
        _anthropic().parse_stream_response('data: {"type":"error","error":{"message":"Overloaded"}}')


def test_messages_with_schema_extend_last_user_turn():
    messages = [
        CanonicalMessage(role="user", content="Hi"),
        CanonicalMessage(role="assistant", content="Hello."),
        CanonicalMessage(role="user", content="Weather?"),
    ]
    body = _body(_anthropic().prepare_request_with_messages_and_schema(messages, None, {"type": "object"}))
    assert body["messages"][0]["content"][0]["text"] == "Hi"
    assert body["messages"][-1]["content"][0]["text"] == 'Weather?' + SCHEMA_INSTRUCTION + '{"type":"object"}'
    assert messages[-1].content == "Weather?"


def test_messages_with_schema_and_no_user_turn():
    messages = [CanonicalMessage(role="system", content="Be terse")]
    body = _body(_anthropic().prepare_request_with_messages_and_schema(messages, None, {"type": "object"}))
    assert body["system"] == "Be terse"
    assert body["messages"][-1]["role"] == "user"
    assert body["messages"][-1]["content"][0]["text"].endswith('{"type":"object"}')
