"""Function-call grammar: extraction, cleaning and formatting."""

from __future__ import annotations

import json

import pytest

from gateway_providers.base.errors import ErrorCode, FunctionCallParseError, ProviderError
from gateway_providers.base.utils.function_calls import (
    clean_response,
    clean_response_calls,
    extract_function_call_results,
    extract_function_calls,
    format_function_call,
    parse_function_call,
    render_function_calls,
)
from gateway_providers.base.dto.function_call import FunctionCallDTO


def test_no_spans_yields_empty_list():
    assert extract_function_calls("plain text, no calls") == []


def test_extract_single_call():
    text = 'before <function_call>{"name": "get_weather", "arguments": {"city": "Oslo"}}</function_call> after'
    calls = extract_function_calls(text)
    assert len(calls) == 1
    assert calls[0].name == "get_weather"
    assert calls[0].arguments == {"city": "Oslo"}


def test_double_encoded_arguments_are_decoded():
    inner = json.dumps({"city": "Oslo", "days": 3})
    text = "<function_call>" + json.dumps({"name": "forecast", "arguments": inner}) + "</function_call>"
    (call,) = extract_function_calls(text)
    assert call.arguments == {"city": "Oslo", "days": 3}


def test_plain_string_arguments_are_kept():
    (call,) = extract_function_calls('<function_call>{"name": "echo", "arguments": "hello"}</function_call>')
    assert call.arguments == "hello"


def test_multiline_span_is_matched():
    text = '<function_call>{\n  "name": "a",\n  "arguments": {}\n}</function_call>'
    assert extract_function_calls(text)[0].name == "a"


@pytest.mark.parametrize(
    "arguments",
    [
        {"city": "Oslo"},
        {"nested": {"list": [1, 2, {"x": None}]}, "flag": True},
        {},
        json.dumps({"already": "encoded"}),
    ],
)
def test_format_then_extract_round_trip(arguments):
    expected = json.loads(arguments) if isinstance(arguments, str) else arguments
    calls = extract_function_calls(format_function_call("tool", arguments))
    assert [c.to_wire() for c in calls] == [{"name": "tool", "arguments": expected}]


def test_format_is_compact_and_tagged():
    assert format_function_call("f", {"a": 1}) == '<function_call>{"name":"f","arguments":{"a":1}}</function_call>'


def test_format_rejects_unserializable_arguments():
    with pytest.raises(ProviderError) as info:
        format_function_call("f", {"when": object()})
    assert info.value.code is ErrorCode.VALIDATION


def test_clean_response_removes_spans_and_preserves_text():
    first = format_function_call("a", {"x": 1})
    second = format_function_call("b", {"y": 2})
    text = f"Start {first} middle{second} end"
    cleaned, spans = clean_response(text)
    assert cleaned == "Start  middle end"
    assert len(spans) == 2
    assert [parse_function_call(s).name for s in spans] == ["a", "b"]


def test_clean_response_without_spans_is_identity():
    assert clean_response("nothing here") == ("nothing here", [])


def test_malformed_span_raises_parse_error_with_index():
    text = format_function_call("ok", {}) + "<function_call>{not json}</function_call>"
    with pytest.raises(FunctionCallParseError) as info:
        extract_function_calls(text)
    assert info.value.index == 1
    assert info.value.span == "{not json}"
    assert info.value.code is ErrorCode.FUNCTION_CALL_PARSE


def test_malformed_span_does_not_hide_other_calls():
    text = "<function_call>{bad}</function_call>" + format_function_call("good", {"k": "v"})
    results = extract_function_call_results(text)
    assert [r.ok for r in results] == [False, True]
    assert results[1].call.name == "good"


def test_span_without_name_is_rejected():
    with pytest.raises(FunctionCallParseError):
        parse_function_call('{"arguments": {}}')


def test_render_function_calls_joins_with_newline():
    calls = [FunctionCallDTO(name="a", arguments={}), FunctionCallDTO(name="b", arguments={"n": 1})]
    rendered = render_function_calls(calls)
    assert rendered.count("\n") == 1
    assert [c.name for c in extract_function_calls(rendered)] == ["a", "b"]


def test_clean_response_calls_returns_parsed_calls_in_order():
    text = "a " + format_function_call("f", {"x": 1}) + " b " + format_function_call("g", {}) + " c"
    cleaned, calls = clean_response_calls(text)
    assert cleaned == "a  b  c"
    assert [(c.name, c.arguments) for c in calls] == [("f", {"x": 1}), ("g", {})]


def test_clean_response_calls_raises_on_bad_span():
    with pytest.raises(FunctionCallParseError):
        clean_response_calls("x <function_call>{nope}</function_call>")
