"""GenericProvider construction, transport data and the prepare dispatcher."""

from __future__ import annotations

import json

import pytest

from gateway_providers.base.dto.provider_config import ProviderConfig, WireFormat
from gateway_providers.base.errors import (
    ConfigNotFoundError,
    ErrorCode,
    ProviderError,
    UnsupportedCapabilityError,
)
from gateway_providers.base.models import RequestBuilder
from gateway_providers.base.registry import ProviderRegistry
from gateway_providers.base.utils.function_calls import format_function_call
from gateway_providers.config.settings import GenerationSettings
from gateway_providers.generic import GenericProvider, standard_configs


def _openai(**kwargs) -> GenericProvider:
    return GenericProvider("sk-test", "gpt-4o-mini", "openai", config=standard_configs()["openai"], **kwargs)


def test_headers_merge_order():
    adapter = _openai(extra_headers={"X-Trace": "1", "Content-Type": "application/vnd+json"})
    assert adapter.headers() == {
        "Content-Type": "application/vnd+json",
        "Authorization": "Bearer sk-test",
        "X-Trace": "1",
    }


def test_auth_header_omitted_without_key():
    adapter = GenericProvider("", "m", "openai", config=standard_configs()["openai"])
    assert "Authorization" not in adapter.headers()


def test_set_extra_headers_replaces_and_clears():
    adapter = _openai(extra_headers={"A": "1"})
    adapter.set_extra_headers({"B": "2"})
    assert "A" not in adapter.headers() and adapter.headers()["B"] == "2"
    adapter.set_extra_headers(None)
    assert "B" not in adapter.headers()


def test_endpoint_template_and_params():
    config = ProviderConfig(
        name="azure-like",
        endpoint="https://example.invalid/deployments/{model}/chat/completions?x=1",
        endpoint_params={"api-version": "2024-06-01"},
    )
    adapter = GenericProvider("k", "gpt4", "azure-like", config=config)
    assert adapter.endpoint() == "https://example.invalid/deployments/gpt4/chat/completions?api-version=2024-06-01&x=1"


def test_empty_endpoint_requires_override():
    adapter = GenericProvider("k", "m", "azure-openai", config=standard_configs()["azure-openai"])
    with pytest.raises(ProviderError) as info:
        adapter.endpoint()
    assert info.value.code is ErrorCode.VALIDATION
    adapter.set_endpoint("https://my.openai.azure.com/openai/deployments/m/chat/completions")
    assert adapter.endpoint().startswith("https://my.openai.azure.com/")
    assert adapter.headers()["api-key"] == "k"


def test_custom_wire_format_is_rejected():
    with pytest.raises(UnsupportedCapabilityError):
        GenericProvider("k", "m", "bedrock", config=standard_configs()["bedrock"])


def test_missing_config_and_registry():
    with pytest.raises(ConfigNotFoundError):
        GenericProvider("k", "m", "nowhere")


def test_registry_backed_construction():
    registry = ProviderRegistry("openai")
    adapter = GenericProvider("k", "m", "groq", registry=registry)
    assert adapter.name == "groq"
    assert adapter.config.wire_format is WireFormat.OPENAI
    with pytest.raises(ConfigNotFoundError):
        GenericProvider("k", "m", "nowhere", registry=registry)


def test_set_default_options_from_settings():
    adapter = _openai()
    adapter.set_default_options(GenerationSettings(temperature=0.1, max_tokens=64, seed=7))
    body = json.loads(adapter.prepare_request("x"))
    assert (body["temperature"], body["max_tokens"], body["seed"]) == (0.1, 64, 7)


def test_set_default_options_skips_unset_seed():
    adapter = _openai()
    adapter.set_default_options(GenerationSettings())
    assert "seed" not in adapter.options


def test_handle_function_calls():
    adapter = _openai()
    assert adapter.handle_function_calls("no calls") is None
    raw = adapter.handle_function_calls("x " + format_function_call("f", {"a": 1}))
    assert json.loads(raw) == [{"name": "f", "arguments": {"a": 1}}]


# ------------------------------------------------------------------ prepare
def test_prepare_prompt_with_system_and_options():
    request = RequestBuilder().with_system_prompt("Be terse").with_prompt("Hi").with_option("temperature", 0.3).build()
    body = json.loads(_openai().prepare(request))
    assert body["messages"][0]["role"] == "system"
    assert body["temperature"] == 0.3


def test_prepare_messages_take_precedence_over_prompt():
    request = RequestBuilder().with_prompt("ignored").with_message("user", "Hi").build()
    body = json.loads(_openai().prepare(request))
    assert body["messages"] == [{"role": "user", "content": "Hi"}]


def test_prepare_streaming_messages():
    request = RequestBuilder().with_message("user", "Hi").streaming().build()
    body = json.loads(_openai().prepare(request))
    assert body["stream"] is True
    assert body["stream_options"] == {"include_usage": True}


def test_prepare_schema():
    request = RequestBuilder().with_prompt("Hi").with_response_schema({"type": "object"}).build()
    body = json.loads(_openai().prepare(request))
    assert body["functions"][0]["parameters"] == {"type": "object", "additionalProperties": False}


def test_prepare_schema_with_stream_is_rejected():
    request = RequestBuilder().with_prompt("Hi").with_response_schema({"type": "object"}).streaming().build()
    with pytest.raises(UnsupportedCapabilityError):
        _openai().prepare(request)


def test_repr_names_adapter():
    assert repr(_openai()) == "GenericProvider(name='openai', model='gpt-4o-mini')"


def test_prepare_messages_with_schema_keeps_schema():
    request = RequestBuilder().with_message("user", "Hi").with_response_schema({"type": "object"}).build()
    body = json.loads(_openai().prepare(request))
    assert body["messages"] == [{"role": "user", "content": "Hi"}]
    assert body["response_format"] == {"type": "json_object"}
    assert body["function_call"] == {"name": body["functions"][0]["name"]}
    assert body["functions"][0]["parameters"] == {"type": "object", "additionalProperties": False}


@pytest.mark.parametrize("with_messages", [True, False])
def test_prepare_schema_rejected_without_schema_support(with_messages):
    config = ProviderConfig(name="plain", endpoint="https://example.invalid/v1/chat")
    adapter = GenericProvider("k", "m", "plain", config=config)
    builder = RequestBuilder().with_response_schema({"type": "object"})
    builder = builder.with_message("user", "Hi") if with_messages else builder.with_prompt("Hi")
    with pytest.raises(UnsupportedCapabilityError):
        adapter.prepare(builder.build())


def test_set_default_options_applies_top_p_when_set():
    adapter = _openai()
    adapter.set_default_options(GenerationSettings(top_p=0.5))
    assert json.loads(adapter.prepare_request("x"))["top_p"] == 0.5
    other = _openai()
    other.set_default_options(GenerationSettings())
    assert "top_p" not in other.options
