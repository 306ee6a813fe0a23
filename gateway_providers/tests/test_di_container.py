"""Container wiring: one registry per container, seeded adapters."""

from __future__ import annotations

import json
import threading

import pytest

from gateway_providers import create
from gateway_providers.base.errors import ProviderNotFoundError
from gateway_providers.bedrock import BedrockProvider
from gateway_providers.config import CONFIG_FILE_ENV
from gateway_providers.config.settings import GenerationSettings
from gateway_providers.di import ProvidersContainer, build_container


def test_registry_is_built_once_under_concurrency():
    container = build_container(settings=GenerationSettings())
    seen = []
    barrier = threading.Barrier(8)

    def grab():
        barrier.wait()
        seen.append(container.registry())

    threads = [threading.Thread(target=grab) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert len(seen) == 8
    assert all(r is seen[0] for r in seen)


def test_provider_seeded_with_settings_and_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    container = ProvidersContainer(settings=GenerationSettings(temperature=0.1, max_tokens=42))
    adapter = container.provider("OpenAI")
    assert adapter.model == "gpt-4o-mini"
    assert adapter.headers()["Authorization"] == "Bearer sk-from-env"
    body = json.loads(adapter.prepare_request("Hi"))
    assert (body["temperature"], body["max_tokens"]) == (0.1, 42)


def test_explicit_arguments_win():
    container = ProvidersContainer(settings=GenerationSettings())
    adapter = container.provider("groq", api_key="explicit", model="llama-3.1-8b-instant", extra_headers={"X": "1"})
    assert adapter.model == "llama-3.1-8b-instant"
    assert adapter.headers()["Authorization"] == "Bearer explicit"
    assert adapter.headers()["X"] == "1"


def test_endpoint_override_from_config():
    container = ProvidersContainer(
        config={"azure-openai": {"endpoint": "https://acct.openai.azure.com/openai/deployments/d/chat/completions"}},
        settings=GenerationSettings(),
    )
    adapter = container.provider("azure-openai", api_key="k", model="d")
    assert adapter.endpoint().startswith("https://acct.openai.azure.com/")


def test_bedrock_region_from_config():
    container = ProvidersContainer(config={"bedrock": {"region": "eu-west-3"}}, settings=GenerationSettings())
    adapter = container.provider("bedrock")
    assert isinstance(adapter, BedrockProvider)
    assert adapter.region == "eu-west-3"
    assert adapter.model == "anthropic.claude-3-haiku-20240307-v1:0"


def test_file_declared_providers_are_registered(tmp_path, monkeypatch):
    path = tmp_path / "providers.json"
    path.write_text(
        json.dumps({"providers": [{"name": "together", "endpoint": "https://api.together.xyz/v1/chat/completions"}]})
    )
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    container = ProvidersContainer(settings=GenerationSettings())
    adapter = container.provider("together", api_key="k", model="m")
    assert adapter.endpoint() == "https://api.together.xyz/v1/chat/completions"


def test_unknown_provider():
    with pytest.raises(ProviderNotFoundError):
        ProvidersContainer(settings=GenerationSettings()).provider("nope")


def test_clear_rebuilds_registry():
    container = ProvidersContainer(settings=GenerationSettings())
    first = container.registry()
    container.clear()
    assert container.registry() is not first


def test_create_helper_uses_given_container():
    container = ProvidersContainer(settings=GenerationSettings())
    adapter = create("anthropic", api_key="k", container=container)
    assert adapter.name == "anthropic"
