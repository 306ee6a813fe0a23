"""Configuration merge order, env helpers and generation settings."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from gateway_providers.base.dto.provider_config import WireFormat
from gateway_providers.config import (
    CONFIG_FILE_ENV,
    get_model,
    get_provider_config,
    load_generation_settings,
    load_provider_configs,
    reset_config_cache,
)
from gateway_providers.config.env import (
    ENV_ALIASES,
    ENV_MAP,
    env_prefix,
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_aws_credentials,
    resolve_aws_region,
    resolve_provider_key,
)


def test_env_map_contains_expected_keys():
    for p in ["openai", "anthropic", "azure-openai", "groq", "deepseek", "mistral", "openrouter"]:
        assert p in ENV_MAP


def test_env_names_and_aliases():
    assert get_env_var_name("openai") == "OPENAI_API_KEY"
    assert list(get_env_var_candidates("anthropic")) == ["ANTHROPIC_API_KEY", "CLAUDE_API_KEY"]
    assert ENV_ALIASES["azure-openai"][0] == "AZURE_OPENAI_API_KEY"
    assert env_prefix("azure-openai") == "AZURE_OPENAI"


def test_is_placeholder_heuristics():
    assert is_placeholder("placeholder-value")
    assert is_placeholder("ChangeMe123")
    assert is_placeholder("example-key")
    assert is_placeholder("test_token")
    assert not is_placeholder("real-value")
    assert not is_placeholder(None)


def test_resolve_provider_key_skips_placeholders(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "changeme")
    monkeypatch.setenv("CLAUDE_API_KEY", "sk-ant-real")
    assert resolve_provider_key("anthropic") == ("sk-ant-real", "CLAUDE_API_KEY")
    assert resolve_provider_key("unknown") == (None, None)


def test_aws_region_precedence(monkeypatch):
    assert resolve_aws_region() == "us-east-1"
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    assert resolve_aws_region() == "eu-west-1"
    monkeypatch.setenv("AWS_REGION", "us-west-2")
    assert resolve_aws_region() == "us-west-2"


def test_aws_credentials_repr_hides_secret(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIAEXAMPLE123")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "supersecretvalue")
    creds = resolve_aws_credentials()
    assert creds.complete
    assert "supersecretvalue" not in repr(creds)


def test_defaults_only():
    cfg = get_provider_config("openai")
    assert cfg["model"] == "gpt-4o-mini"
    assert cfg["endpoint"].startswith("https://")
    assert "api_key" not in cfg


def test_merge_order_file_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"openai": {"model": "from-file", "endpoint": "https://file.invalid"}}))
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert get_provider_config("openai")["model"] == "from-file"

    monkeypatch.setenv("OPENAI_MODEL", "from-env")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    cfg = get_provider_config("openai")
    assert (cfg["model"], cfg["endpoint"], cfg["api_key"]) == ("from-env", "https://file.invalid", "sk-live")

    cfg = get_provider_config("openai", {"model": "explicit", "endpoint": None})
    assert cfg["model"] == "explicit"
    assert cfg["endpoint"] == "https://file.invalid"
    assert get_model("OpenAI") == "from-env"


def test_yaml_file_and_provider_list(tmp_path, monkeypatch):
    path = tmp_path / "providers.yaml"
    path.write_text(
        "bedrock:\n"
        "  region: eu-central-1\n"
        "providers:\n"
        "  - name: together\n"
        "    wire_format: OpenAI\n"
        "    endpoint: https://api.together.xyz/v1/chat/completions\n"
        "    supports_streaming: true\n"
        "  - name: proxy-claude\n"
        "    wire_format: claude\n"
    )
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert get_provider_config("bedrock")["region"] == "eu-central-1"
    configs = load_provider_configs()
    assert [c.name for c in configs] == ["together", "proxy-claude"]
    assert configs[0].wire_format is WireFormat.OPENAI and configs[0].supports_streaming
    assert configs[1].wire_format is WireFormat.ANTHROPIC


def test_region_env_beats_file(tmp_path, monkeypatch):
    path = tmp_path / "providers.yaml"
    path.write_text("bedrock:\n  region: eu-central-1\n")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    monkeypatch.setenv("AWS_REGION", "us-west-2")
    assert get_provider_config("bedrock")["region"] == "us-west-2"


def test_file_is_cached_until_reset(tmp_path, monkeypatch):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"groq": {"model": "one"}}))
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert get_model("groq") == "one"
    path.write_text(json.dumps({"groq": {"model": "two"}}))
    assert get_model("groq") == "one"
    reset_config_cache()
    assert get_model("groq") == "two"


def test_missing_file_is_ignored(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.yaml"))
    assert load_provider_configs() == []


def test_invalid_provider_entry(tmp_path, monkeypatch):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"providers": [{"name": "x", "wire_format": "soap"}]}))
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ValidationError):
        load_provider_configs()


def test_generation_settings_from_env(monkeypatch):
    monkeypatch.setenv("LLM_TEMPERATURE", "0.25")
    monkeypatch.setenv("LLM_MAX_TOKENS", "800")
    monkeypatch.setenv("LLM_SEED", "42")
    settings = load_generation_settings(top_p=0.5)
    assert (settings.temperature, settings.max_tokens, settings.top_p, settings.seed) == (0.25, 800, 0.5, 42)


def test_generation_settings_defaults_and_validation(monkeypatch):
    settings = load_generation_settings()
    assert (settings.temperature, settings.max_tokens, settings.top_p, settings.seed) == (0.7, 300, None, None)
    monkeypatch.setenv("LLM_TEMPERATURE", "5")
    with pytest.raises(ValidationError):
        load_generation_settings()
