"""gateway_providers.config.defaults
=================================

Small, stable default values used across the package. No I/O and no
imports from other gateway modules, so anything may import it.
"""

from __future__ import annotations

# ---- Endpoints ----
OPENAI_DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
GROQ_DEFAULT_ENDPOINT = "https://api.groq.com/openai/v1/chat/completions"
DEEPSEEK_DEFAULT_ENDPOINT = "https://api.deepseek.com/chat/completions"
MISTRAL_DEFAULT_ENDPOINT = "https://api.mistral.ai/v1/chat/completions"
OPENROUTER_DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
BEDROCK_ENDPOINT_TEMPLATE = "https://bedrock-runtime.{region}.amazonaws.com/model/{model}/invoke"
BEDROCK_STREAM_ENDPOINT_TEMPLATE = (
    "https://bedrock-runtime.{region}.amazonaws.com/model/{model}/invoke-with-response-stream"
)

# ---- Default models ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
GROQ_DEFAULT_MODEL = "llama-3.1-8b-instant"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
MISTRAL_DEFAULT_MODEL = "mistral-small-latest"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
BEDROCK_DEFAULT_MODEL = "anthropic.claude-3-haiku-20240307-v1:0"

# ---- Anthropic-shaped wire ----
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

# ---- Bedrock gateway ----
BEDROCK_DEFAULT_REGION = "us-east-1"
BEDROCK_SERVICE_NAME = "bedrock"
BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"
BEDROCK_DEFAULT_MAX_TOKENS = 4096
BEDROCK_META_DEFAULT_MAX_GEN_LEN = 2048

# ---- Generation defaults (global configuration) ----
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 300

__all__ = [
    "OPENAI_DEFAULT_ENDPOINT",
    "ANTHROPIC_DEFAULT_ENDPOINT",
    "GROQ_DEFAULT_ENDPOINT",
    "DEEPSEEK_DEFAULT_ENDPOINT",
    "MISTRAL_DEFAULT_ENDPOINT",
    "OPENROUTER_DEFAULT_ENDPOINT",
    "BEDROCK_ENDPOINT_TEMPLATE",
    "BEDROCK_STREAM_ENDPOINT_TEMPLATE",
    "OPENAI_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MODEL",
    "GROQ_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_MODEL",
    "MISTRAL_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_MODEL",
    "BEDROCK_DEFAULT_MODEL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "BEDROCK_DEFAULT_REGION",
    "BEDROCK_SERVICE_NAME",
    "BEDROCK_ANTHROPIC_VERSION",
    "BEDROCK_DEFAULT_MAX_TOKENS",
    "BEDROCK_META_DEFAULT_MAX_GEN_LEN",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
]
