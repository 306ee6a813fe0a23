"""Shared constants for provider adapters.

Central location for the reserved option keys, the function-call tags and
fixed defaults so adapters do not scatter magic strings.

Security
--------
Only generic sentinel strings and numeric defaults live here; there are no
credentials.
"""
from __future__ import annotations

# Option-bag keys carrying request parts rather than sampling options
KEY_SYSTEM_PROMPT = "system_prompt"
KEY_TOOLS = "tools"
KEY_TOOL_CHOICE = "tool_choice"
KEY_STRUCTURED_MESSAGES = "structured_messages"
KEY_STRUCTURED_RESPONSE_SCHEMA = "structured_response_schema"

# Well-known sampling keys
KEY_TEMPERATURE = "temperature"
KEY_MAX_TOKENS = "max_tokens"
KEY_SEED = "seed"
KEY_TOP_P = "top_p"
KEY_STREAM = "stream"

# Keys never copied verbatim from the option bag into a request body
RESERVED_OPTION_KEYS = frozenset(
    {
        KEY_SYSTEM_PROMPT,
        KEY_TOOLS,
        KEY_TOOL_CHOICE,
        KEY_STRUCTURED_MESSAGES,
        KEY_STRUCTURED_RESPONSE_SCHEMA,
        "model",
        "messages",
    }
)

FUNCTION_CALL_OPEN = "<function_call>"
FUNCTION_CALL_CLOSE = "</function_call>"

# Name of the synthetic function OpenAI-shaped schema requests declare
OUTPUT_FORMATTER_FUNCTION = "output_formatter"
OUTPUT_FORMATTER_DESCRIPTION = "Format the output according to the schema"

# Hint for an external caller's retry policy around parse-with-validation;
# nothing inside the package retries.
RESPONSE_PARSER_RETRY_ATTEMPTS = 5

SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"

__all__ = [
    "KEY_SYSTEM_PROMPT",
    "KEY_TOOLS",
    "KEY_TOOL_CHOICE",
    "KEY_STRUCTURED_MESSAGES",
    "KEY_STRUCTURED_RESPONSE_SCHEMA",
    "KEY_TEMPERATURE",
    "KEY_MAX_TOKENS",
    "KEY_SEED",
    "KEY_TOP_P",
    "KEY_STREAM",
    "RESERVED_OPTION_KEYS",
    "FUNCTION_CALL_OPEN",
    "FUNCTION_CALL_CLOSE",
    "OUTPUT_FORMATTER_FUNCTION",
    "OUTPUT_FORMATTER_DESCRIPTION",
    "RESPONSE_PARSER_RETRY_ATTEMPTS",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
]
