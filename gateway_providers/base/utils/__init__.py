"""Shared helpers: function-call grammar and schema reduction."""

from .function_calls import (
    FunctionCallResult,
    clean_response,
    clean_response_calls,
    extract_function_call_results,
    extract_function_calls,
    format_function_call,
    parse_function_call,
    render_function_calls,
)
from .schema import clean_schema_for_openai

__all__ = [
    "FunctionCallResult",
    "clean_response",
    "clean_response_calls",
    "extract_function_call_results",
    "extract_function_calls",
    "format_function_call",
    "parse_function_call",
    "render_function_calls",
    "clean_schema_for_openai",
]
