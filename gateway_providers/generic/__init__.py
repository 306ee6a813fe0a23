"""Configuration-driven adapter for OpenAI-shaped and Anthropic-shaped vendors."""

from .anthropic_shape import AnthropicShape
from .client import GenericProvider, generic_constructor
from .openai_shape import OpenAIShape
from .shape_base import WireShape
from .standard_configs import standard_configs

__all__ = [
    "GenericProvider",
    "generic_constructor",
    "standard_configs",
    "WireShape",
    "OpenAIShape",
    "AnthropicShape",
]
