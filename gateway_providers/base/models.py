"""
Provider-agnostic canonical model public surface.

Re-exports the one-class-per-file implementations under
``gateway_providers.base.models_parts``.
"""

from .models_parts.message import CanonicalMessage, Role
from .models_parts.options import OptionBag
from .models_parts.request import CanonicalRequest, RequestBuilder
from .models_parts.response import Response
from .models_parts.tool_spec import ToolSpec
from .models_parts.usage import Usage

__all__ = [
    "CanonicalMessage",
    "Role",
    "OptionBag",
    "CanonicalRequest",
    "RequestBuilder",
    "Response",
    "ToolSpec",
    "Usage",
]
