"""Canonical model parts package; prefer importing from ``base.models``."""

from .message import CanonicalMessage, Role
from .options import OptionBag
from .request import CanonicalRequest, RequestBuilder
from .response import Response
from .tool_spec import ToolSpec
from .usage import Usage

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
