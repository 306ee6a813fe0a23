"""Auxiliary logging helpers (formatter, context, masking) used by base.logging."""

from .json_formatter import JsonFormatter, ISO
from .logging_context import LogContext
from .masking import mask_headers, mask_secret

__all__ = ["JsonFormatter", "ISO", "LogContext", "mask_headers", "mask_secret"]
