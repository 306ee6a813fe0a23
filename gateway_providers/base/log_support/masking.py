"""Helpers that keep credentials out of structured log payloads."""
from __future__ import annotations

from typing import Dict, Mapping

_SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "x-api-key",
        "api-key",
        "x-amz-security-token",
        "proxy-authorization",
    }
)


def mask_secret(value: str, visible: int = 4) -> str:
    """Return ``value`` with all but the last ``visible`` characters hidden."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy ``headers`` masking the values of credential-bearing entries."""
    return {
        name: (mask_secret(value) if name.lower() in _SENSITIVE_HEADERS else value)
        for name, value in headers.items()
    }


__all__ = ["mask_secret", "mask_headers"]
