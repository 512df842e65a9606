# mcp_http_bridge/core/headers/masking.py
"""
Masking of sensitive header values for diagnostic output.

Short secrets are replaced entirely; long ones keep a four character
prefix and suffix so an operator can tell two tokens apart without the
log ever containing the full value.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Mapping

MASK = "***"
FULL_MASK_MAX_LENGTH = 12
VISIBLE_CHARS = 4

SENSITIVE_HEADERS: FrozenSet[str] = frozenset({
    "authorization",
    "proxy-authorization",
    "x-api-key",
    "api-key",
    "apikey",
    "x-auth-token",
    "cookie",
    "set-cookie",
})

_API_KEY_SUFFIXES = ("api-key", "api_key", "apikey")


def is_sensitive_header(name: str) -> bool:
    lowered = name.lower()
    if lowered in SENSITIVE_HEADERS:
        return True
    return lowered.endswith(_API_KEY_SUFFIXES)


def mask_sensitive_value(name: str, value: str) -> str:
    if not is_sensitive_header(name):
        return value
    if len(value) <= FULL_MASK_MAX_LENGTH:
        return MASK
    return value[:VISIBLE_CHARS] + MASK + value[-VISIBLE_CHARS:]


def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {name: mask_sensitive_value(name, value) for name, value in headers.items()}


__all__ = [
    "MASK",
    "SENSITIVE_HEADERS",
    "is_sensitive_header",
    "mask_sensitive_value",
    "mask_headers",
]
