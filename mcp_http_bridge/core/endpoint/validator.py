# mcp_http_bridge/core/endpoint/validator.py
"""
Endpoint validation for the remote JSON-RPC server.

Checks, in order:
1) the text parses as a URL
2) scheme allowlist (http/https only)
3) a non-empty host
4) a numeric port, when one is given

Suspicious but usable endpoints (plain HTTP to a non-loopback host, URLs
carrying user-info) produce warnings rather than errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Union
from urllib.parse import urlsplit

import httpx


ALLOWED_SCHEMES: FrozenSet[str] = frozenset({"http", "https"})

LOOPBACK_HOSTS: FrozenSet[str] = frozenset({"localhost", "127.0.0.1", "::1", "[::1]"})

DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443}


@dataclass(frozen=True)
class EndpointValidation:
    valid: bool
    url: Optional[httpx.URL] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def is_loopback_host(hostname: str) -> bool:
    return hostname.lower() in LOOPBACK_HOSTS


def _as_url(url: Union[httpx.URL, str]) -> httpx.URL:
    return url if isinstance(url, httpx.URL) else httpx.URL(url)


def validate_endpoint(endpoint: str) -> EndpointValidation:
    """
    Validate the endpoint string the bridge will POST to.

    Returns:
        EndpointValidation with the parsed ``httpx.URL`` and warnings, or an error
    """
    warnings: List[str] = []

    if not isinstance(endpoint, str) or not endpoint:
        return EndpointValidation(valid=False, error="URL must be a non-empty string")

    trimmed = endpoint.strip()
    if trimmed != endpoint:
        warnings.append("URL contained leading/trailing whitespace")
    if not trimmed:
        return EndpointValidation(valid=False, error="URL must be a non-empty string")

    try:
        parts = urlsplit(trimmed)
    except ValueError as e:
        return EndpointValidation(valid=False, error=f"Invalid URL format: {e}")

    if not parts.scheme:
        return EndpointValidation(
            valid=False,
            error=f'Invalid URL format: missing scheme in "{trimmed}" (expected http:// or https://)',
        )

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return EndpointValidation(
            valid=False,
            error=f'Invalid scheme "{scheme}". Only http and https are supported.',
        )

    if not parts.hostname:
        return EndpointValidation(valid=False, error="URL must have a hostname")

    try:
        parts.port
    except ValueError as e:
        return EndpointValidation(valid=False, error=f"Invalid port: {e}")

    try:
        url = httpx.URL(trimmed)
    except httpx.InvalidURL as e:
        return EndpointValidation(valid=False, error=f"Invalid URL format: {e}")

    if not url.host:
        return EndpointValidation(valid=False, error="URL must have a hostname")

    if scheme == "http" and not is_loopback_host(url.host):
        warnings.append(
            f'Using insecure HTTP for non-localhost URL "{url.host}". Consider using HTTPS for security.'
        )

    if parts.username or parts.password:
        warnings.append(
            "URL contains credentials. These may be logged. Consider using headers for authentication."
        )

    return EndpointValidation(valid=True, url=url, warnings=warnings)


def is_secure(url: Union[httpx.URL, str]) -> bool:
    return _as_url(url).scheme.lower() == "https"


def get_origin(url: Union[httpx.URL, str]) -> str:
    """scheme://host[:port], with default ports omitted and user-info dropped."""
    parsed = _as_url(url)
    host = parsed.host
    if ":" in host:
        host = f"[{host}]"
    origin = f"{parsed.scheme}://{host}"
    port = parsed.port
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        origin += f":{port}"
    return origin


def display_endpoint(url: Union[httpx.URL, str]) -> str:
    """The endpoint as it may appear in logs: origin plus path, no credentials."""
    parsed = _as_url(url)
    return get_origin(parsed) + parsed.raw_path.decode("ascii", errors="replace")


def normalize_endpoint(url: Union[httpx.URL, str]) -> str:
    """
    Canonical string form for comparison and deduplication.

    Lowercases scheme and host and drops the scheme's default port; path,
    query and fragment are preserved.
    """
    parsed = _as_url(url)
    if parsed.port is not None and parsed.port == DEFAULT_PORTS.get(parsed.scheme):
        parsed = parsed.copy_with(port=None)
    return str(parsed)


__all__ = [
    "ALLOWED_SCHEMES",
    "LOOPBACK_HOSTS",
    "EndpointValidation",
    "is_loopback_host",
    "validate_endpoint",
    "is_secure",
    "get_origin",
    "display_endpoint",
    "normalize_endpoint",
]
