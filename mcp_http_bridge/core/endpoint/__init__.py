# mcp_http_bridge/core/endpoint/__init__.py
from .validator import (
    EndpointValidation,
    is_loopback_host,
    validate_endpoint,
    is_secure,
    get_origin,
    display_endpoint,
    normalize_endpoint,
)

__all__ = [
    "EndpointValidation",
    "is_loopback_host",
    "validate_endpoint",
    "is_secure",
    "get_origin",
    "display_endpoint",
    "normalize_endpoint",
]
