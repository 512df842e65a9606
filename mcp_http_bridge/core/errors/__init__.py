# mcp_http_bridge/core/errors/__init__.py
"""
Error types for the bridge.

This package defines the components responsible for:
- The JSON-RPC code table
- Building JSON-RPC error envelopes
- Classifying transport failures
- Python exceptions for construction errors

No side effects on import.
"""

from . import codes
from .envelopes import (
    create_error,
    create_error_response,
    parse_error,
    invalid_request,
    internal_error,
    from_http_error,
    from_network_error,
    timeout_error,
    cancelled_error,
    format_as_json,
)
from .exceptions import BridgeError, ConfigError, SessionStateError
from .network import classify_network_error

__all__ = [
    "codes",
    "create_error",
    "create_error_response",
    "parse_error",
    "invalid_request",
    "internal_error",
    "from_http_error",
    "from_network_error",
    "timeout_error",
    "cancelled_error",
    "format_as_json",
    "classify_network_error",
    "BridgeError",
    "ConfigError",
    "SessionStateError",
]
