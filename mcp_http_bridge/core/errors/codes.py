# mcp_http_bridge/core/errors/codes.py
from __future__ import annotations

from typing import Dict, Final


# ---- JSON-RPC 2.0 standard codes (stable public contract) ----
PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603

# ---- implementation-defined server errors (-32000 .. -32099) ----
TRANSPORT_ERROR: Final[int] = -32000
HTTP_ERROR: Final[int] = -32001
CONFIG_ERROR: Final[int] = -32002
SESSION_ERROR: Final[int] = -32003


DEFAULT_MESSAGES: Final[Dict[int, str]] = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    TRANSPORT_ERROR: "Transport error",
    HTTP_ERROR: "HTTP error",
    CONFIG_ERROR: "Configuration error",
    SESSION_ERROR: "Session error",
}


# ---- transport sub-causes (error.data.errorCode) ----
ENOTFOUND: Final[str] = "ENOTFOUND"
ECONNREFUSED: Final[str] = "ECONNREFUSED"
ETIMEDOUT: Final[str] = "ETIMEDOUT"
ECONNRESET: Final[str] = "ECONNRESET"
CERT_ERROR: Final[str] = "CERT_ERROR"
ECANCELED: Final[str] = "ECANCELED"

NETWORK_MESSAGES: Final[Dict[str, str]] = {
    ENOTFOUND: "DNS resolution failed",
    ECONNREFUSED: "Connection refused",
    ETIMEDOUT: "Request timeout",
    ECONNRESET: "Connection reset",
    CERT_ERROR: "SSL/TLS certificate error",
    ECANCELED: "Request cancelled",
}

GENERIC_NETWORK_MESSAGE: Final[str] = "Network error"


def default_message(code: int) -> str:
    return DEFAULT_MESSAGES.get(code, "Unknown error")
