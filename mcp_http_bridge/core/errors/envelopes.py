# mcp_http_bridge/core/errors/envelopes.py
"""
JSON-RPC error envelopes

Pure builders for every failure class the bridge can report:

- parse errors (malformed JSON on the input stream)
- invalid requests (shape validation failures)
- internal errors (catch-all, unsupported responses)
- HTTP status errors from the remote endpoint
- network/transport errors, including timeouts

Nothing here performs I/O or logging.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from . import codes
from .network import classify_network_error

RequestId = Union[str, int, float, None]

_UNSET: Any = object()


def create_error(code: int, message: Optional[str] = None, data: Any = _UNSET) -> Dict[str, Any]:
    """Build the inner ``error`` member, omitting ``data`` when not given."""
    error: Dict[str, Any] = {
        "code": code,
        "message": message or codes.default_message(code),
    }
    if data is not _UNSET:
        error["data"] = data
    return error


def create_error_response(
    code: int,
    message: Optional[str] = None,
    request_id: RequestId = None,
    data: Any = _UNSET,
) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "error": create_error(code, message, data),
        "id": request_id,
    }


def parse_error(details: Optional[str] = None) -> Dict[str, Any]:
    """Malformed JSON. The id is always null: nothing could be read."""
    return create_error_response(
        codes.PARSE_ERROR,
        "Parse error: Invalid JSON",
        None,
        {"details": details} if details else _UNSET,
    )


def invalid_request(request_id: RequestId, details: Optional[str] = None) -> Dict[str, Any]:
    return create_error_response(
        codes.INVALID_REQUEST,
        "Invalid Request",
        request_id,
        {"details": details} if details else _UNSET,
    )


def internal_error(request_id: RequestId, message: Optional[str] = None, data: Any = _UNSET) -> Dict[str, Any]:
    return create_error_response(codes.INTERNAL_ERROR, message or "Internal error", request_id, data)


def from_http_error(
    status_code: int,
    status_text: str,
    request_id: RequestId,
    body: Any = _UNSET,
) -> Dict[str, Any]:
    """
    Translate a non-success HTTP status into a -32001 envelope.

    ``body`` is the decoded JSON body when the server sent JSON, otherwise
    the raw text. It is left out entirely when nothing could be read.
    """
    data: Dict[str, Any] = {"statusCode": status_code, "statusText": status_text}
    if body is not _UNSET:
        data["body"] = body
    return create_error_response(
        codes.HTTP_ERROR,
        f"HTTP {status_code}: {status_text}",
        request_id,
        data,
    )


def from_network_error(error: BaseException, request_id: RequestId) -> Dict[str, Any]:
    """Translate a transport failure into a -32000 envelope with a sub-cause."""
    message, error_code = classify_network_error(error)
    data: Dict[str, Any] = {"originalError": str(error) or error.__class__.__name__}
    if error_code is not None:
        data["errorCode"] = error_code
    return create_error_response(codes.TRANSPORT_ERROR, message, request_id, data)


def timeout_error(timeout_ms: int, request_id: RequestId) -> Dict[str, Any]:
    return create_error_response(
        codes.TRANSPORT_ERROR,
        codes.NETWORK_MESSAGES[codes.ETIMEDOUT],
        request_id,
        {
            "originalError": f"Request timeout after {timeout_ms}ms",
            "errorCode": codes.ETIMEDOUT,
        },
    )


def cancelled_error(request_id: RequestId) -> Dict[str, Any]:
    return create_error_response(
        codes.TRANSPORT_ERROR,
        codes.NETWORK_MESSAGES[codes.ECANCELED],
        request_id,
        {
            "originalError": "Request cancelled because the session is stopping",
            "errorCode": codes.ECANCELED,
        },
    )


def format_as_json(envelope: Any) -> str:
    """Serialize one output line. Compact ASCII, and never contains a newline."""
    return json.dumps(envelope, separators=(",", ":"))


__all__ = [
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
]
