# mcp_http_bridge/core/headers/__init__.py
from .parser import (
    ParsedHeader,
    HeaderParseResult,
    HeaderIssue,
    HeadersParseResult,
    expand_env_vars,
    has_env_reference,
    is_valid_header_name,
    is_valid_header_value,
    parse_header,
    parse_headers,
)
from .masking import MASK, SENSITIVE_HEADERS, is_sensitive_header, mask_sensitive_value, mask_headers

__all__ = [
    "ParsedHeader",
    "HeaderParseResult",
    "HeaderIssue",
    "HeadersParseResult",
    "expand_env_vars",
    "has_env_reference",
    "is_valid_header_name",
    "is_valid_header_value",
    "parse_header",
    "parse_headers",
    "MASK",
    "SENSITIVE_HEADERS",
    "is_sensitive_header",
    "mask_sensitive_value",
    "mask_headers",
]
