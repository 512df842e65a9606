# mcp_http_bridge/core/jsonrpc/__init__.py
from .validate import (
    ValidationResult,
    BatchItemIssue,
    BatchValidation,
    is_valid_id,
    is_batch_request,
    is_notification,
    is_all_notifications,
    request_id_of,
    validate_request,
    validate_batch,
)

__all__ = [
    "ValidationResult",
    "BatchItemIssue",
    "BatchValidation",
    "is_valid_id",
    "is_batch_request",
    "is_notification",
    "is_all_notifications",
    "request_id_of",
    "validate_request",
    "validate_batch",
]
