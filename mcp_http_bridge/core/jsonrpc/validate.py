# mcp_http_bridge/core/jsonrpc/validate.py
"""
Inbound JSON-RPC 2.0 shape validation.

The bridge does not interpret methods; it only checks that what it is
about to forward is a legal request or batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


@dataclass(frozen=True)
class BatchItemIssue:
    index: int
    request_id: Any
    error: str


@dataclass(frozen=True)
class BatchValidation:
    """
    Batch validation result.

    ``valid`` is False only when the batch itself is unusable (empty).
    Invalid elements are listed in ``issues`` but do not reject the batch.
    """
    valid: bool
    error: Optional[str] = None
    issues: List[BatchItemIssue] = field(default_factory=list)


def is_number(value: Any) -> bool:
    # bool is a subclass of int but is not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_id(value: Any) -> bool:
    return value is None or isinstance(value, str) or is_number(value)


def is_batch_request(message: Any) -> bool:
    return isinstance(message, list)


def is_notification(message: Any) -> bool:
    """A request object without an ``id`` member expects no reply."""
    return isinstance(message, dict) and "id" not in message


def is_all_notifications(message: Any) -> bool:
    if is_batch_request(message):
        return bool(message) and all(is_notification(item) for item in message)
    return is_notification(message)


def request_id_of(message: Any) -> Any:
    """The id to address an error to, or None when unknown or unusable."""
    if isinstance(message, dict):
        candidate = message.get("id")
        if is_valid_id(candidate):
            return candidate
    return None


def validate_request(obj: Any) -> ValidationResult:
    if not isinstance(obj, dict):
        return ValidationResult.fail("Request must be an object")

    if obj.get("jsonrpc") != "2.0":
        return ValidationResult.fail('Invalid or missing jsonrpc version (must be "2.0")')

    if not isinstance(obj.get("method"), str):
        return ValidationResult.fail("Invalid or missing method (must be a string)")

    if "params" in obj and not isinstance(obj["params"], (dict, list)):
        return ValidationResult.fail("params must be an object or array if present")

    if "id" in obj and not is_valid_id(obj["id"]):
        return ValidationResult.fail("id must be a string, number, or null")

    return ValidationResult.ok()


def validate_batch(batch: Any) -> BatchValidation:
    if not isinstance(batch, list):
        return BatchValidation(valid=False, error="Batch must be an array")
    if not batch:
        return BatchValidation(valid=False, error="Empty batch")

    issues: List[BatchItemIssue] = []
    for index, item in enumerate(batch):
        result = validate_request(item)
        if not result.valid:
            issues.append(BatchItemIssue(index=index, request_id=request_id_of(item), error=result.error or ""))
    return BatchValidation(valid=True, issues=issues)


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
