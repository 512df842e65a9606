# mcp_http_bridge/core/errors/exceptions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class BridgeError(Exception):
    """
    Base exception for bridge construction and programming errors.

    Per-message protocol failures never raise; they are returned as
    JSON-RPC error envelopes. This type covers everything that happens
    before a session exists or when the API is misused.
    """
    message: str
    code: str = "BRIDGE_ERROR"
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class ConfigError(BridgeError):
    """Raised when a configuration cannot be built. Carries every error message."""
    code: str = "CONFIG_ERROR"
    errors: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        joined = "; ".join(self.errors)
        return f"[{self.code}] {self.message}: {joined}"


@dataclass
class SessionStateError(BridgeError):
    code: str = "SESSION_STATE"


__all__ = ["BridgeError", "ConfigError", "SessionStateError"]
