# mcp_http_bridge/infra/transport/outcome.py
"""
Explicit dispatch result.

Every way a dispatch can end is one member of OutcomeKind, so callers can
handle the taxonomy exhaustively instead of catching arbitrary exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

JsonRpcResponse = Union[Dict[str, Any], List[Any]]


class OutcomeKind(str, Enum):
    SUCCESS = "success"              # remote JSON body, returned as-is
    EMPTY = "empty"                  # 2xx without a body (e.g. 202 for notifications)
    HTTP_ERROR = "http_error"        # non-2xx status -> -32001
    NETWORK_ERROR = "network_error"  # DNS/refused/reset/TLS -> -32000
    TIMEOUT = "timeout"              # request_timeout_ms elapsed -> -32000
    CANCELLED = "cancelled"          # session stopped mid-request -> -32000
    UNSUPPORTED = "unsupported"      # streaming response -> -32603
    INTERNAL = "internal"            # anything else -> -32603


@dataclass(frozen=True)
class DispatchOutcome:
    kind: OutcomeKind
    response: Optional[JsonRpcResponse] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind in (OutcomeKind.SUCCESS, OutcomeKind.EMPTY)

    @classmethod
    def success(cls, response: JsonRpcResponse, status_code: int) -> "DispatchOutcome":
        return cls(kind=OutcomeKind.SUCCESS, response=response, status_code=status_code)

    @classmethod
    def empty(cls, status_code: int) -> "DispatchOutcome":
        return cls(kind=OutcomeKind.EMPTY, response=None, status_code=status_code)

    @classmethod
    def failure(
        cls,
        kind: OutcomeKind,
        envelope: Dict[str, Any],
        status_code: Optional[int] = None,
    ) -> "DispatchOutcome":
        return cls(kind=kind, response=envelope, status_code=status_code)


__all__ = ["JsonRpcResponse", "OutcomeKind", "DispatchOutcome"]
