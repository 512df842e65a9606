# mcp_http_bridge/infra/transport/__init__.py
from .cancellation import CancelReason, CancellationHandle
from .outcome import DispatchOutcome, OutcomeKind
from .session import SESSION_ID_HEADER, ProxySession, SessionState
from .stdio import stdin_lines, write_line

__all__ = [
    "CancelReason",
    "CancellationHandle",
    "DispatchOutcome",
    "OutcomeKind",
    "SESSION_ID_HEADER",
    "ProxySession",
    "SessionState",
    "stdin_lines",
    "write_line",
]
