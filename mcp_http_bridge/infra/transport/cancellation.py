# mcp_http_bridge/infra/transport/cancellation.py
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Optional


class CancelReason(str, Enum):
    TIMEOUT = "timeout"    # the handle's own timer fired
    SHUTDOWN = "shutdown"  # the session is stopping


class CancellationHandle:
    """
    Owns the single in-flight outbound request of a session.

    The handle arms a timer when created. Whoever cancels the task records
    why, so the awaiting code can tell the proxy's own timeout apart from a
    shutdown, and both apart from a cancellation of the awaiting coroutine
    itself (reason stays None).
    """

    def __init__(self, task: "asyncio.Future[Any]", timeout_s: float) -> None:
        self.task = task
        self.reason: Optional[CancelReason] = None
        loop = asyncio.get_running_loop()
        self._timer: Optional[asyncio.TimerHandle] = loop.call_later(timeout_s, self.cancel, CancelReason.TIMEOUT)

    @property
    def timed_out(self) -> bool:
        return self.reason is CancelReason.TIMEOUT

    def cancel(self, reason: CancelReason) -> bool:
        """Cancel the in-flight task once; later calls are no-ops."""
        if self.reason is not None or self.task.done():
            return False
        self.reason = reason
        self.disarm()
        self.task.cancel()
        return True

    def disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["CancelReason", "CancellationHandle"]
