# mcp_http_bridge/infra/transport/session.py
"""
Proxy session: relays newline-delimited JSON-RPC from stdio to an HTTP
endpoint and writes each response back in the same framing.

Lifecycle: CREATED -> ACTIVE -> STOPPED (terminal). Input processed after
STOPPED is ignored.

Concurrency note:
  - One session per process, one sequential control flow.
  - At most one outbound request is in flight: run() awaits each dispatch
    to completion before reading the next line, so responses come out in
    input order and no locking is needed.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from enum import Enum
from typing import Any, AsyncIterable, Optional, TextIO, Tuple

import httpx

from mcp_http_bridge.config.proxy import ProxyConfig
from mcp_http_bridge.core.endpoint import display_endpoint
from mcp_http_bridge.core.errors import (
    SessionStateError,
    cancelled_error,
    format_as_json,
    from_http_error,
    from_network_error,
    internal_error,
    invalid_request,
    parse_error,
    timeout_error,
)
from mcp_http_bridge.core.headers import mask_headers
from mcp_http_bridge.core.jsonrpc import (
    is_all_notifications,
    is_batch_request,
    is_notification,
    request_id_of,
    validate_batch,
    validate_request,
)
from .cancellation import CancelReason, CancellationHandle
from .outcome import DispatchOutcome, OutcomeKind
from .stdio import stdin_lines, write_line

logger = logging.getLogger(__name__)

SESSION_ID_HEADER = "Mcp-Session-Id"
EVENT_STREAM = "text/event-stream"
CLEANUP_TIMEOUT_S = 5.0


class SessionState(str, Enum):
    CREATED = "created"
    ACTIVE = "active"
    STOPPED = "stopped"


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def _serialize(message: Any) -> bytes:
    return json.dumps(message, separators=(",", ":")).encode("utf-8")


class ProxySession:
    """
    Stateful stdio <-> HTTP relay.

    Owns the configuration, the negotiated ``Mcp-Session-Id``, the request
    counter and the cancellation handle of the single in-flight request.

    An ``httpx.AsyncClient`` may be injected (tests use MockTransport or
    ASGITransport); otherwise the session creates one and closes it on stop().
    """

    def __init__(
        self,
        config: ProxyConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        output: Optional[TextIO] = None,
        cleanup_timeout_s: float = CLEANUP_TIMEOUT_S,
    ) -> None:
        if not isinstance(config, ProxyConfig):
            raise SessionStateError("ProxySession requires a ProxyConfig instance")

        self.config = config
        self.session_id: Optional[str] = None
        self.request_count: int = 0

        self._state = SessionState.CREATED
        self._pending: Optional[CancellationHandle] = None

        self._client = client
        self._owns_client = client is None
        self._output = output
        self._cleanup_timeout_s = cleanup_timeout_s

    # =========================================================
    # State
    # =========================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is not SessionState.STOPPED

    def _activate(self) -> None:
        if self._state is SessionState.CREATED:
            self._state = SessionState.ACTIVE

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # No library timeout: the cancellation handle is the only bound
            self._client = httpx.AsyncClient(timeout=None)
        return self._client

    # =========================================================
    # Outbound headers
    # =========================================================

    def build_request_headers(self) -> httpx.Headers:
        """
        Fixed JSON content negotiation, then configured headers, then the
        negotiated session id. Later entries replace earlier ones
        case-insensitively.
        """
        headers = httpx.Headers({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        for name, value in self.config.headers.items():
            headers[name] = value
        if self.session_id:
            headers[SESSION_ID_HEADER] = self.session_id
        return headers

    def _capture_session_id(self, response: httpx.Response) -> None:
        new_id = response.headers.get(SESSION_ID_HEADER)
        if new_id and new_id != self.session_id:
            logger.debug("Session ID: %s", new_id)
            self.session_id = new_id

    # =========================================================
    # Line processing
    # =========================================================

    async def process_line(self, line: str) -> Optional[str]:
        """
        Handle one input line.

        Returns:
            The output line (without newline), or None when nothing is to be
            written: blank input, notifications, or a stopped session.
        """
        if self._state is SessionState.STOPPED:
            return None
        self._activate()

        trimmed = line.strip()
        if not trimmed:
            return None

        try:
            message = json.loads(trimmed, parse_constant=_reject_constant)
        except ValueError as e:
            logger.debug("Parse error: %s", e)
            return format_as_json(parse_error(str(e)))

        if is_batch_request(message):
            batch = validate_batch(message)
            if not batch.valid:
                return format_as_json(invalid_request(None, batch.error))
            # Forwarded anyway: the server answers each element itself
            for issue in batch.issues:
                logger.debug("Batch item %d invalid: %s", issue.index, issue.error)
        else:
            validation = validate_request(message)
            if not validation.valid:
                return format_as_json(invalid_request(request_id_of(message), validation.error))

        outcome = await self.dispatch(message)

        if not is_batch_request(message) and is_notification(message):
            if not outcome.ok:
                logger.debug("Notification %s failed: %s", message.get("method"), outcome.kind.value)
            return None

        if outcome.response is None:
            return None
        return format_as_json(outcome.response)

    # =========================================================
    # Dispatch
    # =========================================================

    async def dispatch(self, message: Any) -> DispatchOutcome:
        """
        POST one JSON-RPC message (object or batch) and classify the result.

        Never raises for protocol, HTTP or transport failures; those come back
        as error envelopes inside the outcome. Only cancellation of the caller
        itself propagates.
        """
        is_batch = is_batch_request(message)
        request_id = None if is_batch else request_id_of(message)

        if self._state is SessionState.STOPPED:
            return DispatchOutcome.failure(OutcomeKind.CANCELLED, cancelled_error(request_id))
        self._activate()

        if is_batch:
            logger.debug("Sending request: batch of %d", len(message))
        else:
            logger.debug("Sending request: %s", message.get("method"))

        self.request_count += 1
        task = asyncio.ensure_future(self._send(message, request_id))
        handle = CancellationHandle(task, self.config.timeout_s)
        self._pending = handle

        try:
            return await task
        except asyncio.CancelledError:
            if handle.reason is CancelReason.TIMEOUT:
                logger.debug("Request timeout after %dms", self.config.request_timeout_ms)
                return DispatchOutcome.failure(
                    OutcomeKind.TIMEOUT,
                    timeout_error(self.config.request_timeout_ms, request_id),
                )
            if handle.reason is CancelReason.SHUTDOWN:
                logger.debug("Request cancelled by shutdown")
                return DispatchOutcome.failure(OutcomeKind.CANCELLED, cancelled_error(request_id))
            raise
        finally:
            handle.disarm()
            if self._pending is handle:
                self._pending = None

    async def _send(self, message: Any, request_id: Any) -> DispatchOutcome:
        headers = self.build_request_headers()
        if self.config.debug:
            logger.debug("Headers: %s", mask_headers(headers))

        client = self._get_client()
        try:
            async with client.stream(
                "POST",
                self.config.endpoint,
                headers=headers,
                content=_serialize(message),
                timeout=None,
            ) as response:
                self._capture_session_id(response)
                return await self._classify(response, message, request_id)
        except httpx.TimeoutException as e:
            logger.debug("Request timeout: %s", e)
            return DispatchOutcome.failure(OutcomeKind.TIMEOUT, from_network_error(e, request_id))
        except (httpx.HTTPError, OSError) as e:
            logger.debug("Network error: %s", e)
            return DispatchOutcome.failure(OutcomeKind.NETWORK_ERROR, from_network_error(e, request_id))
        except Exception as e:
            logger.debug("Unexpected dispatch failure", exc_info=True)
            return DispatchOutcome.failure(
                OutcomeKind.INTERNAL,
                internal_error(request_id, "Internal error", {"type": e.__class__.__name__, "message": str(e)}),
            )

    async def _classify(self, response: httpx.Response, message: Any, request_id: Any) -> DispatchOutcome:
        status = response.status_code
        content_type = response.headers.get("content-type", "")
        streaming = EVENT_STREAM in content_type.lower()

        if not response.is_success:
            status_text = response.reason_phrase or "Unknown Error"
            logger.debug("HTTP error: %s %s", status, status_text)
            has_body, body = (False, None) if streaming else await self._read_error_body(response)
            if has_body:
                envelope = from_http_error(status, status_text, request_id, body)
            else:
                envelope = from_http_error(status, status_text, request_id)
            return DispatchOutcome.failure(OutcomeKind.HTTP_ERROR, envelope, status)

        if streaming:
            # The body is never read: an event stream may not end
            logger.debug("SSE response not supported")
            return DispatchOutcome.failure(
                OutcomeKind.UNSUPPORTED,
                internal_error(
                    request_id,
                    "SSE responses are not supported. Please use a server that returns JSON.",
                    {"contentType": content_type},
                ),
                status,
            )

        raw = await response.aread()
        if not raw.strip():
            if is_all_notifications(message):
                return DispatchOutcome.empty(status)
            return DispatchOutcome.failure(
                OutcomeKind.INTERNAL,
                internal_error(request_id, "Empty response from server", {"statusCode": status}),
                status,
            )

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug("Invalid JSON in response: %s", e)
            return DispatchOutcome.failure(
                OutcomeKind.INTERNAL,
                internal_error(
                    request_id,
                    "Invalid JSON in response from server",
                    {"details": str(e), "contentType": content_type},
                ),
                status,
            )

        logger.debug("Response received")
        return DispatchOutcome.success(data, status)

    @staticmethod
    async def _read_error_body(response: httpx.Response) -> Tuple[bool, Any]:
        """Decoded JSON if possible, raw text otherwise; (False, None) if unreadable."""
        try:
            await response.aread()
            text = response.text
        except (httpx.HTTPError, UnicodeDecodeError):
            return False, None
        if not text:
            return False, None
        try:
            return True, json.loads(text)
        except ValueError:
            return True, text

    # =========================================================
    # Loop and shutdown
    # =========================================================

    async def run(self, lines: Optional[AsyncIterable[str]] = None, output: Optional[TextIO] = None) -> None:
        """
        Relay until the input closes or the session stops.

        Args:
            lines: Async iterable of input lines (default: process stdin)
            output: Text stream for responses (default: the session output or stdout)
        """
        if self._state is SessionState.STOPPED:
            return
        self._activate()

        out = output if output is not None else (self._output if self._output is not None else sys.stdout)
        source = lines if lines is not None else stdin_lines()

        logger.debug("Starting HTTP proxy")
        logger.debug("Target URL: %s", display_endpoint(self.config.endpoint))
        logger.debug("Timeout: %d ms", self.config.request_timeout_ms)

        try:
            async for line in source:
                if not self.active:
                    break
                result = await self.process_line(line)
                if result is not None:
                    write_line(out, result)
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

        logger.debug("Stdin closed, stopping proxy" if self.active else "Proxy loop finished after stop")

    async def stop(self) -> None:
        """
        Stop the session: cancel the in-flight request and, when a session id
        was negotiated, send a best-effort DELETE with its own short timeout.
        Never raises for cleanup failures.
        """
        if self._state is SessionState.STOPPED:
            return
        logger.debug("Stopping proxy session")
        self._state = SessionState.STOPPED

        pending = self._pending
        if pending is not None and pending.cancel(CancelReason.SHUTDOWN):
            await asyncio.wait({pending.task}, timeout=self._cleanup_timeout_s)

        try:
            if self.session_id:
                await self._cleanup_session(self.session_id)
        finally:
            if self._owns_client and self._client is not None:
                try:
                    await self._client.aclose()
                except Exception as e:
                    logger.debug("Closing HTTP client failed: %s", e)

        logger.debug("Session ended. Processed %d requests.", self.request_count)

    async def _cleanup_session(self, session_id: str) -> None:
        logger.debug("Sending session cleanup DELETE")
        try:
            await asyncio.wait_for(
                self._get_client().delete(
                    self.config.endpoint,
                    headers={SESSION_ID_HEADER: session_id},
                    timeout=self._cleanup_timeout_s,
                ),
                timeout=self._cleanup_timeout_s,
            )
        except Exception as e:
            logger.debug("Session cleanup failed: %s", e)


__all__ = ["SESSION_ID_HEADER", "SessionState", "ProxySession"]
