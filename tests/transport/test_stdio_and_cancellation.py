"""Stdio adapters and the per-request cancellation handle."""

import asyncio
import io

import pytest

from mcp_http_bridge.infra.transport import CancelReason, CancellationHandle, stdin_lines, write_line

pytestmark = pytest.mark.anyio


class TestStdinLines:
    async def test_yields_lines_until_eof(self):
        stream = io.BytesIO(b'{"a":1}\n\n{"b":2}')

        lines = [line async for line in stdin_lines(stream)]

        assert lines == ['{"a":1}\n', "\n", '{"b":2}']

    async def test_invalid_utf8_is_replaced(self):
        lines = [line async for line in stdin_lines(io.BytesIO(b"caf\xe9\n"))]
        assert lines == ["caf\ufffd\n"]

    async def test_empty_stream(self):
        assert [line async for line in stdin_lines(io.BytesIO(b""))] == []


def test_write_line_appends_newline_and_flushes():
    out = io.StringIO()
    write_line(out, '{"ok":true}')
    assert out.getvalue() == '{"ok":true}\n'


class TestCancellationHandle:
    async def test_timer_cancels_with_timeout_reason(self):
        task = asyncio.ensure_future(asyncio.sleep(30))
        handle = CancellationHandle(task, 0.05)

        with pytest.raises(asyncio.CancelledError):
            await task

        assert handle.reason is CancelReason.TIMEOUT
        assert handle.timed_out

    async def test_shutdown_wins_and_disarms_timer(self):
        task = asyncio.ensure_future(asyncio.sleep(30))
        handle = CancellationHandle(task, 0.05)

        assert handle.cancel(CancelReason.SHUTDOWN)
        assert not handle.cancel(CancelReason.TIMEOUT)

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0.1)

        assert handle.reason is CancelReason.SHUTDOWN
        assert not handle.timed_out

    async def test_disarm_after_completion(self):
        task = asyncio.ensure_future(asyncio.sleep(0))
        handle = CancellationHandle(task, 0.05)

        await task
        handle.disarm()
        await asyncio.sleep(0.1)

        assert handle.reason is None
        assert not handle.cancel(CancelReason.SHUTDOWN)
