# mcp_http_bridge/infra/transport/stdio.py
"""
Stdio adapters for the session loop.

Reading happens on a daemon thread so a blocked ``readline`` never keeps
the process alive after shutdown; lines are handed to the event loop
through a small bounded queue.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import AsyncIterator, BinaryIO, Optional, TextIO

logger = logging.getLogger(__name__)

_EOF = None


def _pump(stream: BinaryIO, loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[Optional[str]]") -> None:
    try:
        while True:
            raw = stream.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace")
            asyncio.run_coroutine_threadsafe(queue.put(line), loop).result()
    except Exception as e:  # loop closed or stream broken: stop reading
        logger.debug("stdin reader stopped: %s", e)
    finally:
        try:
            asyncio.run_coroutine_threadsafe(queue.put(_EOF), loop)
        except RuntimeError:
            pass


async def stdin_lines(stream: Optional[BinaryIO] = None, max_buffered: int = 16) -> AsyncIterator[str]:
    """
    Yield decoded lines from ``stream`` (default: the process stdin).

    Lines keep their terminator; callers strip. Undecodable bytes are
    replaced rather than treated as fatal.
    """
    source = stream if stream is not None else sys.stdin.buffer
    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=max_buffered)

    reader = threading.Thread(
        target=_pump,
        args=(source, loop, queue),
        name="mcp-http-bridge-stdin",
        daemon=True,
    )
    reader.start()

    while True:
        line = await queue.get()
        if line is _EOF:
            return
        yield line


def write_line(output: TextIO, line: str) -> None:
    output.write(line + "\n")
    output.flush()


__all__ = ["stdin_lines", "write_line"]
