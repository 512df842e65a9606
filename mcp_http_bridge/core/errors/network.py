# mcp_http_bridge/core/errors/network.py
"""
Network failure classification.

httpx wraps the socket-level failure (``httpx.ConnectError`` raised from an
``httpcore`` error raised from an ``OSError``), so the original cause is found
by walking ``__cause__`` / ``__context__``.
"""

from __future__ import annotations

import socket
import ssl
from typing import Iterator, Optional, Tuple

import httpx

from . import codes


# Resolver messages as they appear across platforms and libc variants
_DNS_MARKERS: Tuple[str, ...] = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "name resolution",
)


def _iter_chain(error: BaseException, max_depth: int = 16) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = error
    depth = 0
    while current is not None and id(current) not in seen and depth < max_depth:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__
        depth += 1


def _classify_one(exc: BaseException) -> Optional[str]:
    # Order matters: ssl.SSLError and socket.gaierror are both OSError
    if isinstance(exc, socket.gaierror):
        return codes.ENOTFOUND
    if isinstance(exc, ssl.SSLError):
        return codes.CERT_ERROR
    if isinstance(exc, ConnectionRefusedError):
        return codes.ECONNREFUSED
    if isinstance(exc, ConnectionResetError):
        return codes.ECONNRESET
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return codes.ETIMEDOUT
    if isinstance(exc, httpx.RemoteProtocolError):
        return codes.ECONNRESET

    text = str(exc).lower()
    if any(marker in text for marker in _DNS_MARKERS):
        return codes.ENOTFOUND
    if "connection refused" in text:
        return codes.ECONNREFUSED
    if "connection reset" in text:
        return codes.ECONNRESET
    if "certificate" in text:
        return codes.CERT_ERROR
    return None


def classify_network_error(error: BaseException) -> Tuple[str, Optional[str]]:
    """
    Classify a transport failure.

    Returns:
        (human readable message, errorCode) where errorCode is None for
        failures that match no known sub-cause.
    """
    for exc in _iter_chain(error):
        error_code = _classify_one(exc)
        if error_code is not None:
            return codes.NETWORK_MESSAGES[error_code], error_code
    return codes.GENERIC_NETWORK_MESSAGE, None


__all__ = ["classify_network_error"]
