# mcp_http_bridge/__init__.py
"""
mcp-http-bridge - stdio to HTTP JSON-RPC bridge

Lets a client that can only launch a local stdio server talk to a remote
server that only speaks JSON-RPC over HTTP. Each line read from stdin is
POSTed to the endpoint; each response is written back as one line.

Basic usage:

    >>> import asyncio
    >>> from mcp_http_bridge import ProxyConfig, ProxySession
    >>> result = ProxyConfig.from_inputs(
    ...     "https://mcp.example.com/mcp",
    ...     ["Authorization: Bearer $MCP_TOKEN"],
    ... )
    >>> session = ProxySession(result.unwrap())
    >>> asyncio.run(session.run())

Command line:

    mcp-http-bridge --url https://mcp.example.com/mcp -H "Authorization: Bearer $MCP_TOKEN"
"""

__version__ = "0.1.0"

from .config import ConfigIssue, ProxyConfig, ConfigBuildResult, load_config_file
from .core.errors import BridgeError, ConfigError, SessionStateError
from .infra.transport import DispatchOutcome, OutcomeKind, ProxySession, SessionState

__all__ = [
    "__version__",
    "ConfigIssue",
    "ProxyConfig",
    "ConfigBuildResult",
    "load_config_file",
    "BridgeError",
    "ConfigError",
    "SessionStateError",
    "DispatchOutcome",
    "OutcomeKind",
    "ProxySession",
    "SessionState",
]
