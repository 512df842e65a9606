# mcp_http_bridge/infra/__init__.py
"""I/O side of the bridge: the HTTP relay session and stdio adapters."""
