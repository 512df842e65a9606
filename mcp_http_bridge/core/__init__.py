# mcp_http_bridge/core/__init__.py
"""
Pure building blocks of the bridge: header parsing, endpoint validation,
JSON-RPC shape validation and the error taxonomy. No I/O.
"""
