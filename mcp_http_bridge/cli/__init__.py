# mcp_http_bridge/cli/__init__.py
