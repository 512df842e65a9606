# mcp_http_bridge/config/__init__.py
"""
Bridge configuration: the immutable ProxyConfig, structured issues, and the
optional YAML file loader.
"""

from .validator import ConfigIssue
from .proxy import DEFAULT_TIMEOUT_MS, ProxyConfig, ConfigBuildResult, resolve_timeout
from .loader import RawInputs, LoadResult, load_config_file

__all__ = [
    "ConfigIssue",
    "DEFAULT_TIMEOUT_MS",
    "ProxyConfig",
    "ConfigBuildResult",
    "resolve_timeout",
    "RawInputs",
    "LoadResult",
    "load_config_file",
]
