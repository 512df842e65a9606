# mcp_http_bridge/config/proxy.py
"""
Proxy configuration

Immutable value built once at startup from raw external input (endpoint
string, header strings, timeout, debug flag, environment lookup).

Construction fails closed: a single invalid header or an invalid endpoint
means no configuration. Warnings are returned whether or not construction
succeeds so they can always be shown. No network I/O happens here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from mcp_http_bridge.core.endpoint import validate_endpoint, display_endpoint
from mcp_http_bridge.core.endpoint.validator import ALLOWED_SCHEMES
from mcp_http_bridge.core.errors import ConfigError
from mcp_http_bridge.core.headers import (
    parse_headers,
    is_valid_header_name,
    is_valid_header_value,
    mask_headers,
)
from .validator import ConfigIssue


DEFAULT_TIMEOUT_MS = 60000


def _freeze_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(headers))


def resolve_timeout(raw: Any) -> Tuple[int, Optional[str]]:
    """
    Resolve a raw timeout into milliseconds.

    Absent or non-positive values fall back to the default; values that are
    not numbers at all are reported as an error.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_TIMEOUT_MS, None
    if isinstance(raw, bool):
        return DEFAULT_TIMEOUT_MS, f"Invalid timeout: {raw!r} is not a number of milliseconds"
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_MS, f"Invalid timeout: {raw!r} is not a number of milliseconds"
    if math.isnan(value) or math.isinf(value):
        return DEFAULT_TIMEOUT_MS, f"Invalid timeout: {raw!r} is not a finite number"
    if value <= 0:
        return DEFAULT_TIMEOUT_MS, None
    return int(math.ceil(value)), None


@dataclass(frozen=True)
class ProxyConfig:
    """
    Validated bridge configuration.

    endpoint: Remote JSON-RPC endpoint (http/https, non-empty host)
    headers: Extra request headers, already expanded (read-only mapping)
    request_timeout_ms: Bound on every outbound request
    debug: Verbose diagnostics (header values are always masked)
    """

    endpoint: httpx.URL
    headers: Mapping[str, str] = field(default_factory=dict)
    request_timeout_ms: int = DEFAULT_TIMEOUT_MS
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.endpoint, httpx.URL):
            raise ConfigError("ProxyConfig requires a parsed httpx.URL endpoint")
        if self.endpoint.scheme.lower() not in ALLOWED_SCHEMES or not self.endpoint.host:
            raise ConfigError(f"ProxyConfig endpoint must be an http(s) URL with a host: {self.endpoint}")

        for name, value in self.headers.items():
            if not is_valid_header_name(name):
                raise ConfigError(f'Invalid header name: "{name}"')
            if not is_valid_header_value(value):
                raise ConfigError(f'Invalid header value for "{name}": contains forbidden characters (CR/LF)')

        timeout_ms = self.request_timeout_ms
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            timeout_ms = DEFAULT_TIMEOUT_MS

        object.__setattr__(self, "headers", _freeze_headers(self.headers))
        object.__setattr__(self, "request_timeout_ms", timeout_ms)
        object.__setattr__(self, "debug", bool(self.debug))

    @property
    def timeout_s(self) -> float:
        return self.request_timeout_ms / 1000.0

    @classmethod
    def from_inputs(
        cls,
        endpoint: str,
        headers: Optional[Sequence[str]] = None,
        timeout_ms: Any = None,
        debug: bool = False,
        env: Optional[Mapping[str, str]] = None,
    ) -> "ConfigBuildResult":
        """
        Build a configuration from raw input.

        Every endpoint and header problem is collected before giving up, so
        the operator sees all of them at once.

        Args:
            endpoint: Target URL string
            headers: Raw ``"Name: Value"`` strings, in order
            timeout_ms: Request timeout in milliseconds (optional)
            debug: Enable verbose diagnostics
            env: Lookup for ``$VAR`` expansion (defaults to ``os.environ``)

        Returns:
            ConfigBuildResult (config is None when there are errors)
        """
        errors: List[ConfigIssue] = []
        warnings: List[ConfigIssue] = []

        endpoint_result = validate_endpoint(endpoint)
        if endpoint_result.valid:
            for message in endpoint_result.warnings:
                warnings.append(ConfigIssue.warn("endpoint", message))
        else:
            errors.append(ConfigIssue.error(
                "endpoint",
                endpoint_result.error or "Invalid URL",
                hint="Use an absolute http:// or https:// URL",
            ))

        header_result = parse_headers(list(headers or []), env)
        for issue in header_result.errors:
            path = f"headers[{issue.index}]" if issue.index >= 0 else "headers"
            errors.append(ConfigIssue.error(path, issue.message, hint='Use the form "Name: Value"'))
        for issue in header_result.warnings:
            warnings.append(ConfigIssue.warn(
                f"headers[{issue.index}]",
                issue.message,
                hint="Check that the referenced environment variable is set",
            ))

        resolved_timeout, timeout_error = resolve_timeout(timeout_ms)
        if timeout_error:
            errors.append(ConfigIssue.error("timeout_ms", timeout_error))

        if errors or endpoint_result.url is None:
            return ConfigBuildResult(config=None, errors=errors, warnings=warnings)

        config = cls(
            endpoint=endpoint_result.url,
            headers=header_result.headers,
            request_timeout_ms=resolved_timeout,
            debug=debug,
        )
        return ConfigBuildResult(config=config, errors=errors, warnings=warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Diagnostic view: credentials stripped from the endpoint, secrets masked."""
        return {
            "endpoint": display_endpoint(self.endpoint),
            "headers": mask_headers(self.headers),
            "request_timeout_ms": self.request_timeout_ms,
            "debug": self.debug,
        }


@dataclass(frozen=True)
class ConfigBuildResult:
    config: Optional[ProxyConfig]
    errors: List[ConfigIssue] = field(default_factory=list)
    warnings: List[ConfigIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.config is not None and not self.errors

    def unwrap(self) -> ProxyConfig:
        """Return the configuration or raise ConfigError listing every error."""
        if self.config is None or self.errors:
            raise ConfigError(
                "Invalid proxy configuration",
                errors=[str(issue) for issue in self.errors],
            )
        return self.config


__all__ = ["DEFAULT_TIMEOUT_MS", "ProxyConfig", "ConfigBuildResult", "resolve_timeout"]
