# mcp_http_bridge/config/loader.py
"""
Configuration file loader

Optional YAML file with the same inputs the command line accepts:

    endpoint: https://mcp.example.com/mcp     # alias: url
    headers:                                  # list of "Name: Value" ...
      - "Authorization: Bearer ${MCP_TOKEN}"
    # ... or a mapping
    # headers:
    #   Authorization: Bearer ${MCP_TOKEN}
    timeout_ms: 30000
    debug: false

The file only supplies raw inputs; validation and ``$VAR`` expansion happen
in ProxyConfig.from_inputs, exactly as for command-line values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from .validator import ConfigIssue


@dataclass(frozen=True)
class RawInputs:
    """Unvalidated inputs, merged from file and command line."""
    endpoint: Optional[str] = None
    headers: List[str] = field(default_factory=list)
    timeout_ms: Any = None
    debug: Optional[bool] = None

    def merged_with(
        self,
        *,
        endpoint: Optional[str] = None,
        headers: Optional[Sequence[str]] = None,
        timeout_ms: Any = None,
        debug: Optional[bool] = None,
    ) -> "RawInputs":
        """
        Overlay command-line values. Scalars override; headers are appended so
        a command-line header wins over a file header of the same name.
        """
        return replace(
            self,
            endpoint=endpoint if endpoint is not None else self.endpoint,
            headers=list(self.headers) + list(headers or []),
            timeout_ms=timeout_ms if timeout_ms is not None else self.timeout_ms,
            debug=debug if debug is not None else self.debug,
        )


@dataclass
class LoadResult:
    inputs: RawInputs = field(default_factory=RawInputs)
    errors: List[ConfigIssue] = field(default_factory=list)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("top level must be a mapping")
    return data


def _normalize_headers(raw: Any, errors: List[ConfigIssue]) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [f"{name}: {'' if value is None else value}" for name, value in raw.items()]
    if isinstance(raw, list):
        out: List[str] = []
        for index, item in enumerate(raw):
            if isinstance(item, str):
                out.append(item)
            else:
                errors.append(ConfigIssue.error(
                    f"config.headers[{index}]",
                    f"Header entry must be a string, got {type(item).__name__}",
                ))
        return out
    errors.append(ConfigIssue.error("config.headers", "headers must be a list or a mapping"))
    return []


def load_config_file(config_path: Union[str, Path]) -> LoadResult:
    """
    Load raw inputs from a YAML file.

    An explicitly named file that is missing or malformed is an error: the
    bridge never starts against a configuration the operator did not intend.
    """
    path = Path(config_path)
    result = LoadResult()

    if not path.exists():
        result.errors.append(ConfigIssue.error("config", f"Configuration file not found: {path}"))
        return result

    try:
        data = _load_yaml(path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        result.errors.append(ConfigIssue.error("config", f"Could not read configuration file {path}: {e}"))
        return result

    endpoint = data.get("endpoint", data.get("url"))
    if endpoint is not None and not isinstance(endpoint, str):
        result.errors.append(ConfigIssue.error("config.endpoint", "endpoint must be a string"))
        endpoint = None

    debug = data.get("debug")
    if debug is not None and not isinstance(debug, bool):
        result.errors.append(ConfigIssue.error("config.debug", "debug must be true or false"))
        debug = None

    headers = _normalize_headers(data.get("headers"), result.errors)

    result.inputs = RawInputs(
        endpoint=endpoint,
        headers=headers,
        timeout_ms=data.get("timeout_ms"),
        debug=debug,
    )
    return result


__all__ = ["RawInputs", "LoadResult", "load_config_file"]
