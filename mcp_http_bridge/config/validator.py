# mcp_http_bridge/config/validator.py
"""
Configuration issues

Structured output for every problem found while building a configuration:
level (warn/error), the field it concerns, a message and an optional hint.
"""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ConfigIssue:
    """
    Configuration validation issue

    Structured output for CLI/logging.
    """
    level: Literal["warn", "error"]
    path: str  # e.g., "endpoint", "headers[2]", "timeout_ms"
    message: str
    hint: str = ""

    def __str__(self) -> str:
        label = "Warning" if self.level == "warn" else "Error"
        hint_str = f" (hint: {self.hint})" if self.hint else ""
        return f"{label} [{self.path}] {self.message}{hint_str}"

    @classmethod
    def error(cls, path: str, message: str, hint: str = "") -> "ConfigIssue":
        return cls(level="error", path=path, message=message, hint=hint)

    @classmethod
    def warn(cls, path: str, message: str, hint: str = "") -> "ConfigIssue":
        return cls(level="warn", path=path, message=message, hint=hint)


__all__ = ["ConfigIssue"]
