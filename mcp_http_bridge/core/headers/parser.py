# mcp_http_bridge/core/headers/parser.py
"""
Header expression parser

Turns operator-supplied ``"Name: Value"`` strings into validated headers:

- ``$NAME`` and ``${NAME}`` references are expanded from an environment
  lookup; unknown names expand to the empty string
- a string without a colon is expanded as a whole first, so a single
  variable may hold a complete ``"Name: Value"`` pair
- names must be HTTP tokens (RFC 7230)
- values must not contain CR or LF after expansion (header injection)

An empty value produced by expansion is a warning, not an error: the
remote server's own authentication failure is the better diagnostic.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence


HEADER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9!#$%&'*+.^_`|~-]+$")

ENV_VAR_PATTERN = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


@dataclass(frozen=True)
class ParsedHeader:
    name: str
    value: str
    original_value: str  # before expansion, for diagnostics only


@dataclass(frozen=True)
class HeaderParseResult:
    success: bool
    header: Optional[ParsedHeader] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, header: ParsedHeader) -> "HeaderParseResult":
        return cls(success=True, header=header)

    @classmethod
    def fail(cls, error: str) -> "HeaderParseResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class HeaderIssue:
    """One error or warning, tied to the position of the raw header string."""
    index: int
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class HeadersParseResult:
    headers: Dict[str, str] = field(default_factory=dict)
    errors: List[HeaderIssue] = field(default_factory=list)
    warnings: List[HeaderIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def expand_env_vars(value: str, env: Optional[Mapping[str, str]] = None) -> str:
    lookup = os.environ if env is None else env

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1) or match.group(2)
        resolved = lookup.get(name)
        return resolved if resolved is not None else ""

    return ENV_VAR_PATTERN.sub(_replace, value)


def has_env_reference(value: str) -> bool:
    return ENV_VAR_PATTERN.search(value) is not None


def is_valid_header_name(name: str) -> bool:
    if not name or not isinstance(name, str):
        return False
    return HEADER_NAME_PATTERN.fullmatch(name) is not None


def is_valid_header_value(value: str) -> bool:
    if not isinstance(value, str):
        return False
    return "\r" not in value and "\n" not in value


def parse_header(header_string: str, env: Optional[Mapping[str, str]] = None) -> HeaderParseResult:
    """
    Parse a single ``"Name: Value"`` header string.

    Args:
        header_string: Raw header, e.g. ``"Authorization: Bearer $TOKEN"``
        env: Lookup used for variable expansion (defaults to ``os.environ``)

    Returns:
        HeaderParseResult with either ``header`` or ``error`` set
    """
    if not isinstance(header_string, str) or not header_string.strip():
        return HeaderParseResult.fail("Header string must be a non-empty string")

    trimmed = header_string.strip()
    working = trimmed
    colon = working.find(":")
    expanded_whole = False

    if colon == -1:
        working = expand_env_vars(working, env).strip()
        colon = working.find(":")
        expanded_whole = True

    if colon == -1:
        return HeaderParseResult.fail(f'Invalid header format: missing colon separator in "{header_string}"')

    name = working[:colon].strip()
    raw_value = working[colon + 1:].strip()

    if not is_valid_header_name(name):
        return HeaderParseResult.fail(f'Invalid header name: "{name}"')

    original_value = trimmed if expanded_whole else raw_value

    # Expanding again is harmless when the whole string was already expanded
    value = expand_env_vars(raw_value, env)

    if not is_valid_header_value(value):
        return HeaderParseResult.fail(
            f'Invalid header value for "{name}": contains forbidden characters (CR/LF)'
        )

    return HeaderParseResult.ok(ParsedHeader(name=name, value=value, original_value=original_value))


def parse_headers(header_strings: Sequence[str], env: Optional[Mapping[str, str]] = None) -> HeadersParseResult:
    """
    Parse many header strings, collecting every problem instead of stopping
    at the first one. Later entries with the same name replace earlier ones.
    """
    result = HeadersParseResult()

    if isinstance(header_strings, (str, bytes)) or not isinstance(header_strings, Sequence):
        result.errors.append(HeaderIssue(index=-1, message="header_strings must be a list of strings"))
        return result

    for index, header_string in enumerate(header_strings):
        parsed = parse_header(header_string, env)
        if not parsed.success or parsed.header is None:
            result.errors.append(HeaderIssue(index=index, message=parsed.error or "Invalid header"))
            continue

        header = parsed.header
        if header.value == "" and header.original_value and has_env_reference(header.original_value):
            result.warnings.append(HeaderIssue(
                index=index,
                message=(
                    f'Header "{header.name}" has empty value after environment variable '
                    f'expansion (original: "{header.original_value}")'
                ),
            ))

        result.headers[header.name] = header.value

    return result


__all__ = [
    "HEADER_NAME_PATTERN",
    "ENV_VAR_PATTERN",
    "ParsedHeader",
    "HeaderParseResult",
    "HeaderIssue",
    "HeadersParseResult",
    "expand_env_vars",
    "has_env_reference",
    "is_valid_header_name",
    "is_valid_header_value",
    "parse_header",
    "parse_headers",
]
