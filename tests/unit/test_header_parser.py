"""
Header expression parsing

Covers:
1) "Name: Value" splitting and trimming
2) $VAR / ${VAR} expansion against an injected lookup
3) Name/value validation (RFC 7230 token, no CR/LF)
4) Batch parsing: all errors collected, warnings for empty expansions
"""

import pytest

from mcp_http_bridge.core.headers import (
    expand_env_vars,
    has_env_reference,
    is_valid_header_name,
    is_valid_header_value,
    parse_header,
    parse_headers,
)


class TestExpandEnvVars:
    def test_plain_and_braced_forms(self):
        env = {"TOKEN": "xyz", "HOST": "example"}
        assert expand_env_vars("Bearer $TOKEN", env) == "Bearer xyz"
        assert expand_env_vars("${HOST}.com", env) == "example.com"

    def test_unknown_variable_becomes_empty(self):
        assert expand_env_vars("a-$MISSING-b", {}) == "a--b"

    def test_braces_delimit_the_name(self):
        env = {"A": "1", "AB": "2"}
        assert expand_env_vars("${A}B", env) == "1B"
        assert expand_env_vars("$AB", env) == "2"

    def test_text_without_reference_is_untouched(self):
        assert expand_env_vars("price: 5$", {}) == "price: 5$"
        assert not has_env_reference("price: 5$")
        assert has_env_reference("${X}")


class TestHeaderValidation:
    @pytest.mark.parametrize("name", ["Authorization", "X-Api-Key", "x_custom", "A.B", "token!#"])
    def test_valid_names(self, name):
        assert is_valid_header_name(name)

    @pytest.mark.parametrize("name", ["", "Bad Name", "Bad:Name", "Naïve", "(x)", "X-A\n"])
    def test_invalid_names(self, name):
        assert not is_valid_header_name(name)

    def test_value_rejects_line_breaks(self):
        assert is_valid_header_value("plain value")
        assert not is_valid_header_value("a\r\nInjected: 1")
        assert not is_valid_header_value("a\nb")


class TestParseHeader:
    def test_expands_variable_in_value(self):
        result = parse_header("Authorization: Bearer $TOKEN", {"TOKEN": "xyz"})

        assert result.success
        assert result.header.name == "Authorization"
        assert result.header.value == "Bearer xyz"
        assert result.header.original_value == "Bearer $TOKEN"

    def test_trims_name_and_value(self):
        result = parse_header("  X-Custom :   some value  ", {})

        assert result.success
        assert result.header.name == "X-Custom"
        assert result.header.value == "some value"

    def test_value_may_contain_colons(self):
        result = parse_header("X-Target: http://host:8080/path", {})
        assert result.header.value == "http://host:8080/path"

    def test_empty_value_is_allowed(self):
        result = parse_header("X-Empty:", {})
        assert result.success
        assert result.header.value == ""

    def test_missing_colon(self):
        result = parse_header("NoColonHere", {})

        assert not result.success
        assert "missing colon separator" in result.error

    def test_whole_string_from_variable(self):
        result = parse_header("$AUTH_HEADER", {"AUTH_HEADER": "Authorization: Bearer abc"})

        assert result.success
        assert result.header.name == "Authorization"
        assert result.header.value == "Bearer abc"

    def test_invalid_name(self):
        result = parse_header("Bad Name: value", {})

        assert not result.success
        assert result.error == 'Invalid header name: "Bad Name"'

    def test_expansion_cannot_inject_line_breaks(self):
        result = parse_header("X-Inject: $EVIL", {"EVIL": "ok\r\nX-Other: 1"})

        assert not result.success
        assert "CR/LF" in result.error

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_input(self, raw):
        assert not parse_header(raw, {}).success


class TestParseHeaders:
    def test_collects_every_error_with_its_position(self):
        result = parse_headers(["Good: 1", "bad", "Also Bad: x", "Fine: 2"], {})

        assert not result.ok
        assert [issue.index for issue in result.errors] == [1, 2]
        assert result.headers == {"Good": "1", "Fine": "2"}

    def test_later_entry_wins(self):
        result = parse_headers(["X-Key: first", "X-Key: second"], {})
        assert result.headers == {"X-Key": "second"}

    def test_warns_when_expansion_is_empty(self):
        result = parse_headers(["Authorization: $UNSET_TOKEN"], {})

        assert result.ok
        assert result.headers == {"Authorization": ""}
        assert len(result.warnings) == 1
        assert result.warnings[0].index == 0
        assert "empty value after environment variable expansion" in str(result.warnings[0])

    def test_literal_empty_value_does_not_warn(self):
        result = parse_headers(["X-Empty:"], {})
        assert result.ok
        assert result.warnings == []

    def test_rejects_a_bare_string(self):
        result = parse_headers("Authorization: x", {})
        assert not result.ok
