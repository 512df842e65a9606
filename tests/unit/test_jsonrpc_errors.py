"""
JSON-RPC error envelopes

Every builder must produce a JSON-RPC 2.0 legal error response with the
code from the bridge's code table and an id of the right shape.
"""

import json

import pytest

from mcp_http_bridge.core.errors import (
    BridgeError,
    ConfigError,
    cancelled_error,
    codes,
    create_error,
    create_error_response,
    format_as_json,
    from_http_error,
    internal_error,
    invalid_request,
    parse_error,
    timeout_error,
)


def assert_envelope(envelope, code, request_id):
    assert envelope["jsonrpc"] == "2.0"
    assert envelope["id"] == request_id
    assert envelope["error"]["code"] == code
    assert isinstance(envelope["error"]["message"], str)
    assert "result" not in envelope


class TestBuilders:
    def test_parse_error_has_null_id(self):
        envelope = parse_error("Expecting value: line 1 column 1 (char 0)")

        assert_envelope(envelope, -32700, None)
        assert envelope["error"]["data"] == {"details": "Expecting value: line 1 column 1 (char 0)"}

    def test_invalid_request_keeps_id(self):
        envelope = invalid_request(7, "Invalid or missing method (must be a string)")

        assert_envelope(envelope, -32600, 7)
        assert envelope["error"]["message"] == "Invalid Request"

    def test_internal_error_without_data(self):
        envelope = internal_error("abc")

        assert_envelope(envelope, -32603, "abc")
        assert "data" not in envelope["error"]

    def test_http_error_with_json_body(self):
        envelope = from_http_error(404, "Not Found", 1, {"detail": "no such route"})

        assert_envelope(envelope, -32001, 1)
        assert envelope["error"]["message"] == "HTTP 404: Not Found"
        assert envelope["error"]["data"] == {
            "statusCode": 404,
            "statusText": "Not Found",
            "body": {"detail": "no such route"},
        }

    def test_http_error_without_body(self):
        envelope = from_http_error(502, "Bad Gateway", None)
        assert "body" not in envelope["error"]["data"]

    def test_timeout(self):
        envelope = timeout_error(100, 3)

        assert_envelope(envelope, -32000, 3)
        assert envelope["error"]["message"] == "Request timeout"
        assert envelope["error"]["data"]["errorCode"] == "ETIMEDOUT"
        assert "100ms" in envelope["error"]["data"]["originalError"]

    def test_cancelled(self):
        envelope = cancelled_error(None)

        assert_envelope(envelope, -32000, None)
        assert envelope["error"]["data"]["errorCode"] == "ECANCELED"

    def test_default_message_from_code_table(self):
        assert create_error(codes.METHOD_NOT_FOUND) == {"code": -32601, "message": "Method not found"}
        assert create_error(-1)["message"] == "Unknown error"

    def test_explicit_null_data_is_kept(self):
        envelope = create_error_response(codes.INTERNAL_ERROR, "boom", 1, None)
        assert envelope["error"]["data"] is None


class TestFormatAsJson:
    def test_compact_single_line(self):
        line = format_as_json(invalid_request(1, "multi\nline details"))

        assert "\n" not in line
        assert ": " not in line
        assert json.loads(line)["error"]["data"]["details"] == "multi\nline details"

    def test_non_ascii_is_escaped(self):
        line = format_as_json(internal_error(1, "échec"))

        assert line.isascii()
        assert json.loads(line)["error"]["message"] == "échec"

    def test_lone_surrogate_stays_encodable(self):
        line = format_as_json(invalid_request("\ud800", "bad"))

        line.encode("utf-8")
        assert json.loads(line)["id"] == "\ud800"


class TestExceptions:
    def test_bridge_error_str_and_dict(self):
        err = BridgeError("boom", details={"k": 1})

        assert str(err) == "[BRIDGE_ERROR] boom"
        assert err.to_dict() == {"code": "BRIDGE_ERROR", "message": "boom", "details": {"k": 1}}

    def test_config_error_lists_every_error(self):
        err = ConfigError("Invalid proxy configuration", errors=["a", "b"])

        assert str(err) == "[CONFIG_ERROR] Invalid proxy configuration: a; b"
        with pytest.raises(BridgeError):
            raise err
