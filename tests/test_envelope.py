"""Tests for JSON-RPC envelopes"""

import pytest

from lnplugin.envelope import (
    NO_ID,
    Request,
    error_response,
    log_notification,
    success_response,
)
from lnplugin.errors import InvalidRequestError, MethodNotFoundError
from lnplugin.types import LogLevel


# TEST301: Test a full request envelope decodes
def test_request_from_dict():
    req = Request.from_dict({"method": "foo", "params": {"a": 1}, "id": 7})

    assert req.method == "foo"
    assert req.params == {"a": 1}
    assert req.id == 7
    assert req.jsonrpc is None
    assert not req.is_notification


# TEST302: Test missing id marks a notification and missing params become {}
def test_notification():
    req = Request.from_dict({"jsonrpc": "2.0", "method": "connect"})

    assert req.is_notification
    assert req.id is NO_ID
    assert req.params == {}
    assert req.response_id() is None


# TEST303: Test id zero and empty string are real ids
def test_falsy_ids():
    assert not Request.from_dict({"method": "m", "id": 0}).is_notification
    assert Request.from_dict({"method": "m", "id": ""}).id == ""


# TEST304: Test positional params are accepted
def test_array_params():
    req = Request.from_dict({"method": "m", "params": [1, "two"], "id": "x"})
    assert req.params == [1, "two"]


# TEST305: Test malformed envelopes are rejected
@pytest.mark.parametrize("data", [
    [],
    "getmanifest",
    {"params": {}, "id": 1},
    {"method": 5, "id": 1},
    {"method": "", "id": 1},
    {"method": "m", "params": 3, "id": 1},
    {"method": "m", "id": True},
    {"method": "m", "id": {"nested": 1}},
])
def test_invalid_envelopes(data):
    with pytest.raises(InvalidRequestError):
        Request.from_dict(data)


# TEST306: Test invalid envelope keeps a readable id for the error response
def test_invalid_envelope_keeps_id():
    with pytest.raises(InvalidRequestError) as exc_info:
        Request.from_dict({"method": 5, "id": 42})
    assert exc_info.value.request_id == 42
    assert "method" in exc_info.value.message

    with pytest.raises(InvalidRequestError) as exc_info:
        Request.from_dict({"method": "m", "id": [1]})
    assert exc_info.value.request_id is None


# TEST307: Test success envelope shape and jsonrpc echo
def test_success_response():
    assert success_response(1, {"ok": True}) == {"id": 1, "result": {"ok": True}}
    assert list(success_response("a", None, "2.0")) == ["jsonrpc", "id", "result"]


# TEST308: Test error envelope carries code, message and data
def test_error_response():
    envelope = error_response(3, MethodNotFoundError("foo"))
    assert envelope == {
        "id": 3,
        "error": {"code": -32601, "message": "Unknown method 'foo'", "data": {"method": "foo"}},
    }


# TEST309: Test log notification has a method and no id
def test_log_notification():
    msg = log_notification(LogLevel.WARN, "careful")
    assert msg == {
        "jsonrpc": "2.0",
        "method": "log",
        "params": {"level": "warn", "message": "careful"},
    }
    assert "id" not in msg
