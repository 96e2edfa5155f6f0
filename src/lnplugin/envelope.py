"""JSON-RPC envelopes exchanged with the host

## Request (host → plugin)

```
{"method": "<name>", "params": {...} | [...], "id": <number | string>}
```

A request without `id` is a notification and gets no response. A
`"jsonrpc"` member is optional and, when present, echoed in the response.

## Response (plugin → host)

```
{"id": <echoed id>, "result": <value>}
{"id": <echoed id>, "error": {"code": <int>, "message": <str>, "data"?: <value>}}
```

## Log notification (plugin → host, unsolicited)

```
{"jsonrpc": "2.0", "method": "log", "params": {"level": "<level>", "message": "<text>"}}
```

Log lines carry a `method` and no `id`, so a host can always tell them apart
from responses.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from lnplugin.errors import InvalidRequestError, PluginError
from lnplugin.types import LogLevel


JSONRPC_VERSION = "2.0"

REQUEST_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "jsonrpc": {"type": "string"},
        "method": {"type": "string", "minLength": 1},
        "params": {"type": ["object", "array", "null"]},
        "id": {"type": ["integer", "number", "string"]},
    },
    "required": ["method"],
}

_request_validator = Draft7Validator(REQUEST_SCHEMA)

# Sentinel for "request had no id member" (id may legitimately be 0 or "")
NO_ID = object()


@dataclass
class Request:
    """A decoded request or notification"""
    method: str
    params: Any
    id: Any = NO_ID
    jsonrpc: Optional[str] = None

    @property
    def is_notification(self) -> bool:
        return self.id is NO_ID

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        """Validate a decoded JSON value against the request envelope.

        Raises:
            InvalidRequestError: the value is not a request envelope. Its
                `request_id` is the request's id when one was readable.
        """
        errors = sorted(_request_validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            details = "; ".join(_describe(e) for e in errors)
            req_id = data.get("id") if isinstance(data, dict) else None
            error = InvalidRequestError(f"Invalid request: {details}")
            error.request_id = req_id if _usable_id(req_id) else None
            raise error

        params = data.get("params")
        if params is None:
            params = {}
        return cls(
            method=data["method"],
            params=params,
            id=data["id"] if "id" in data else NO_ID,
            jsonrpc=data.get("jsonrpc"),
        )

    def response_id(self) -> Any:
        return None if self.is_notification else self.id


def _describe(error) -> str:
    path = ".".join(str(p) for p in error.path)
    return f"{path}: {error.message}" if path else error.message


def _usable_id(value: Any) -> bool:
    return isinstance(value, (int, float, str)) and not isinstance(value, bool)


def success_response(req_id: Any, result: Any, jsonrpc: Optional[str] = None) -> Dict[str, Any]:
    """Build a success envelope"""
    envelope: Dict[str, Any] = {}
    if jsonrpc is not None:
        envelope["jsonrpc"] = jsonrpc
    envelope["id"] = req_id
    envelope["result"] = result
    return envelope


def error_response(req_id: Any, error: PluginError, jsonrpc: Optional[str] = None) -> Dict[str, Any]:
    """Build an error envelope"""
    envelope: Dict[str, Any] = {}
    if jsonrpc is not None:
        envelope["jsonrpc"] = jsonrpc
    envelope["id"] = req_id
    envelope["error"] = error.to_dict()
    return envelope


def log_notification(level: LogLevel, message: str) -> Dict[str, Any]:
    """Build a log notification for the host"""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "method": "log",
        "params": {"level": str(level), "message": message},
    }
