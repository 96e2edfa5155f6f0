"""Errors raised by the plugin runtime and by handlers

Two families live here:

- `PluginError` and its subclasses carry a JSON-RPC error code. Handlers
  raise them to answer a request with an error envelope instead of a result,
  and the request loop raises them for malformed or unroutable requests.
  They are always recoverable: the loop writes the envelope and keeps reading.
- `RuntimeError` and its subclasses are misuse of the runtime API by the
  plugin author (declaring options too late, asking for unknown options).
"""

from typing import Any, Dict, Optional


# JSON-RPC 2.0 reserved error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class PluginError(Exception):
    """Application level error returned to the host as a JSON-RPC error"""

    code = INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the `error` member of a response envelope"""
        result: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


class ParseError(PluginError):
    """Request line is not valid JSON"""
    code = PARSE_ERROR


class InvalidRequestError(PluginError):
    """Request is JSON but not a valid request envelope"""
    code = INVALID_REQUEST
    request_id: Any = None


class MethodNotFoundError(PluginError):
    """No handler registered for the requested method"""
    code = METHOD_NOT_FOUND

    def __init__(self, method: str):
        super().__init__(f"Unknown method '{method}'", data={"method": method})
        self.method = method


class InvalidParamsError(PluginError):
    """Handler rejected its parameters"""
    code = INVALID_PARAMS


class InternalError(PluginError):
    """Handler failed with an unexpected exception"""
    code = INTERNAL_ERROR


class RuntimeError(Exception):
    """Errors caused by using the runtime incorrectly"""
    pass


class ConfigurationError(RuntimeError):
    """Plugin declared something after it became immutable"""
    pass


class UnknownOptionError(RuntimeError):
    """Option was never declared"""

    def __init__(self, name: str):
        super().__init__(f"Unknown option '{name}'")
        self.name = name
