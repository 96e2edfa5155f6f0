"""lnplugin - Plugin runtime for line-delimited JSON-RPC hosts

This library lets a program expose RPC methods, hook handlers and
notification handlers to a controlling daemon (such as Core Lightning's
lightningd). It answers the daemon's `getmanifest` and `init` handshake and
serves requests over stdin/stdout, one JSON object per line.
"""

from lnplugin.types import (
    LogLevel,
    RpcOption,
    RPCMethodInfo,
    RPCHookInfo,
    Configuration,
)

from lnplugin.errors import (
    PluginError,
    ParseError,
    InvalidRequestError,
    MethodNotFoundError,
    InvalidParamsError,
    InternalError,
    RuntimeError,
    ConfigurationError,
    UnknownOptionError,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
)

from lnplugin.commands import RPCCommand, FunctionCommand, ManifestRPC, InitRPC
from lnplugin.registry import HandlerRegistry, RESERVED_METHODS
from lnplugin.manifest import Manifest, build_manifest
from lnplugin.dispatch import Dispatcher
from lnplugin.envelope import Request, success_response, error_response, log_notification
from lnplugin.io import (
    LineReader,
    LineWriter,
    FramingError,
    ReadError,
    EncodeError,
    WriteError,
)
from lnplugin.log import HostLogHandler
from lnplugin.plugin import Plugin, Cycle, CycleKind

__all__ = [
    # Types
    "LogLevel",
    "RpcOption",
    "RPCMethodInfo",
    "RPCHookInfo",
    "Configuration",
    # Errors
    "PluginError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalError",
    "RuntimeError",
    "ConfigurationError",
    "UnknownOptionError",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    # Handlers
    "RPCCommand",
    "FunctionCommand",
    "ManifestRPC",
    "InitRPC",
    "HandlerRegistry",
    "RESERVED_METHODS",
    # Manifest
    "Manifest",
    "build_manifest",
    # Dispatch
    "Dispatcher",
    # Envelopes and I/O
    "Request",
    "success_response",
    "error_response",
    "log_notification",
    "LineReader",
    "LineWriter",
    "FramingError",
    "ReadError",
    "EncodeError",
    "WriteError",
    # Logging
    "HostLogHandler",
    # Plugin
    "Plugin",
    "Cycle",
    "CycleKind",
]
