"""Handler contract and the built-in lifecycle commands

Every method, hook and notification handler is an `RPCCommand`: an object
with a single `call(plugin, params)` operation. The handler receives the
plugin itself, so it can read and mutate `plugin.state` and register further
methods while it runs. Plain functions are adapted with `FunctionCommand`.

Handlers answer with any JSON-serializable value. To answer with a JSON-RPC
error instead, raise a `PluginError` (see `lnplugin.errors`).
"""

import logging
from typing import Any, Callable, Dict, Protocol, TYPE_CHECKING

from lnplugin.errors import InvalidParamsError
from lnplugin.manifest import build_manifest
from lnplugin.types import Configuration, RpcOption

if TYPE_CHECKING:
    from lnplugin.plugin import Plugin


logger = logging.getLogger(__name__)


class RPCCommand(Protocol):
    """A handler bound to a plugin's state type"""

    def call(self, plugin: "Plugin", params: Any) -> Any:
        """Handle one request and return its result value.
        Raises: PluginError to produce an error response."""
        ...


class FunctionCommand:
    """Adapts a plain `fn(plugin, params)` callable to `RPCCommand`"""

    def __init__(self, fn: Callable[["Plugin", Any], Any]):
        self.fn = fn

    def call(self, plugin: "Plugin", params: Any) -> Any:
        return self.fn(plugin, params)

    def __repr__(self) -> str:
        return f"FunctionCommand({getattr(self.fn, '__name__', self.fn)!r})"


def as_command(handler: Any) -> RPCCommand:
    """Return `handler` as an RPCCommand, wrapping bare callables"""
    if hasattr(handler, "call") and callable(handler.call):
        return handler
    if callable(handler):
        return FunctionCommand(handler)
    raise TypeError(f"Handler must be callable or define call(), got {type(handler)}")


class ManifestRPC:
    """Built-in `getmanifest`: announce options, methods, hooks and notifications"""

    def call(self, plugin: "Plugin", params: Any) -> Any:
        manifest = build_manifest(plugin)
        plugin.mark_manifest_sent()
        return manifest


class InitRPC:
    """Built-in `init`: receive option values and host configuration.

    The result of the plugin's `on_init` callback, if any, becomes the
    response (a host understands `{"disable": reason}`); otherwise `{}`.
    """

    def call(self, plugin: "Plugin", params: Any) -> Any:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidParamsError("init params must be an object")

        options = params.get("options") or {}
        if not isinstance(options, dict):
            raise InvalidParamsError("init 'options' must be an object")

        declared = plugin.options
        for name, value in options.items():
            opt = declared.get(name)
            if opt is None:
                # Hosts pass through options owned by other plugins too
                logger.debug("Ignoring value for undeclared option %s", name)
                continue
            plugin.option_values[name] = coerce_option_value(opt, value)

        configuration = params.get("configuration") or {}
        if not isinstance(configuration, dict):
            raise InvalidParamsError("init 'configuration' must be an object")
        plugin.configuration = Configuration.from_dict(configuration)

        if plugin.init_callback is not None:
            result = plugin.init_callback(plugin, params)
            if result is not None:
                return result
        return {}


_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def coerce_option_value(opt: RpcOption, value: Any) -> Any:
    """Convert an option value received from the host to its declared type.

    Unknown type tags are passed through untouched.
    """
    if value is None:
        return None

    if opt.opt_type == "int":
        # int() would silently truncate 1.5
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise InvalidParamsError(f"Option '{opt.name}' expects an int, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            raise InvalidParamsError(f"Option '{opt.name}' expects an int, got {value!r}")

    if opt.opt_type in ("bool", "flag"):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
        raise InvalidParamsError(f"Option '{opt.name}' expects a bool, got {value!r}")

    if opt.opt_type == "string":
        return value if isinstance(value, str) else str(value)

    return value


BUILTIN_COMMANDS: Dict[str, Callable[[], RPCCommand]] = {
    "getmanifest": ManifestRPC,
    "init": InitRPC,
}
