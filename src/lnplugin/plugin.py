"""Plugin - registration and the request loop

A `Plugin` owns the user's state, the declared options and the handler
registry. Plugins declare what they offer, then call `start()`, which serves
requests from stdin until the host closes the stream:

- **Line framing**: one JSON request per line in, one JSON response per line out
- **Built-in lifecycle**: `getmanifest` and `init` are always handled by the runtime
- **Strict ordering**: one request at a time, responses in arrival order
- **Recoverable errors**: malformed requests, unknown methods and handler
  errors are answered with a JSON-RPC error and the loop continues
- **Fatal errors**: only a broken stream or an unencodable response ends the loop

# Example

```python
from lnplugin import Plugin

def hello(plugin, params):
    plugin.state["calls"] += 1
    return {"greeting": f"hello {params.get('name', 'world')}"}

plugin = Plugin({"calls": 0}, dynamic=True)
plugin.add_opt("greeting-style", "string", "plain", "How to greet")
plugin.add_rpc_method("hello", "[name]", "Say hello", hello)
plugin.start()
```
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, TextIO, TypeVar, Union

from lnplugin.commands import BUILTIN_COMMANDS
from lnplugin.dispatch import Dispatcher
from lnplugin.envelope import Request, error_response, log_notification, success_response
from lnplugin.errors import (
    ConfigurationError,
    InternalError,
    InvalidRequestError,
    ParseError,
    PluginError,
    UnknownOptionError,
)
from lnplugin.io import FramingError, LineReader, LineWriter, ReadError, decode_message
from lnplugin.log import HostLogHandler
from lnplugin.registry import HandlerRegistry
from lnplugin.types import Configuration, LogLevel, RpcOption


logger = logging.getLogger(__name__)

T = TypeVar("T")


class CycleKind(Enum):
    """Outcome of one read-dispatch-respond cycle"""
    CONTINUE = "continue"  # Request served (or notification delivered)
    RECOVERABLE = "recoverable"  # Error envelope written, keep serving
    STOP = "stop"  # Input closed, exit cleanly
    FATAL = "fatal"  # Stream broken or response unencodable


@dataclass
class Cycle:
    kind: CycleKind
    envelope: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None


class Plugin(Generic[T]):
    """A plugin: state, options, handlers and the loop that serves them.

    Handlers receive the plugin itself, so they can reach `plugin.state`,
    `plugin.get_opt()` and `plugin.log()`, and may register more handlers.
    """

    def __init__(self, state: T, dynamic: bool = False):
        self.state = state
        self.dynamic = dynamic
        # Declared options keyed by name
        self.options: Dict[str, RpcOption] = {}
        # Values the host resolved for our options, filled by init
        self.option_values: Dict[str, Any] = {}
        self.configuration: Optional[Configuration] = None
        self.init_callback: Optional[Callable[["Plugin[T]", Any], Any]] = None
        self.registry = HandlerRegistry()
        self.dispatcher = Dispatcher(self)
        self.writer: Optional[LineWriter] = None
        self.manifest_sent = False
        self._stopped = False
        self._host_handler: Optional[HostLogHandler] = None

    # Registry views, named after the fields plugin authors know

    @property
    def rpc_method(self):
        return self.registry.rpc_method

    @property
    def rpc_info(self):
        return self.registry.rpc_info

    @property
    def rpc_hook(self):
        return self.registry.rpc_hook

    @property
    def hook_info(self):
        return self.registry.hook_info

    @property
    def rpc_notification(self):
        return self.registry.rpc_notification

    # Configuration phase

    def add_opt(
        self,
        name: str,
        opt_type: str,
        def_val: Optional[Any],
        description: str,
        deprecated: bool = False,
    ) -> "Plugin[T]":
        """Declare an option. Re-declaring a name replaces the old declaration.

        Raises:
            ConfigurationError: the manifest was already sent to the host
        """
        if self.manifest_sent:
            raise ConfigurationError(f"Cannot add option '{name}' after the manifest was sent")
        self.options[name] = RpcOption(
            name=name,
            opt_type=opt_type,
            default=def_val,
            description=description,
            deprecated=deprecated,
        )
        return self

    def add_rpc_method(
        self,
        name: str,
        usage: str,
        description: str,
        callback: Any,
        long_description: Optional[str] = None,
        deprecated: bool = False,
    ) -> "Plugin[T]":
        """Register an RPC method; the last registration for a name wins"""
        self.registry.add_method(
            name, usage, description, callback,
            long_description=long_description,
            deprecated=deprecated,
        )
        return self

    def register_hook(
        self,
        hook_name: str,
        before: Optional[List[str]],
        after: Optional[List[str]],
        callback: Any,
    ) -> "Plugin[T]":
        """Subscribe to a host hook with optional ordering hints"""
        self.registry.add_hook(hook_name, callback, before=before, after=after)
        return self

    def register_notification(self, name: str, callback: Any) -> "Plugin[T]":
        """Subscribe to a host notification topic"""
        self.registry.add_notification(name, callback)
        return self

    def on_init(self, callback: Callable[["Plugin[T]", Any], Any]) -> "Plugin[T]":
        """Set a callback run at the end of `init`, after options are resolved.

        Its return value, when not None, is the init response.
        """
        self.init_callback = callback
        return self

    def mark_manifest_sent(self) -> None:
        self.manifest_sent = True

    # Serving phase

    def get_opt(self, name: str) -> Any:
        """Value of an option: the host's value, else the declared default.

        Raises:
            UnknownOptionError: the option was never declared
        """
        if name not in self.options:
            raise UnknownOptionError(name)
        if name in self.option_values and self.option_values[name] is not None:
            return self.option_values[name]
        return self.options[name].default

    def log(self, level: Union[LogLevel, str], msg: str) -> "Plugin[T]":
        """Send a log line to the host.

        Raises:
            WriteError: stdout is broken
        """
        if isinstance(level, str):
            parsed = LogLevel.from_str(level)
            if parsed is None:
                raise ValueError(f"Unknown log level '{level}'")
            level = parsed
        self._output().write(log_notification(level, msg))
        return self

    def logger(self, name: str = "lnplugin.host") -> logging.Logger:
        """A logger whose records are forwarded to the host's log"""
        if self._host_handler is None:
            self._host_handler = HostLogHandler(self)
        host_logger = logging.getLogger(name)
        if self._host_handler not in host_logger.handlers:
            host_logger.addHandler(self._host_handler)
        return host_logger

    def stop(self) -> None:
        """Ask the loop to exit once the current request is answered"""
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        """Install the built-in methods and serve requests until EOF or stop().

        Reads stdin and writes stdout unless other streams are given.

        Raises:
            FramingError: the input or output stream failed, or a response
                could not be encoded
        """
        for name, builtin in BUILTIN_COMMANDS.items():
            self.registry.install_builtin(name, builtin())

        reader = LineReader(stdin if stdin is not None else sys.stdin)
        if stdout is not None or self.writer is None:
            self.writer = LineWriter(stdout if stdout is not None else sys.stdout)

        self.serve(reader, self.writer)

    def serve(self, reader: LineReader, writer: LineWriter) -> None:
        """Run cycles until input closes, stop() is called, or a fatal error"""
        self._stopped = False
        while True:
            cycle = self.run_cycle(reader, writer)
            if cycle.kind is CycleKind.FATAL:
                logger.error("Plugin loop terminated: %s", cycle.error)
                raise cycle.error
            if cycle.kind is CycleKind.STOP:
                logger.info("Input closed, plugin loop exiting")
                break
            if self._stopped:
                logger.info("Stop requested, plugin loop exiting")
                break

    def run_cycle(self, reader: LineReader, writer: LineWriter) -> Cycle:
        """Read one request, handle it and write the response"""
        try:
            line = reader.read_line()
        except ReadError as e:
            return Cycle(CycleKind.FATAL, error=e)
        if line is None:
            return Cycle(CycleKind.STOP)

        try:
            cycle = self.handle_line(line)
        except FramingError as e:
            # A handler hit a broken stream while logging
            return Cycle(CycleKind.FATAL, error=e)
        if cycle.envelope is not None:
            try:
                writer.write(cycle.envelope)
            except FramingError as e:
                return Cycle(CycleKind.FATAL, envelope=cycle.envelope, error=e)
        return cycle

    def handle_line(self, line: Union[str, bytes]) -> Cycle:
        """Turn one request line into the envelope to send back, if any"""
        try:
            request = Request.from_dict(decode_message(line))
        except ParseError as e:
            logger.warning("Discarding unparseable request: %s", e)
            return Cycle(CycleKind.RECOVERABLE, envelope=error_response(None, e), error=e)
        except InvalidRequestError as e:
            logger.warning("Discarding invalid request: %s", e)
            return Cycle(CycleKind.RECOVERABLE, envelope=error_response(e.request_id, e), error=e)

        if request.is_notification:
            self._deliver_notification(request)
            return Cycle(CycleKind.CONTINUE)

        try:
            result = self.dispatcher.dispatch(request.method, request.params)
        except FramingError:
            raise
        except PluginError as e:
            logger.debug("Method %s failed: %s", request.method, e)
            return Cycle(
                CycleKind.RECOVERABLE,
                envelope=error_response(request.id, e, request.jsonrpc),
                error=e,
            )
        except Exception as e:
            logger.exception("Handler for %s raised", request.method)
            error = InternalError(f"Error while processing {request.method}: {e}")
            return Cycle(
                CycleKind.RECOVERABLE,
                envelope=error_response(request.id, error, request.jsonrpc),
                error=error,
            )

        return Cycle(CycleKind.CONTINUE, envelope=success_response(request.id, result, request.jsonrpc))

    def _deliver_notification(self, request: Request) -> None:
        # Notifications have no response, so failures can only be logged
        try:
            self.dispatcher.notify(request.method, request.params)
        except FramingError:
            raise
        except Exception:
            logger.exception("Notification handler for %s raised", request.method)

    def _output(self) -> LineWriter:
        if self.writer is None:
            self.writer = LineWriter(sys.stdout)
        return self.writer
