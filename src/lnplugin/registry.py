"""Handler registry

Owns the name → handler mappings for methods, hooks and notifications, and
the metadata advertised for methods and hooks. Registration overwrites: the
last handler registered under a name wins, and its metadata replaces the old
entry in the same step so handlers and metadata never drift apart.
"""

import logging
from typing import Any, Dict, List, Optional

from lnplugin.commands import RPCCommand, as_command
from lnplugin.types import RPCHookInfo, RPCMethodInfo, hook_hints


logger = logging.getLogger(__name__)

RESERVED_METHODS = frozenset(("getmanifest", "init"))


class HandlerRegistry:
    """Name-keyed storage of handlers and their manifest metadata"""

    def __init__(self):
        self.rpc_method: Dict[str, RPCCommand] = {}
        self.rpc_info: Dict[str, RPCMethodInfo] = {}
        self.rpc_hook: Dict[str, RPCCommand] = {}
        self.hook_info: Dict[str, RPCHookInfo] = {}
        self.rpc_notification: Dict[str, RPCCommand] = {}

    def add_method(
        self,
        name: str,
        usage: str,
        description: str,
        handler: Any,
        long_description: Optional[str] = None,
        deprecated: bool = False,
    ) -> None:
        """Register an RPC method, replacing any previous one with that name.

        Reserved names are accepted but only until the runtime starts, when
        the built-in handler takes over.
        """
        if name in RESERVED_METHODS:
            logger.warning(
                "Method '%s' is reserved; the built-in handler replaces it at startup", name
            )
        self.rpc_method[name] = as_command(handler)
        self.rpc_info[name] = RPCMethodInfo(
            name=name,
            usage=usage,
            description=description,
            long_description=long_description,
            deprecated=deprecated,
        )

    def add_hook(
        self,
        name: str,
        handler: Any,
        before: Optional[List[str]] = None,
        after: Optional[List[str]] = None,
    ) -> None:
        """Subscribe to a hook. Ordering hints are stored as given."""
        self.rpc_hook[name] = as_command(handler)
        self.hook_info[name] = RPCHookInfo(
            name=name,
            before=hook_hints(before),
            after=hook_hints(after),
        )

    def add_notification(self, name: str, handler: Any) -> None:
        """Subscribe to a notification topic"""
        self.rpc_notification[name] = as_command(handler)

    def install_builtin(self, name: str, handler: RPCCommand) -> None:
        """Install a runtime-owned method, dropping any user registration"""
        if self.rpc_info.pop(name, None) is not None:
            logger.warning("Dropping user registration of reserved method '%s'", name)
        self.rpc_method[name] = handler

    def method(self, name: str) -> Optional[RPCCommand]:
        return self.rpc_method.get(name)

    def hook(self, name: str) -> Optional[RPCCommand]:
        return self.rpc_hook.get(name)

    def notification(self, name: str) -> Optional[RPCCommand]:
        return self.rpc_notification.get(name)

    def method_infos(self) -> List[RPCMethodInfo]:
        """Metadata of user methods, excluding built-ins"""
        return [info for name, info in self.rpc_info.items() if name not in RESERVED_METHODS]

    def hook_infos(self) -> List[RPCHookInfo]:
        return list(self.hook_info.values())

    def notification_names(self) -> List[str]:
        return list(self.rpc_notification.keys())
