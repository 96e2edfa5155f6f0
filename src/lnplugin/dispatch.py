"""Dispatch engine

Looks up the handler for a request and invokes it against the plugin.
Methods and hooks both answer the host, so a request name is looked up in the
method table first and in the hook table second. Notifications never answer.

No validation of `params` happens here; each handler interprets its own.
"""

import logging
from typing import Any, TYPE_CHECKING

from lnplugin.errors import MethodNotFoundError

if TYPE_CHECKING:
    from lnplugin.plugin import Plugin


logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes requests and notifications to the plugin's handlers"""

    def __init__(self, plugin: "Plugin"):
        self.plugin = plugin

    def dispatch(self, name: str, params: Any) -> Any:
        """Invoke the method or hook `name` and return its result unexamined.

        Raises:
            MethodNotFoundError: no method or hook registered under `name`
            PluginError: raised by the handler itself
        """
        registry = self.plugin.registry
        command = registry.method(name)
        if command is None:
            command = registry.hook(name)
        if command is None:
            raise MethodNotFoundError(name)
        return command.call(self.plugin, params)

    def notify(self, name: str, params: Any) -> bool:
        """Deliver a notification. Returns False if nobody subscribed."""
        command = self.plugin.registry.notification(name)
        if command is None:
            logger.warning("No handler for notification '%s'", name)
            return False
        command.call(self.plugin, params)
        return True
