"""Forwarding Python logging to the host's log

The host collects plugin logs through `log` notifications on the plugin's
stdout. `HostLogHandler` turns ordinary `logging` records into those
notifications, so plugin code can use a regular logger.
"""

import logging
from typing import TYPE_CHECKING

from lnplugin.types import LogLevel

if TYPE_CHECKING:
    from lnplugin.plugin import Plugin


def level_for_record(levelno: int) -> LogLevel:
    """Map a Python logging level to the host's level names"""
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class HostLogHandler(logging.Handler):
    """logging.Handler that writes records as host log notifications"""

    def __init__(self, plugin: "Plugin", level: int = logging.NOTSET):
        super().__init__(level)
        self.plugin = plugin

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self.plugin.log(level_for_record(record.levelno), message)
        except Exception:
            self.handleError(record)
