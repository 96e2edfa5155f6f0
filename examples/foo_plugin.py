#!/usr/bin/env python3
"""Minimal plugin: one RPC method, one option, one notification.

Point the host at this file (e.g. `lightningd --plugin=examples/foo_plugin.py`).
"""

from lnplugin import Plugin, LogLevel


def foo(plugin, request):
    plugin.state["calls"] += 1
    return {
        "is_dynamic": plugin.dynamic,
        "rpc_request": request,
        "calls": plugin.state["calls"],
        "prefix": plugin.get_opt("foo-prefix"),
    }


def on_init(plugin, params):
    plugin.log(LogLevel.INFO, f"foo plugin started on {plugin.configuration.network}")


def on_shutdown(plugin, params):
    plugin.stop()


def main():
    plugin = Plugin({"calls": 0}, dynamic=True)
    plugin.add_opt("foo-prefix", "string", "foo", "Prefix reported by the foo method")
    plugin.add_rpc_method("foo", "", "This is a simple and short description", foo)
    plugin.register_notification("shutdown", on_shutdown)
    plugin.on_init(on_init)
    plugin.start()


if __name__ == "__main__":
    main()
