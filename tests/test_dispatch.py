"""Tests for the dispatch engine"""

import pytest

from lnplugin import Plugin
from lnplugin.dispatch import Dispatcher
from lnplugin.errors import METHOD_NOT_FOUND, MethodNotFoundError, PluginError


# TEST201: Test dispatch invokes the handler with the plugin and raw params
def test_dispatch_passes_plugin_and_params():
    seen = []

    def handler(plugin, params):
        seen.append((plugin, params))
        return {"ok": True}

    plugin = Plugin({"n": 0})
    plugin.add_rpc_method("foo", "", "", handler)

    result = Dispatcher(plugin).dispatch("foo", {"a": [1, 2]})

    assert result == {"ok": True}
    assert seen == [(plugin, {"a": [1, 2]})]


# TEST202: Test handlers mutate plugin state across calls
def test_handler_mutates_state():
    def incr(plugin, params):
        plugin.state["n"] += params["by"]
        return plugin.state["n"]

    plugin = Plugin({"n": 0})
    plugin.add_rpc_method("incr", "by", "", incr)
    dispatcher = Dispatcher(plugin)

    assert dispatcher.dispatch("incr", {"by": 2}) == 2
    assert dispatcher.dispatch("incr", {"by": 3}) == 5
    assert plugin.state == {"n": 5}


# TEST203: Test unknown method raises MethodNotFoundError naming the method
def test_unknown_method():
    dispatcher = Dispatcher(Plugin(None))

    with pytest.raises(MethodNotFoundError) as exc_info:
        dispatcher.dispatch("nope", {})

    err = exc_info.value
    assert err.code == METHOD_NOT_FOUND
    assert err.method == "nope"
    assert "nope" in err.message
    assert err.to_dict() == {"code": METHOD_NOT_FOUND, "message": "Unknown method 'nope'", "data": {"method": "nope"}}


# TEST204: Test hooks are dispatched like methods
def test_hook_dispatch():
    plugin = Plugin(None)
    plugin.register_hook("peer_connected", None, None, lambda p, params: {"result": "continue"})

    assert Dispatcher(plugin).dispatch("peer_connected", {"peer": {}}) == {"result": "continue"}


# TEST205: Test method table wins over hook table for the same name
def test_method_before_hook():
    plugin = Plugin(None)
    plugin.register_hook("shared", None, None, lambda p, params: "hook")
    plugin.add_rpc_method("shared", "", "", lambda p, params: "method")

    assert Dispatcher(plugin).dispatch("shared", {}) == "method"


# TEST206: Test handler PluginError propagates unchanged
def test_handler_error_propagates():
    def failing(plugin, params):
        raise PluginError("no funds", code=-1, data={"needed": 10})

    plugin = Plugin(None)
    plugin.add_rpc_method("pay", "", "", failing)

    with pytest.raises(PluginError) as exc_info:
        Dispatcher(plugin).dispatch("pay", {})
    assert exc_info.value.code == -1
    assert exc_info.value.data == {"needed": 10}


# TEST207: Test a handler can register new methods while it runs
def test_handler_registers_method():
    def register(plugin, params):
        plugin.add_rpc_method("late", "", "", lambda p, params: "late result")
        return {}

    plugin = Plugin(None)
    plugin.add_rpc_method("register", "", "", register)
    dispatcher = Dispatcher(plugin)

    dispatcher.dispatch("register", {})
    assert dispatcher.dispatch("late", {}) == "late result"


# TEST208: Test notify reports unsubscribed topics without raising
def test_notify():
    received = []
    plugin = Plugin(None)
    plugin.register_notification("connect", lambda p, params: received.append(params))
    dispatcher = Dispatcher(plugin)

    assert dispatcher.notify("connect", {"id": "02ab"}) is True
    assert dispatcher.notify("disconnect", {}) is False
    assert received == [{"id": "02ab"}]


# TEST209: Test notifications are not reachable through dispatch
def test_notification_not_a_method():
    plugin = Plugin(None)
    plugin.register_notification("connect", lambda p, params: None)

    with pytest.raises(MethodNotFoundError):
        Dispatcher(plugin).dispatch("connect", {})
