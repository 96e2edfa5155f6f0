"""Manifest builder

The manifest is the answer to the host's `getmanifest` request: everything
the plugin offers (options, RPC methods, hook subscriptions, notification
subscriptions) and whether the host may start and stop it at runtime.

Field names are a contract with the host and must not change.
"""

import json
from typing import Any, Dict, List, TYPE_CHECKING

from lnplugin.types import RPCHookInfo, RPCMethodInfo, RpcOption

if TYPE_CHECKING:
    from lnplugin.plugin import Plugin


class Manifest:
    """Capability announcement sent to the host during startup"""

    def __init__(
        self,
        options: List[RpcOption],
        rpcmethods: List[RPCMethodInfo],
        hooks: List[RPCHookInfo],
        notifications: List[str],
        dynamic: bool,
    ):
        self.options = options
        self.rpcmethods = rpcmethods
        self.hooks = hooks
        self.notifications = notifications
        self.dynamic = dynamic

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict"""
        return {
            "options": [opt.to_dict() for opt in self.options],
            "rpcmethods": [info.to_dict() for info in self.rpcmethods],
            "hooks": [info.to_dict() for info in self.hooks],
            "notifications": list(self.notifications),
            "dynamic": self.dynamic,
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        """Parse from dict"""
        return cls(
            options=[
                RpcOption(
                    name=o["name"],
                    opt_type=o["type"],
                    default=o.get("default"),
                    description=o.get("description", ""),
                    deprecated=o.get("deprecated", False),
                )
                for o in data["options"]
            ],
            rpcmethods=[
                RPCMethodInfo(
                    name=m["name"],
                    usage=m["usage"],
                    description=m["description"],
                    long_description=m.get("long_description"),
                    deprecated=m.get("deprecated", False),
                )
                for m in data["rpcmethods"]
            ],
            hooks=[
                RPCHookInfo(
                    name=h["name"],
                    before=tuple(h["before"]) if "before" in h else None,
                    after=tuple(h["after"]) if "after" in h else None,
                )
                for h in data["hooks"]
            ],
            notifications=list(data["notifications"]),
            dynamic=data["dynamic"],
        )

    @classmethod
    def from_json(cls, json_str: str) -> "Manifest":
        """Parse from JSON string"""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def for_plugin(cls, plugin: "Plugin") -> "Manifest":
        """Snapshot the plugin's current registrations"""
        registry = plugin.registry
        return cls(
            options=list(plugin.options.values()),
            rpcmethods=registry.method_infos(),
            hooks=registry.hook_infos(),
            notifications=registry.notification_names(),
            dynamic=plugin.dynamic,
        )


def build_manifest(plugin: "Plugin") -> Dict[str, Any]:
    """Build the `getmanifest` result for a plugin"""
    return Manifest.for_plugin(plugin).to_dict()
