"""Plugin data model

Value types shared by the registry, the manifest builder and the init
handshake. Option and info records are frozen dataclasses so identical
declarations compare (and hash) equal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LogLevel(Enum):
    """Log levels understood by the host"""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, s: str) -> Optional["LogLevel"]:
        """Parse a level name, returns None if unknown"""
        s = s.lower()
        if s == "warning":
            return cls.WARN
        try:
            return cls(s)
        except ValueError:
            return None


@dataclass(frozen=True)
class RpcOption:
    """A command line option the plugin declares to the host"""
    name: str
    opt_type: str
    default: Optional[Any] = None
    description: str = ""
    deprecated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "name": self.name,
            "type": self.opt_type,
        }
        if self.default is not None:
            result["default"] = self.default
        result["description"] = self.description
        result["deprecated"] = self.deprecated
        return result


@dataclass(frozen=True)
class RPCMethodInfo:
    """Descriptive metadata of an RPC method, advertised in the manifest"""
    name: str
    usage: str
    description: str
    long_description: Optional[str] = None
    deprecated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "name": self.name,
            "usage": self.usage,
            "description": self.description,
        }
        if self.long_description is not None:
            result["long_description"] = self.long_description
        result["deprecated"] = self.deprecated
        return result


@dataclass(frozen=True)
class RPCHookInfo:
    """A hook subscription with optional ordering hints.

    The hints name other plugins' hooks and are passed to the host verbatim;
    the host decides the final ordering.
    """
    name: str
    before: Optional[tuple] = None
    after: Optional[tuple] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.before is not None:
            result["before"] = list(self.before)
        if self.after is not None:
            result["after"] = list(self.after)
        return result


@dataclass
class Configuration:
    """Host configuration received in the `init` request"""
    lightning_dir: Optional[str] = None
    rpc_file: Optional[str] = None
    network: Optional[str] = None
    startup: bool = True
    feature_set: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    KNOWN_KEYS = ("lightning-dir", "rpc-file", "network", "startup", "feature_set")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Configuration":
        """Parse the `configuration` object of an init request.

        Unknown keys are kept in `extra` so newer hosts do not break older
        plugins.
        """
        return cls(
            lightning_dir=data.get("lightning-dir"),
            rpc_file=data.get("rpc-file"),
            network=data.get("network"),
            startup=bool(data.get("startup", True)),
            feature_set=dict(data.get("feature_set") or {}),
            extra={k: v for k, v in data.items() if k not in cls.KNOWN_KEYS},
        )

    def rpc_path(self) -> Optional[str]:
        """Full path of the host's RPC socket, if both parts are known"""
        if self.lightning_dir is None or self.rpc_file is None:
            return None
        if self.rpc_file.startswith("/"):
            return self.rpc_file
        return f"{self.lightning_dir.rstrip('/')}/{self.rpc_file}"


def hook_hints(names: Optional[List[str]]) -> Optional[tuple]:
    """Freeze an ordering hint list so hook info stays hashable"""
    if names is None:
        return None
    return tuple(names)
