"""Host objects: an explicit capability registry plus notification channels.

Plugins extend a host after construction by calling ``define()``. The
dispatcher never reflects over arbitrary attributes; it only asks the
registry whether a capability exists at the moment a key is dispatched.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .events import Emitter


@dataclass(eq=False)
class Host:
    """Base class for anything a ``Mapper`` can be bound to."""

    # human readable name for log lines
    name: str = "host"

    # capability name -> callable or namespaced sub-host
    methods: dict[str, Any] = field(default_factory=dict)

    emitter: Emitter = field(default_factory=Emitter)

    def define(self, name: str, member: Any) -> "Host":
        """Attach a capability under ``name``, replacing any previous one."""
        if name in self.methods:
            logger.debug("[{}] Redefining capability: {}", self.name, name)

        self.methods[name] = member
        return self

    def method(self, name: str) -> Any | None:
        return self.methods.get(name)

    def has_method(self, name: str) -> bool:
        return name in self.methods

    def __getattr__(self, name: str) -> Any:
        # only reached when regular attribute lookup fails, so defined
        # capabilities are reachable as attributes (app.config, app.store, ...)
        methods = self.__dict__.get("methods")
        if methods is not None and name in methods:
            return methods[name]

        raise AttributeError(f"{type(self).__name__!r} has no attribute {name!r}")

    # notification sink shortcuts
    def on(self, event: str, listener: Callable[..., Any]) -> "Host":
        self.emitter.on(event, listener)
        return self

    def once(self, event: str, listener: Callable[..., Any]) -> "Host":
        self.emitter.once(event, listener)
        return self

    def off(self, event: str, listener: Callable[..., Any] | None = None) -> "Host":
        self.emitter.off(event, listener)
        return self

    def emit(self, event: str, *args: Any) -> None:
        self.emitter.emit(event, *args)


def is_host(obj: Any) -> bool:
    return isinstance(obj, Host)
