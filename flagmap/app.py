"""The host application object.

``App`` keeps a tree of dotted-path values (``app.set("a.b", 1)``) and
announces every change on its notification channels. Plugins extend it with
``app.use(plugin)`` and register new capabilities with ``app.define()``.
"""

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .helpers import delpath, getpath, haspath, setpath
from .host import Host

Plugin = Callable[["App"], Any]


@dataclass(eq=False)
class App(Host):
    name: str = "app"

    # global state values; dotted keys address nested dicts
    cache: dict[str, Any] = field(default_factory=dict)

    # names of plugins which already attached themselves
    registered: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.define("set", self.set)
        self.define("get", self.get)
        self.define("has", self.has)
        self.define("del", self.delete)
        self.define("use", self.use)

    def is_registered(self, name: str) -> bool:
        """Return True if ``name`` was seen before, marking it seen otherwise.

        Plugins call this first so attaching twice is a no-op.
        """
        if name in self.registered:
            return True

        self.registered.add(name)
        return False

    def lookup(self, key: str, default: Any = None) -> Any:
        """Read a value without emitting a notification."""
        return getpath(self.cache, key, default)

    def set(self, key: str | Mapping[str, Any], val: Any = None) -> "App":
        if isinstance(key, Mapping):
            for k, v in key.items():
                self.set(k, v)

            return self

        setpath(self.cache, key, val)
        self.emit("set", key, val)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        val = getpath(self.cache, key, default)
        self.emit("get", key, val)
        return val

    def has(self, key: str) -> bool:
        found = haspath(self.cache, key)
        self.emit("has", key, found)
        return found

    def delete(self, key: str | list[str] | None = None, *, force: bool = False) -> "App":
        """Remove ``key`` (or each of a list of keys).

        ``force=True`` clears every top-level key, one ``del`` per key.
        Registered as the ``del`` capability.
        """
        if force:
            for k in list(self.cache):
                self.cache.pop(k, None)
                self.emit("del", k)

            return self

        if isinstance(key, (list, tuple)):
            for k in key:
                self.delete(k)

            return self

        if key is None:
            return self

        delpath(self.cache, key)
        self.emit("del", key)
        return self

    def use(self, plugin: Plugin) -> Any:
        """Run ``plugin(self)`` and emit ``use``.

        When the plugin is a coroutine function the returned awaitable must be
        awaited; ``use`` is emitted once it completes.
        """
        if not callable(plugin):
            raise TypeError(f"expected plugin to be callable, got {type(plugin).__name__}")

        name = getattr(plugin, "__name__", repr(plugin))
        result = plugin(self)

        if inspect.isawaitable(result):

            async def finish() -> "App":
                await result
                logger.debug("[{}] Used plugin: {}", self.name, name)
                self.emit("use", name)
                return self

            return finish()

        logger.debug("[{}] Used plugin: {}", self.name, name)
        self.emit("use", name)
        return self

