"""Plugin: persistent key/value store backed by ``diskcache``.

The store is a host of its own: it has its own notification channels and,
once the config plugin runs, its own independent mapper (``app.store.config``).
"""

import os
import pathlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import diskcache  # type: ignore
from loguru import logger

from ..host import Host


def default_directory() -> pathlib.Path:
    return pathlib.Path(os.getenv("FLAGMAP_STORE_DIR", "~/.cache/flagmap")).expanduser()


@dataclass(eq=False)
class Store(Host):
    name: str = field(default_factory=lambda: os.getenv("FLAGMAP_STORE", "flagmap"))

    # parent directory for the cache; defaults to FLAGMAP_STORE_DIR
    directory: pathlib.Path | str | None = None

    cache: diskcache.Cache = field(init=False)

    def __post_init__(self) -> None:
        base = pathlib.Path(self.directory) if self.directory else default_directory()
        self.path = base / self.name
        self.cache = diskcache.Cache(str(self.path))
        logger.debug("[store {}] Opened at: {}", self.name, self.path)

        self.define("set", self.set)
        self.define("get", self.get)
        self.define("has", self.has)
        self.define("del", self.delete)

    @property
    def data(self) -> dict[str, Any]:
        """Snapshot of everything currently stored."""
        return {key: self.cache[key] for key in self.cache}

    def keys(self) -> list[str]:
        return list(self.cache)

    def set(self, key: str | Mapping[str, Any], val: Any = None) -> "Store":
        if isinstance(key, Mapping):
            for k, v in key.items():
                self.set(k, v)

            return self

        self.cache.set(key, val)
        self.emit("set", key, val)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        val = self.cache.get(key, default)
        self.emit("get", key, val)
        return val

    def has(self, key: str) -> bool:
        found = key in self.cache
        self.emit("has", key, found)
        return found

    def delete(self, key: str | list[str] | None = None, *, force: bool = False) -> "Store":
        """Delete ``key`` (or a list of keys); ``force=True`` clears the store."""
        if force:
            for k in list(self.cache):
                self.cache.delete(k)
                self.emit("del", k)

            logger.info("[store {}] Cleared", self.name)
            return self

        if isinstance(key, (list, tuple)):
            for k in key:
                self.delete(k)

            return self

        if key is None:
            return self

        self.cache.delete(key)
        self.emit("del", key)
        return self

    def close(self) -> None:
        self.cache.close()


def store(name: str | None = None, directory: pathlib.Path | str | None = None):
    def plugin(app):
        if app.is_registered("store"):
            return

        kwargs: dict[str, Any] = dict(directory=directory)
        if name:
            kwargs["name"] = name

        app.define("store", Store(**kwargs))

    return plugin
