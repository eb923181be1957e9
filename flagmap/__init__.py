"""Declarative key-to-action dispatch for flag-style configuration objects."""

from .aliases import AliasTable
from .app import App
from .binding import bind, config
from .errors import (
    ActionFailure,
    AliasCycle,
    FlagmapError,
    InvalidArgument,
    PluginLoadError,
    UnresolvedAction,
)
from .events import Emitter
from .host import Host
from .mapper import CallableAction, Mapper, MethodAction, NestedAction
from .plugins import Store, data, options, store

__all__ = [
    "ActionFailure",
    "AliasCycle",
    "AliasTable",
    "App",
    "CallableAction",
    "Emitter",
    "FlagmapError",
    "Host",
    "InvalidArgument",
    "Mapper",
    "MethodAction",
    "NestedAction",
    "PluginLoadError",
    "Store",
    "UnresolvedAction",
    "bind",
    "config",
    "data",
    "options",
    "store",
]
