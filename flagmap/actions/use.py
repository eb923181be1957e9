"""Actions: cwd, use

``cwd`` always runs before ``use`` within one input (the mapper hoists it),
so relative plugin references resolve against the new directory.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from ..errors import PluginLoadError
from ..loader import load_plugin
from .base import BuiltinAction, action
from .utils import split_list


@action(names="cwd", requires=["set", "use"])
@dataclass
class ActionCwd(BuiltinAction):
    """Record the working directory used to resolve plugin references."""

    async def run(self, key: str, value: Any) -> None:
        if self.host.has_method("option"):
            await self.call("option", "cwd", value)
        else:
            await self.call("set", "options.cwd", value)


@action(names="use")
@dataclass
class ActionUse(BuiltinAction):
    """Load and apply one plugin reference, a comma list, or a list of them."""

    async def run(self, key: str, value: Any) -> None:
        lookup = getattr(self.host, "lookup", None)
        cwd = lookup("options.cwd") if lookup else None

        for ref in split_list(value):
            try:
                fn = load_plugin(ref, cwd)
            except PluginLoadError as e:
                e.key = key
                raise

            logger.info("[{} :: {}] Using plugin: {}", self.host.name, key, ref)
            await self.call("use", fn)
