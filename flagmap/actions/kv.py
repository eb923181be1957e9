"""Actions: set, get, has, del

Work on any host exposing the matching capability, so the same classes
back both the app mapper and the store mapper.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from .base import BuiltinAction, action
from .utils import is_force, split_list


@action(names="set")
@dataclass
class ActionSet(BuiltinAction):
    """Set each ``key: value`` pair of an object, or a single bare key."""

    async def run(self, key: str, value: Any) -> None:
        if isinstance(value, Mapping):
            for k, v in value.items():
                await self.call("set", k, v)

            return

        await self.call("set", value)


@action(names="get")
@dataclass
class ActionGet(BuiltinAction):
    """Read one key or a comma list of keys, one ``get`` per key."""

    async def run(self, key: str, value: Any) -> None:
        for k in split_list(value):
            await self.call("get", k)


@action(names="has")
@dataclass
class ActionHas(BuiltinAction):
    async def run(self, key: str, value: Any) -> None:
        for k in split_list(value):
            await self.call("has", k)


@action(names="del")
@dataclass
class ActionDel(BuiltinAction):
    """Delete one key or a comma list of keys.

    ``{"force": true}`` clears everything instead.
    """

    async def run(self, key: str, value: Any) -> None:
        if is_force(value):
            logger.info("[{} :: {}] Force delete requested", self.host.name, key)
            await self.call("del", force=True)
            return

        if isinstance(value, Mapping):
            # {"force": false} or similar directives without keys
            value = [k for k in value if k != "force"]

        for k in split_list(value):
            await self.call("del", k)
