"""Actions: option, data"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .base import BuiltinAction, action


@action(names="option", aliases=["options"])
@dataclass
class ActionOption(BuiltinAction):
    """Set each ``key: value`` pair as an option."""

    async def run(self, key: str, value: Any) -> None:
        if isinstance(value, Mapping):
            for k, v in value.items():
                await self.call("option", k, v)

            return

        await self.call("option", value)


@action(names="data")
@dataclass
class ActionData(BuiltinAction):
    """Forward the whole value to the host's ``data`` capability."""

    async def run(self, key: str, value: Any) -> None:
        await self.call("data", value)
