"""Action: store

Namespaced dispatch: the value is an object of keys processed by the
store's own mapper (``app.store.config``). A store attached after the app
was bound gets its mapper on first use.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import ActionFailure
from ..mapper import Mapper
from .base import BuiltinAction, action


@action(names="store")
@dataclass
class ActionStore(BuiltinAction):
    async def run(self, key: str, value: Any) -> None:
        if not isinstance(value, Mapping):
            raise ActionFailure(
                key, f"expected an object of keys for '{key}', got {type(value).__name__}"
            )

        parent = self.host.method(self.binding)
        sub = (
            parent.namespace(self.host.method("store"))
            if isinstance(parent, Mapper)
            else None
        )

        if sub is None:
            raise ActionFailure(key, f"store can't be dispatched into as '{self.binding}'")

        await sub.process(value)
