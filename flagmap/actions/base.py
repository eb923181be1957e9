"""Base classes and decorators for built-in actions.

This module provides:
- BuiltinAction: base class for every built-in key handler
- @action: decorator registering an action with its key names
- Action registry for auto-discovery
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from ..errors import ActionFailure, UnresolvedAction
from ..host import Host
from ..mapper import settle

# Global action registry - actions register themselves at import time
_ACTION_REGISTRY: list[type["BuiltinAction"]] = []


def action(
    names: list[str] | str,
    requires: list[str] | str | None = None,
    aliases: list[str] | None = None,
):
    """Decorator to register a built-in action with metadata.

    Args:
        names: key name(s) the action is mapped under
        requires: host capabilities which must exist when the key is
                  dispatched (defaults to the first name)
        aliases: extra keys aliased onto the first name

    Example:
        @action(names="get")
        @dataclass
        class ActionGet(BuiltinAction):
            ...
    """
    if isinstance(names, str):
        names = [names]

    if requires is None:
        requires = [names[0]]
    elif isinstance(requires, str):
        requires = [requires]

    def decorator(cls):
        cls.__action_names__ = names
        cls.__action_requires__ = requires
        cls.__action_aliases__ = aliases or []
        _ACTION_REGISTRY.append(cls)
        return cls

    return decorator


@dataclass
class BuiltinAction:
    """Common base class for all built-in actions.

    Instances are plain callables taking ``(key, value)`` so they register
    with a mapper like any user function.

    All actions must:
    - Inherit from this class
    - Be decorated with @action() to register
    - Implement async run()
    """

    host: Host

    # name the owning mapper is bound under (for namespaced lookups)
    binding: str = "config"

    # report a missing capability as UnresolvedAction instead of skipping
    strict: bool = False

    def __post_init__(self):
        assert self.host is not None

    def missing(self) -> list[str]:
        """Required capabilities the host doesn't currently offer."""
        return [
            cap for cap in self.__action_requires__ if not self.host.has_method(cap)
        ]

    async def __call__(self, key: str, value: Any) -> None:
        if missing := self.missing():
            if self.strict:
                raise UnresolvedAction(
                    f"host '{self.host.name}' has no {', '.join(missing)} for '{key}'",
                    key=key,
                )

            logger.debug(
                "[{} :: {}] Host has no {}, skipping", self.host.name, key, missing
            )
            return

        await self.run(key, value)

    async def run(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def call(self, capability: str, *args, **kwargs) -> Awaitable[Any]:
        """Invoke a host capability, awaiting it if it is asynchronous."""
        fn = self.host.method(capability)
        if fn is None:
            raise ActionFailure(
                capability, f"host '{self.host.name}' has no '{capability}' capability"
            )

        return settle(fn(*args, **kwargs))
