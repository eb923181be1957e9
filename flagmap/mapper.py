"""Key-to-action dispatcher.

A ``Mapper`` owns one dispatch declaration (an alias table plus an action
registry) for one host. ``process()`` walks an input mapping and routes every
key to its action:

    app.config.alias("foo", "set").map("bar", lambda key, val: ...)
    await app.config.process({"foo": {"a": "b"}, "bar": 3})

Keys with no registered action fall back to a host capability of the same
name, and keys nobody understands are skipped so several independently
configured mappers can share one input object.
"""

import inspect
import weakref
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from loguru import logger

from .aliases import AliasTable
from .errors import (
    ActionFailure,
    AliasCycle,
    FlagmapError,
    InvalidArgument,
    UnresolvedAction,
)
from .host import Host, is_host


@dataclass(frozen=True, slots=True)
class MethodAction:
    """Call the host capability ``name``, looked up at dispatch time."""

    name: str


@dataclass(frozen=True, slots=True)
class CallableAction:
    """Call ``fn(key, value)`` directly."""

    fn: Callable[[str, Any], Any]


@dataclass(frozen=True, slots=True)
class NestedAction:
    """Dispatch the (mapping) value through another mapper."""

    mapper: "Mapper"


Action = MethodAction | CallableAction | NestedAction

Done = Callable[[FlagmapError | None], Any]


async def settle(result: Any) -> Any:
    """Await ``result`` if the action handed back something awaitable."""
    if inspect.isawaitable(result):
        return await result

    return result


class Mapper:
    """Dispatch declaration + dispatcher bound to one host.

    Args:
        host: object whose capabilities back ``MethodAction`` lookups. Only a
              weak reference is kept; the host owns the mapper, not the
              other way around.
        name: capability name the mapper is registered under on its host.
              Namespaced hosts exposing a mapper under the same name are
              dispatched into recursively.
        strict: report keys with no resolvable action as UnresolvedAction
                instead of skipping them.
        fail_fast: stop dispatching remaining keys after the first failure.
    """

    def __init__(
        self,
        host: Host,
        name: str = "config",
        strict: bool = False,
        fail_fast: bool = False,
    ):
        self._host = weakref.ref(host)
        self.name = name
        self.strict = strict
        self.fail_fast = fail_fast
        self.aliases = AliasTable()
        self._actions: dict[str, Action] = {}

    def __repr__(self) -> str:
        host = self._host()
        return (
            f"Mapper(host={host.name if host else None!r}, "
            f"actions={sorted(self._actions)}, aliases={dict(self.aliases.aliases)})"
        )

    @property
    def host(self) -> Host:
        if (host := self._host()) is None:
            raise ReferenceError(f"host for mapper '{self.name}' no longer exists")

        return host

    @property
    def actions(self) -> Mapping[str, Action]:
        """Read-only view of the registered actions."""
        return MappingProxyType(self._actions)

    # ------------------------------------------------------------------
    # declaration
    # ------------------------------------------------------------------

    def __call__(self, key: Any, action: Any = None) -> "Mapper":
        """Shorthand for ``map()``: ``app.config({"foo": "set"})``."""
        if isinstance(key, (str, Mapping)):
            return self.map(key, action)

        raise InvalidArgument("expected key to be a string or object")

    def map(self, key: str | Mapping[str, Any], action: Any = None) -> "Mapper":
        """Register ``action`` for ``key``, or every pair of a mapping.

        ``action`` may be a capability name, a callable taking
        ``(key, value)``, another ``Mapper``, or a mapping which becomes a
        nested mapper on the same host. ``None`` maps ``key`` onto the host
        capability of the same name.
        """
        if isinstance(key, Mapping):
            if action is not None:
                raise InvalidArgument("expected no action when mapping an object")

            for k, v in key.items():
                self.map(k, v)

            return self

        if not (isinstance(key, str) and key):
            raise InvalidArgument("expected key to be a string or object")

        self._actions[key] = self._coerce(key, action)
        logger.trace("[{} :: map] {} -> {}", self.name, key, self._actions[key])
        return self

    def unmap(self, key: str) -> "Mapper":
        self._actions.pop(key, None)
        return self

    def alias(self, source: str, target: str) -> "Mapper":
        self.aliases.alias(source, target)
        return self

    def _coerce(self, key: str, action: Any) -> Action:
        match action:
            case None:
                return MethodAction(key)
            case str():
                return MethodAction(action)
            case MethodAction() | CallableAction() | NestedAction():
                return action
            case Mapper():
                return NestedAction(action)
            case Mapping():
                child = Mapper(
                    self.host, self.name, strict=self.strict, fail_fast=self.fail_fast
                )
                return NestedAction(child.map(action))
            case _ if callable(action):
                return CallableAction(action)

        raise InvalidArgument(
            f"expected action for '{key}' to be a string, function or object"
        )

    # ------------------------------------------------------------------
    # resolution
    # ------------------------------------------------------------------

    def resolve(self, key: str) -> tuple[str, Action | None]:
        """Return ``(target, action)`` for ``key``.

        ``target`` is the alias-resolved key. ``action`` is None when neither
        the registry nor the host knows about ``target``.
        """
        target = self.aliases.resolve(key)
        if (found := self._actions.get(target)) is not None:
            return target, found

        if self.host.has_method(target):
            return target, MethodAction(target)

        return target, None

    def namespace(self, member: Any) -> "Mapper | None":
        """Return the mapper to dispatch into for ``member``, if any.

        A sub-host with no mapper under this mapper's name yet (a store
        attached after binding) gets one bound on first use.
        """
        if isinstance(member, Mapper):
            return member

        if not is_host(member):
            return None

        if isinstance(sub := member.method(self.name), Mapper):
            return sub

        # binding imports this module
        from .binding import bind

        logger.debug("[{}] Binding late sub-host: {}", self.name, member.name)
        return bind(member, self.name, strict=self.strict, fail_fast=self.fail_fast)

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------

    async def process(self, argv: Mapping[str, Any], done: Done | None = None) -> None:
        """Dispatch every key of ``argv``.

        Completion is reported exactly once: through ``done(error_or_None)``
        when a callback is given, otherwise by raising the first error after
        all keys have been tried. Keys after a failure still run unless
        ``fail_fast`` is set; only the first failure is reported.
        """
        if not isinstance(argv, Mapping):
            raise InvalidArgument(
                f"expected an object of keys to process, got {type(argv).__name__}"
            )

        error = await self._dispatch_all(argv)

        if done is not None:
            await settle(done(error))
            return

        if error is not None:
            raise error

    async def _dispatch_all(self, argv: Mapping[str, Any]) -> FlagmapError | None:
        first: FlagmapError | None = None

        for key, value in self._ordered(argv.items()):
            try:
                await self.dispatch(key, value)
                continue
            except FlagmapError as e:
                err = e
            except Exception as e:
                err = ActionFailure(key, f"action for '{key}' failed: {e}")
                err.__cause__ = e

            logger.warning("[{} :: {}] {}", self.name, key, err)
            if first is None:
                first = err

            if self.fail_fast:
                logger.warning(
                    "[{}] Stopping after first failure (fail_fast enabled)", self.name
                )
                break

        return first

    def _ordered(self, items: Iterable[tuple[str, Any]]) -> list[tuple[str, Any]]:
        # cwd runs before everything else so relative `use` references see it
        def notcwd(item: tuple[str, Any]) -> bool:
            try:
                return self.aliases.resolve(item[0]) != "cwd"
            except AliasCycle:
                return True

        return sorted(items, key=notcwd)

    async def dispatch(self, key: str, value: Any) -> None:
        """Resolve and invoke the action for a single key."""
        target, action = self.resolve(key)

        if action is None:
            if self.strict:
                raise UnresolvedAction(f"no action found for '{key}'", key=key)

            logger.debug("[{} :: {}] No action found, skipping", self.name, key)
            return

        if target != key:
            logger.debug("[{} :: {}] Aliased to: {}", self.name, key, target)

        await self.invoke(target, action, value)

    async def invoke(self, key: str, action: Action, value: Any) -> None:
        match action:
            case CallableAction(fn):
                await settle(fn(key, value))
            case NestedAction(mapper):
                await self._nested(key, mapper, value)
            case MethodAction(name):
                await self._method(key, name, value)

    async def _method(self, key: str, name: str, value: Any) -> None:
        member = self.host.method(name)
        if member is None:
            if self.strict:
                raise UnresolvedAction(
                    f"no host capability '{name}' for '{key}'", key=key
                )

            logger.debug("[{} :: {}] Host has no '{}', skipping", self.name, key, name)
            return

        if (sub := self.namespace(member)) is not None:
            await self._nested(key, sub, value)
            return

        if not callable(member):
            raise ActionFailure(key, f"host capability '{name}' is not callable")

        if isinstance(value, Mapping):
            for k, v in value.items():
                await settle(member(k, v))
        else:
            await settle(member(value))

    async def _nested(self, key: str, mapper: "Mapper", value: Any) -> None:
        if not isinstance(value, Mapping):
            raise ActionFailure(
                key, f"expected an object of keys for '{key}', got {type(value).__name__}"
            )

        logger.debug("[{} :: {}] Dispatching into nested mapper", self.name, key)
        await mapper.process(value)

