"""Attach mappers to hosts.

``bind()`` gives a host its own mapper (``app.config``) preloaded with every
built-in action. A host carrying a ``store`` sub-host gets a second,
independent mapper on the store (``app.store.config``); a store attached
later is bound the first time a key is dispatched into it.
"""

from loguru import logger

from .actions import bootstrap
from .helpers import envflag
from .host import Host, is_host
from .mapper import Mapper


def bind(
    host: Host,
    name: str = "config",
    strict: bool | None = None,
    fail_fast: bool | None = None,
) -> Mapper:
    """Create, populate and register a mapper on ``host``.

    Binding an already bound host returns the existing mapper.
    ``strict`` and ``fail_fast`` default to the FLAGMAP_STRICT and
    FLAGMAP_FAIL_FAST environment flags.
    """
    if isinstance(existing := host.method(name), Mapper):
        logger.debug("[{}] Already bound as '{}'", host.name, name)
        return existing

    if strict is None:
        strict = envflag("FLAGMAP_STRICT")

    if fail_fast is None:
        fail_fast = envflag("FLAGMAP_FAIL_FAST")

    mapper = Mapper(host, name, strict=strict, fail_fast=fail_fast)
    bootstrap(mapper)
    host.define(name, mapper)

    store = host.method("store")
    if is_host(store):
        bind(store, name, strict=strict, fail_fast=fail_fast)
    else:
        logger.debug("[{}] No store attached, skipping store mapper", host.name)

    return mapper


def config(name: str = "config", strict: bool | None = None, fail_fast: bool | None = None):
    """Plugin form of ``bind()``: ``app.use(config())``."""

    def plugin(app):
        bind(app, name, strict=strict, fail_fast=fail_fast)

    plugin.__name__ = name
    return plugin
