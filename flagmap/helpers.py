"""Small shared helpers: dotted-path access into nested dicts and env flags."""

import os
from collections.abc import Mapping, MutableMapping
from typing import Any

# sentinel for "no value given" where None is a legitimate value
MISSING: Any = object()

TRUTHY = frozenset({"1", "true", "yes", "on", "y"})


def truthy(val: Any) -> bool:
    """Interpret flag-ish values: True, 1, "true", "yes", ... are truthy."""
    if isinstance(val, str):
        return val.strip().lower() in TRUTHY

    return bool(val)


def envflag(name: str, default: bool = False) -> bool:
    if (val := os.getenv(name)) is None:
        return default

    return truthy(val)


def getpath(obj: Mapping[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = obj
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default

        cur = cur[part]

    return cur


def haspath(obj: Mapping[str, Any], path: str) -> bool:
    return getpath(obj, path, MISSING) is not MISSING


def setpath(obj: MutableMapping[str, Any], path: str, val: Any) -> None:
    *parents, leaf = path.split(".")
    cur = obj
    for part in parents:
        nxt = cur.get(part)
        if not isinstance(nxt, MutableMapping):
            # overwrite scalars sitting in the way of a deeper path
            nxt = cur[part] = {}

        cur = nxt

    cur[leaf] = val


def delpath(obj: MutableMapping[str, Any], path: str) -> bool:
    """Remove ``path``, returning True if something was removed."""
    *parents, leaf = path.split(".")
    cur: Any = obj
    for part in parents:
        cur = cur.get(part) if isinstance(cur, MutableMapping) else None
        if cur is None:
            return False

    if isinstance(cur, MutableMapping) and leaf in cur:
        del cur[leaf]
        return True

    return False
