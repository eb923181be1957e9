"""Shared value coercions for built-in actions."""

from collections.abc import Mapping
from typing import Any

from ..helpers import truthy


def split_list(value: Any) -> list[str]:
    """Turn ``"a,b"``, ``["a", "b"]`` or ``{"a": ..., "b": ...}`` into keys.

    Empty entries are dropped. Booleans and None produce no keys (a bare
    ``--get`` flag has nothing to look up).
    """
    match value:
        case None | bool():
            return []
        case str():
            return [v.strip() for v in value.split(",") if v.strip()]
        case Mapping():
            return [str(k) for k in value]
        case list() | tuple():
            out = []
            for v in value:
                out.extend(split_list(v) if isinstance(v, str) else [str(v)])

            return out

    return [str(value)]


def is_force(value: Any) -> bool:
    """True for a ``{"force": true}`` directive."""
    return isinstance(value, Mapping) and truthy(value.get("force", False))
