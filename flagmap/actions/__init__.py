"""Built-in actions with auto-discovery and registration.

This module provides:
- Auto-discovery of all built-in actions from this package
- ACTION_MAP: the master registry mapping key names to action classes
- bootstrap(): installs every built-in into a mapper

Actions are automatically discovered by:
1. Scanning all .py files in this package
2. Importing them to trigger @action decorator registration
3. Building ACTION_MAP from the registry at module load time
"""

import importlib
from collections.abc import Mapping
from pathlib import Path

from loguru import logger

from ..mapper import Mapper
from .base import _ACTION_REGISTRY, BuiltinAction, action

__all__ = ["ACTION_MAP", "BuiltinAction", "action", "bootstrap"]


def discover_and_import_actions():
    """Import every action module so its @action decorators run.

    Skips infrastructure files (__init__.py, base.py, utils.py).
    """
    actions_dir = Path(__file__).parent

    # Files to skip (infrastructure, not actions)
    skip_files = {"__init__.py", "base.py", "utils.py"}

    # sorted so registration order (and so bootstrap order) is stable
    for module_file in sorted(actions_dir.glob("*.py")):
        if module_file.name in skip_files:
            continue

        importlib.import_module(f".{module_file.stem}", package=__package__)


def build_action_map() -> Mapping[str, type[BuiltinAction]]:
    """Build ACTION_MAP from auto-discovered actions.

    Returns:
        dict: {key_name: ActionClass}
    """
    discover_and_import_actions()

    action_map: dict[str, type[BuiltinAction]] = {}

    # Track names and aliases together so an alias can't shadow another action
    claimed: dict[str, type[BuiltinAction]] = {}

    for cls in _ACTION_REGISTRY:
        for name in cls.__action_names__ + cls.__action_aliases__:
            if name in claimed:
                raise ValueError(
                    f"Duplicate action name '{name}': "
                    f"{claimed[name].__name__} and {cls.__name__}"
                )

            claimed[name] = cls

        for name in cls.__action_names__:
            action_map[name] = cls

    return action_map


def bootstrap(mapper: Mapper) -> Mapper:
    """Install every built-in and its aliases into ``mapper``.

    Required capabilities are checked when a key is dispatched, so plugins
    attached after binding are still served by their built-in.
    """
    for name, cls in ACTION_MAP.items():
        mapper.map(name, cls(mapper.host, binding=mapper.name, strict=mapper.strict))

        if name == cls.__action_names__[0]:
            for alias in cls.__action_aliases__:
                mapper.alias(alias, name)

    logger.debug(
        "[{} :: {}] Built-in actions: {}", mapper.host.name, mapper.name, list(ACTION_MAP)
    )
    return mapper


# Build the master action registry
ACTION_MAP = build_action_map()
