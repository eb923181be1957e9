"""Resolve and import plugin modules by reference.

A reference is either a path (absolute, or relative to a working directory)
to a ``.py`` file or package directory, or a dotted module name importable
from ``sys.path``. Plugin modules expose a callable named ``plugin`` which
receives the host.
"""

import importlib
import importlib.util
import os
import pathlib
import re
import sys
from collections.abc import Callable
from types import ModuleType
from typing import Any

from loguru import logger

from .errors import PluginLoadError

# attribute every plugin module must provide
ENTRYPOINT = "plugin"


def resolve_reference(
    reference: str, cwd: str | os.PathLike | None = None
) -> pathlib.Path | None:
    """Return the file backing ``reference``, or None if it isn't a path."""
    base = pathlib.Path(cwd).expanduser() if cwd else pathlib.Path.cwd()
    candidate = pathlib.Path(reference).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate

    options = [candidate]
    if not candidate.suffix:
        options.append(candidate.with_suffix(".py"))

    options.append(candidate / "__init__.py")

    for path in options:
        if path.is_file():
            return path.resolve()

    return None


def import_path(path: pathlib.Path) -> ModuleType:
    # unique, stable module name per file so re-loading reuses the module
    name = "flagmap_plugin_" + re.sub(r"\W", "_", str(path.with_suffix("")))
    if (module := sys.modules.get(name)) is not None:
        return module

    search = [str(path.parent)] if path.name == "__init__.py" else None
    spec = importlib.util.spec_from_file_location(
        name, path, submodule_search_locations=search
    )

    if spec is None or spec.loader is None:
        raise ImportError(f"cannot build import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    return module


def load_module(reference: str, cwd: str | os.PathLike | None = None) -> ModuleType:
    path = resolve_reference(reference, cwd)

    try:
        if path is not None:
            logger.debug("[loader] {} -> {}", reference, path)
            return import_path(path)

        logger.debug("[loader] {} -> import", reference)
        return importlib.import_module(reference)
    except ModuleNotFoundError as e:
        where = cwd or pathlib.Path.cwd()
        raise PluginLoadError(
            reference, f"not found in {where} or on the import path ({e})"
        ) from e
    except Exception as e:
        raise PluginLoadError(reference, f"failed to import: {e}") from e


def load_plugin(
    reference: str, cwd: str | os.PathLike | None = None
) -> Callable[[Any], Any]:
    """Import ``reference`` and return its ``plugin`` callable."""
    module = load_module(reference, cwd)
    fn = getattr(module, ENTRYPOINT, None)
    if not callable(fn):
        raise PluginLoadError(
            reference, f"module {module.__name__} has no callable '{ENTRYPOINT}'"
        )

    return fn
