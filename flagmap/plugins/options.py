"""Plugin: ``option`` capability storing values under ``options.*``."""

from collections.abc import Mapping
from typing import Any

from ..helpers import MISSING


def options(defaults: Mapping[str, Any] | None = None):
    def plugin(app):
        if app.is_registered("options"):
            return

        def option(key: str | Mapping[str, Any], val: Any = MISSING) -> Any:
            """Set an option (emits ``option``), or read it when no value is given."""
            if isinstance(key, Mapping):
                for k, v in key.items():
                    option(k, v)

                return app

            if val is MISSING:
                return app.lookup(f"options.{key}")

            app.set(f"options.{key}", val)
            app.emit("option", key, val)
            return app

        app.define("option", option)

        if defaults:
            option(defaults)

    return plugin
