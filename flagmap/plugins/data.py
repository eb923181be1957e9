"""Plugin: ``data`` capability merging objects into ``app.cache["data"]``."""

from collections.abc import Mapping
from typing import Any


def data():
    def plugin(app):
        if app.is_registered("data"):
            return

        def data(*args: Any):
            store = app.cache.setdefault("data", {})
            for arg in args:
                if isinstance(arg, Mapping):
                    store.update(arg)

            app.emit("data", list(args))
            return app

        app.define("data", data)

    return plugin
