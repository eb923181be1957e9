"""Plugins extending an ``App`` with extra capabilities.

Each factory returns a plugin function for ``app.use()``:

    app.use(options()).use(data()).use(store("myapp"))
"""

from .data import data
from .options import options
from .store import Store, store

__all__ = ["Store", "data", "options", "store"]
