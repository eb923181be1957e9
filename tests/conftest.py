"""
Pytest configuration and fixtures for flagmap tests.
"""

from collections import defaultdict
from functools import partial
from pathlib import Path

import pytest

from flagmap import App, config, data, options, store

FIXTURES = Path(__file__).parent / "fixtures" / "plugins"


class Recorder:
    """Collects notifications so tests can assert after dispatch finishes.

    (assertions inside listeners would be swallowed by the event channel)
    """

    def __init__(self, host, *events):
        self.calls: dict[str, list[tuple]] = defaultdict(list)
        for event in events:
            host.on(event, partial(self.record, event))

    def record(self, event, *args):
        self.calls[event].append(args)

    def __getitem__(self, event):
        return self.calls[event]


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def app(tmp_path):
    """App with every bundled plugin, bound last like a normal setup."""
    app = App()
    app.use(options())
    app.use(store("flagmap-tests", directory=tmp_path))
    app.use(data())
    app.use(config())
    yield app
    app.store.close()


@pytest.fixture
def bare_app():
    """App with only the config plugin: no options, data or store."""
    app = App()
    app.use(config())
    return app


@pytest.fixture
def recorder():
    return Recorder
