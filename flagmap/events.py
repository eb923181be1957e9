"""Named notification channels.

Each notification name gets its own ``eventkit.Event`` so listeners attach to
one typed channel instead of filtering a single global stream.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from eventkit import Event
from loguru import logger


@dataclass
class Emitter:
    """Registry of named ``eventkit.Event`` channels."""

    channels: dict[str, Event] = field(default_factory=dict)

    # channel -> {listener: wrapper} for listeners attached with once()
    onces: dict[str, dict[Callable[..., Any], Callable[..., Any]]] = field(
        default_factory=dict
    )

    def channel(self, name: str) -> Event:
        if (ev := self.channels.get(name)) is None:
            ev = self.channels[name] = Event(name)

        return ev

    def on(self, name: str, listener: Callable[..., Any]) -> "Emitter":
        # keep_ref so closures registered by callers aren't collected early
        self.channel(name).connect(listener, keep_ref=True)
        return self

    def once(self, name: str, listener: Callable[..., Any]) -> "Emitter":
        ev = self.channel(name)
        fired = False

        def fire(*args):
            nonlocal fired
            if fired:
                return None

            fired = True
            pending = self.onces.get(name, {})
            if pending.get(listener) is fire:
                del pending[listener]

            ev.disconnect(fire)
            return listener(*args)

        self.onces.setdefault(name, {})[listener] = fire
        ev.connect(fire, keep_ref=True)
        return self

    def off(self, name: str, listener: Callable[..., Any] | None = None) -> "Emitter":
        if (ev := self.channels.get(name)) is None:
            return self

        if listener is None:
            self.channels.pop(name, None)
            self.onces.pop(name, None)
            return self

        if (fire := self.onces.get(name, {}).pop(listener, None)) is not None:
            ev.disconnect(fire)
        else:
            ev.disconnect(listener)

        return self

    def emit(self, name: str, *args: Any) -> None:
        logger.trace("[emit {}] {}", name, args)
        if (ev := self.channels.get(name)) is not None:
            ev.emit(*args)

    def listeners(self, name: str) -> int:
        ev = self.channels.get(name)
        return len(ev) if ev is not None else 0
