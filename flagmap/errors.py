"""Error types raised by the dispatcher and its collaborators.

Declaration mistakes (bad arguments to ``map``/``alias``) raise immediately.
Everything that goes wrong while dispatching is delivered once through the
completion path of ``Mapper.process``.
"""


class FlagmapError(Exception):
    """Base class for every error raised by flagmap."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class InvalidArgument(FlagmapError, TypeError):
    """Malformed call to ``map``, ``alias`` or the mapper itself."""


class UnresolvedAction(FlagmapError, LookupError):
    """No action and no host method exists for a key (strict mode only)."""


class AliasCycle(FlagmapError, ValueError):
    """An alias chain loops back onto itself."""

    def __init__(self, key: str, chain: list[str]):
        super().__init__(
            f"alias cycle detected for '{key}': {' -> '.join(chain)}", key=key
        )
        self.chain = chain


class ActionFailure(FlagmapError):
    """An invoked action raised.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or f"action for '{key}' failed", key=key)


class PluginLoadError(ActionFailure, ImportError):
    """A plugin reference could not be resolved or imported."""

    def __init__(self, reference: str, message: str, key: str = "use"):
        super().__init__(key, f"[{reference}] {message}")
        self.reference = reference
