"""Alias table: maps a declared key onto another key, transitively."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import AliasCycle, InvalidArgument


@dataclass
class AliasTable:
    aliases: dict[str, str] = field(default_factory=dict)

    def alias(self, source: str, target: str) -> "AliasTable":
        if not (isinstance(source, str) and source):
            raise InvalidArgument("expected alias name to be a non-empty string")

        if not (isinstance(target, str) and target):
            raise InvalidArgument(
                f"expected alias target for '{source}' to be a non-empty string"
            )

        self.aliases[source] = target
        return self

    def unalias(self, source: str) -> "AliasTable":
        self.aliases.pop(source, None)
        return self

    def chain(self, key: str) -> list[str]:
        """Return every key visited while resolving ``key``, in order.

        The last element is the terminal key. Raises AliasCycle if the chain
        revisits a key.
        """
        walked = [key]
        seen = {key}
        while (key := self.aliases.get(key)) is not None:
            walked.append(key)
            if key in seen:
                raise AliasCycle(walked[0], walked)

            seen.add(key)

        return walked

    def resolve(self, key: str) -> str:
        return self.chain(key)[-1]

    def __contains__(self, key: object) -> bool:
        return key in self.aliases

    def __len__(self) -> int:
        return len(self.aliases)

    def __iter__(self) -> Iterator[str]:
        return iter(self.aliases)
