"""Ordered collection of registered hotstrings."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from hotstring.core.definition import Definition


def sort_key(definition: Definition) -> tuple[int, int]:
    return (-definition.priority, -definition.sort_length)


class HotstringRegistry:
    """Definitions kept sorted by priority, then trigger length, both descending.

    Ties keep insertion order; pattern triggers count as length 0.
    """

    def __init__(self) -> None:
        self._definitions: list[Definition] = []

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._definitions)

    def register(self, definition: Definition) -> None:
        self._definitions.append(definition)
        self._definitions.sort(key=sort_key)

    def clear(self) -> None:
        self._definitions.clear()

    def find(self, predicate: Callable[[Definition], bool]) -> Definition | None:
        return next((d for d in self._definitions if predicate(d)), None)

    def snapshot(self) -> list[Definition]:
        return list(self._definitions)
