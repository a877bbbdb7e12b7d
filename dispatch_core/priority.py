"""Priority-ordered containers used to store event listeners."""

from __future__ import annotations

from bisect import insort
from dataclasses import dataclass
from typing import Generic, Iterator, TypeVar

__all__ = ["PriorityList", "PriorityRegistry"]

T = TypeVar("T")


@dataclass(frozen=True)
class _PriorityEntry(Generic[T]):
    priority: int
    order: int
    item: T

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.order)


class PriorityList(Generic[T]):
    """Sequence that yields items by priority, highest first.

    Items sharing a priority come out in the order they were added. The list
    is kept sorted on insert, so reads never sort.
    """

    def __init__(self) -> None:
        self._entries: list[_PriorityEntry[T]] = []
        self._sequence = 0

    def add(self, item: T, priority: int = 0) -> None:
        entry = _PriorityEntry(priority=priority, order=self._sequence, item=item)
        self._sequence += 1
        insort(self._entries, entry, key=lambda e: e.sort_key)

    def remove(self, item: T) -> int:
        """Remove every entry holding ``item`` and return how many were dropped."""

        removed = 0
        # iterate over a copy so removals do not shift the traversal
        for entry in list(self._entries):
            if entry.item is item:
                self._entries.remove(entry)
                removed += 1
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def to_list(self) -> list[T]:
        return [entry.item for entry in self._entries]

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: object) -> bool:
        return any(entry.item is item for entry in self._entries)


class PriorityRegistry(Generic[T]):
    """Per-name collection of :class:`PriorityList` instances.

    A name without entries behaves exactly like a name that was never
    registered; empty lists are dropped whenever they are observed.
    """

    def __init__(self) -> None:
        self._lists: dict[str, PriorityList[T]] = {}

    def add(self, name: str, item: T, priority: int = 0) -> None:
        entries = self._lists.get(name)
        if entries is None:
            entries = self._lists[name] = PriorityList()
        entries.add(item, priority)

    def remove(self, name: str, item: T) -> int:
        entries = self._lists.get(name)
        if entries is None:
            return 0
        removed = entries.remove(item)
        self._prune(name)
        return removed

    def listeners(self, name: str) -> list[T]:
        """Return the items registered under ``name`` in priority order."""

        if not self.has(name):
            return []
        return self._lists[name].to_list()

    def has(self, name: str) -> bool:
        entries = self._lists.get(name)
        if entries is None:
            return False
        if not entries:
            self._prune(name)
            return False
        return True

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, entries in self._lists.items() if entries)

    def clear(self, name: str | None = None) -> None:
        if name is None:
            self._lists.clear()
        else:
            self._lists.pop(name, None)

    def _prune(self, name: str) -> None:
        entries = self._lists.get(name)
        if entries is not None and not entries:
            del self._lists[name]
