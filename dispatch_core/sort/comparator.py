"""Abstract comparator contract and helpers built on top of it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Callable, Iterable

KeyFunc = Callable[[Any], Any]


class Comparator(ABC):
    """Base interface for objects that can order pairs of values.

    A comparator first reports whether it is able to order a pair through
    :meth:`accepts`; only pairs it accepts may be handed to :meth:`compare`.
    """

    @abstractmethod
    def accepts(self, first: Any, second: Any) -> bool:
        """Return ``True`` when this comparator can order ``first`` and ``second``."""

    @abstractmethod
    def compare(self, first: Any, second: Any) -> int:
        """Return a negative, zero or positive value for ``first <, ==, > second``."""


class KeyComparator(Comparator):
    """Comparator that applies an optional field selector to both operands."""

    def __init__(self, key: KeyFunc | None = None) -> None:
        self.key = key

    def _select(self, value: Any) -> Any:
        if self.key is None:
            return value
        return self.key(value)

    def accepts(self, first: Any, second: Any) -> bool:
        try:
            left, right = self._select(first), self._select(second)
        except (AttributeError, KeyError, IndexError, TypeError):
            return False
        return self._accepts_values(left, right)

    def compare(self, first: Any, second: Any) -> int:
        return self._compare_values(self._select(first), self._select(second))

    @abstractmethod
    def _accepts_values(self, left: Any, right: Any) -> bool:
        """Capability test on the selected values."""

    @abstractmethod
    def _compare_values(self, left: Any, right: Any) -> int:
        """Three-way comparison on the selected values."""


def three_way(left: Any, right: Any) -> int:
    """Collapse ``<``/``>`` into ``-1``, ``0`` or ``1``."""

    return (left > right) - (left < right)


def sort_values(
    values: Iterable[Any],
    comparator: Comparator,
    *,
    reverse: bool = False,
) -> list[Any]:
    """Return a new list with ``values`` ordered by ``comparator``.

    The sort is stable, so values the comparator treats as equal keep their
    relative order.
    """

    return sorted(values, key=cmp_to_key(comparator.compare), reverse=reverse)
