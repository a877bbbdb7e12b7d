"""Comparator that delegates to the first capable member of a sequence."""

from __future__ import annotations

from threading import RLock
from typing import Any, Iterable

from ..errors import IndexOutOfRangeError, InvalidArgumentError
from .comparator import Comparator

__all__ = ["CompositeComparator"]


class CompositeComparator(Comparator):
    """Stores zero or more comparators and treats them uniformly.

    :meth:`compare` walks the members in order and delegates to the first one
    that accepts both values. The comparator that answered last is remembered
    and tried first on the next call, so repeated comparisons of values with
    the same shape skip the scan. Pairs no member accepts compare as equal.
    """

    def __init__(self, comparators: Iterable[Comparator] | None = None) -> None:
        self._comparators: list[Comparator] = []
        self._previous: Comparator | None = None
        self._lock = RLock()
        if comparators is not None:
            self.add_comparators(comparators)

    def accepts(self, first: Any, second: Any) -> bool:
        with self._lock:
            comparators = list(self._comparators)
        return any(c.accepts(first, second) for c in comparators)

    def compare(self, first: Any, second: Any) -> int:
        # members are called outside the lock, on a snapshot of the sequence
        with self._lock:
            previous = self._previous
            comparators = list(self._comparators)
        if previous is not None and previous.accepts(first, second):
            return previous.compare(first, second)

        self._remember(previous, None)
        for comparator in comparators:
            if comparator.accepts(first, second):
                self._remember(None, comparator)
                return comparator.compare(first, second)
        return 0

    def _remember(self, expected: Comparator | None, comparator: Comparator | None) -> None:
        with self._lock:
            if self._previous is not expected:
                return
            if comparator is None or self._holds(comparator):
                self._previous = comparator

    def add_comparator(self, comparator: Comparator, index: int = -1) -> None:
        """Insert ``comparator`` at ``index``, appending when ``index`` is ``-1``."""

        self._ensure_comparator(comparator)
        with self._lock:
            position = self._resolve_index(index)
            self._comparators.insert(position, comparator)

    def add_comparators(self, comparators: Iterable[Comparator], index: int = -1) -> None:
        """Insert every comparator of ``comparators`` starting at ``index``.

        All members are validated before any is inserted; they end up
        contiguous and in their original order.
        """

        if isinstance(comparators, (str, bytes)):
            raise InvalidArgumentError("expected a collection of comparators")
        try:
            incoming = list(comparators)
        except TypeError as exc:
            raise InvalidArgumentError("expected a collection of comparators") from exc
        for comparator in incoming:
            self._ensure_comparator(comparator)
        with self._lock:
            position = self._resolve_index(index)
            self._comparators[position:position] = incoming

    def remove_comparator(self, comparator: Comparator) -> Comparator | None:
        """Remove the first occurrence of ``comparator``.

        Returns the removed comparator, or ``None`` when it was not present.
        """

        with self._lock:
            for position, candidate in enumerate(self._comparators):
                if candidate is comparator:
                    del self._comparators[position]
                    if self._previous is comparator and not self._holds(comparator):
                        self._previous = None
                    return candidate
        return None

    def contains_comparator(self, comparator: Comparator) -> bool:
        with self._lock:
            return self._holds(comparator)

    def clear_comparators(self) -> None:
        with self._lock:
            self._comparators.clear()
            self._previous = None

    def get_comparator(self, index: int) -> Comparator | None:
        """Return the comparator at ``index`` or ``None`` when there is none."""

        with self._lock:
            if (
                isinstance(index, int)
                and not isinstance(index, bool)
                and 0 <= index < len(self._comparators)
            ):
                return self._comparators[index]
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._comparators)

    def _holds(self, comparator: Comparator) -> bool:
        return any(candidate is comparator for candidate in self._comparators)

    def _resolve_index(self, index: int) -> int:
        if not isinstance(index, int) or isinstance(index, bool):
            raise InvalidArgumentError(f"index must be an integer, got {type(index).__name__}")
        length = len(self._comparators)
        if index == -1:
            return length
        if index < 0 or index > length:
            raise IndexOutOfRangeError(index, length)
        return index

    @staticmethod
    def _ensure_comparator(comparator: Any) -> None:
        if not isinstance(comparator, Comparator):
            raise InvalidArgumentError(
                f"expected a Comparator, got {type(comparator).__name__}"
            )
