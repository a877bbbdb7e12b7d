"""Comparators for numbers, strings and dates."""

from __future__ import annotations

import datetime as dt
from numbers import Real
from typing import Any

from .comparator import KeyComparator, KeyFunc, three_way

__all__ = ["NumberComparator", "StringComparator", "DateComparator"]


class NumberComparator(KeyComparator):
    """Orders real numbers. Booleans are not treated as numbers."""

    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, Real) and not isinstance(value, bool)

    def _accepts_values(self, left: Any, right: Any) -> bool:
        return self._is_number(left) and self._is_number(right)

    def _compare_values(self, left: Any, right: Any) -> int:
        return three_way(left, right)


class StringComparator(KeyComparator):
    """Orders strings lexically, optionally ignoring case."""

    def __init__(self, key: KeyFunc | None = None, *, case_sensitive: bool = True) -> None:
        super().__init__(key)
        self.case_sensitive = case_sensitive

    def _accepts_values(self, left: Any, right: Any) -> bool:
        return isinstance(left, str) and isinstance(right, str)

    def _compare_values(self, left: Any, right: Any) -> int:
        if not self.case_sensitive:
            left, right = left.casefold(), right.casefold()
        return three_way(left, right)


class DateComparator(KeyComparator):
    """Orders dates and datetimes.

    Plain dates are only compared with plain dates, and naive datetimes are
    never mixed with timezone-aware ones.
    """

    @staticmethod
    def _kind(value: Any) -> str | None:
        if isinstance(value, dt.datetime):
            return "naive" if value.utcoffset() is None else "aware"
        if isinstance(value, dt.date):
            return "date"
        return None

    def _accepts_values(self, left: Any, right: Any) -> bool:
        kind = self._kind(left)
        return kind is not None and kind == self._kind(right)

    def _compare_values(self, left: Any, right: Any) -> int:
        return three_way(left, right)
