"""Comparator contract, concrete comparators and the composite comparator."""

from .comparator import Comparator, KeyComparator, sort_values
from .comparators import DateComparator, NumberComparator, StringComparator
from .composite import CompositeComparator

__all__ = [
    "Comparator",
    "KeyComparator",
    "CompositeComparator",
    "NumberComparator",
    "StringComparator",
    "DateComparator",
    "sort_values",
]
