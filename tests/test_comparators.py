"""Unit tests for the comparator contract and CompositeComparator."""

from __future__ import annotations

import datetime as dt
import threading
from typing import Any

import pytest

from dispatch_core.errors import IndexOutOfRangeError, InvalidArgumentError
from dispatch_core.sort import (
    Comparator,
    CompositeComparator,
    DateComparator,
    NumberComparator,
    StringComparator,
    sort_values,
)


class RecordingComparator(Comparator):
    """Accepts pairs of a single type and records every accepts() call."""

    def __init__(self, kind: type, result: int = 0) -> None:
        self.kind = kind
        self.result = result
        self.accept_calls: list[tuple[Any, Any]] = []

    def accepts(self, first: Any, second: Any) -> bool:
        self.accept_calls.append((first, second))
        return isinstance(first, self.kind) and isinstance(second, self.kind)

    def compare(self, first: Any, second: Any) -> int:
        return self.result


def test_delegates_to_first_accepting_comparator() -> None:
    c1 = RecordingComparator(bytes, result=-1)
    c2 = RecordingComparator(str, result=1)
    c3 = RecordingComparator(str, result=-1)
    composite = CompositeComparator([c1, c2, c3])

    assert composite.compare("a", "b") == c2.compare("a", "b")
    assert c3.accept_calls == []


def test_cached_comparator_skips_rescan() -> None:
    c1 = RecordingComparator(bytes)
    c2 = RecordingComparator(str, result=1)
    c3 = RecordingComparator(int)
    composite = CompositeComparator([c1, c2, c3])

    composite.compare("a", "b")
    scans_before = len(c1.accept_calls)
    composite.compare("c", "d")

    assert len(c1.accept_calls) == scans_before
    assert len(c2.accept_calls) == 2


def test_cache_is_replaced_when_shape_changes() -> None:
    strings = RecordingComparator(str, result=1)
    numbers = NumberComparator()
    composite = CompositeComparator([strings, numbers])

    assert composite.compare("a", "b") == 1
    assert composite.compare(1, 2) == -1
    assert composite.compare(3, 2) == 1


def test_no_accepting_comparator_compares_equal() -> None:
    composite = CompositeComparator([NumberComparator(), StringComparator()])
    assert composite.compare(1, "one") == 0
    assert CompositeComparator().compare(object(), object()) == 0


def test_add_comparator_index_rules() -> None:
    composite = CompositeComparator()
    first, second, third = NumberComparator(), StringComparator(), DateComparator()

    composite.add_comparator(first, -1)
    composite.add_comparator(second, len(composite))
    assert composite.get_comparator(0) is first
    assert composite.get_comparator(1) is second

    composite.add_comparator(third, 0)
    assert composite.get_comparator(0) is third

    with pytest.raises(IndexOutOfRangeError) as excinfo:
        composite.add_comparator(NumberComparator(), len(composite) + 1)
    assert excinfo.value.length == 3
    with pytest.raises(IndexOutOfRangeError):
        composite.add_comparator(NumberComparator(), -2)


def test_add_comparator_rejects_non_comparators() -> None:
    composite = CompositeComparator()
    with pytest.raises(InvalidArgumentError):
        composite.add_comparator(lambda a, b: 0)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        composite.add_comparator(NumberComparator(), "0")  # type: ignore[arg-type]
    assert len(composite) == 0


def test_add_comparators_inserts_contiguously_after_validation() -> None:
    head, tail = NumberComparator(), NumberComparator()
    composite = CompositeComparator([head, tail])
    middle = [StringComparator(), DateComparator()]

    composite.add_comparators(middle, 1)
    assert [composite.get_comparator(i) for i in range(4)] == [head, *middle, tail]

    with pytest.raises(InvalidArgumentError):
        composite.add_comparators([StringComparator(), "nope"])
    with pytest.raises(InvalidArgumentError):
        composite.add_comparators(42)  # type: ignore[arg-type]
    assert len(composite) == 4


def test_remove_contains_clear_and_get() -> None:
    shared = NumberComparator()
    other = StringComparator()
    composite = CompositeComparator([shared, other, shared])

    assert composite.contains_comparator(shared)
    assert not composite.contains_comparator(NumberComparator())
    assert composite.remove_comparator(shared) is shared
    assert composite.get_comparator(0) is other
    assert composite.contains_comparator(shared)
    assert composite.remove_comparator(DateComparator()) is None

    assert composite.get_comparator(5) is None
    assert composite.get_comparator(-1) is None

    composite.clear_comparators()
    assert len(composite) == 0
    assert composite.compare(1, 2) == 0


def test_removed_comparator_is_not_used_from_cache() -> None:
    numbers = NumberComparator()
    composite = CompositeComparator([numbers])
    assert composite.compare(1, 2) == -1

    composite.remove_comparator(numbers)
    assert composite.compare(1, 2) == 0


def test_concrete_comparators() -> None:
    assert NumberComparator().compare(2.5, 2) == 1
    assert not NumberComparator().accepts(True, 1)

    insensitive = StringComparator(case_sensitive=False)
    assert insensitive.compare("Apple", "apple") == 0
    assert StringComparator().compare("Apple", "apple") == -1

    dates = DateComparator()
    today = dt.date(2024, 5, 1)
    assert dates.compare(today, dt.date(2024, 4, 30)) == 1
    assert not dates.accepts(today, dt.datetime(2024, 5, 1))
    aware = dt.datetime(2024, 5, 1, tzinfo=dt.timezone.utc)
    assert not dates.accepts(aware, dt.datetime(2024, 5, 1))


def test_key_selector_and_multi_field_sort() -> None:
    rows = [
        {"rank": 2, "name": "b"},
        {"rank": "n/a", "name": "a"},
        {"rank": 1, "name": "c"},
    ]
    by_rank = NumberComparator(key=lambda row: row["rank"])
    by_name = StringComparator(key=lambda row: row["name"])
    composite = CompositeComparator([by_rank, by_name])

    assert not by_rank.accepts(rows[0], rows[1])
    assert [row["name"] for row in sort_values(rows[::2], composite)] == ["c", "b"]
    assert by_name.accepts(rows[0], rows[1])
    assert not NumberComparator(key=lambda row: row["missing"]).accepts(rows[0], rows[2])


def test_sort_values_is_stable_and_reversible() -> None:
    values = [3, "x", 1, 2]
    composite = CompositeComparator([NumberComparator()])

    assert sort_values([3, 1, 2], composite) == [1, 2, 3]
    assert sort_values([3, 1, 2], composite, reverse=True) == [3, 2, 1]
    assert sort_values(["b", "a"], composite) == ["b", "a"]
    assert len(sort_values(values, composite)) == 4


def test_members_are_called_outside_the_composite_lock() -> None:
    composite = CompositeComparator()
    added = NumberComparator()
    finished: list[int] = []

    class HandOffComparator(RecordingComparator):
        def compare(self, first: Any, second: Any) -> int:
            worker = threading.Thread(
                target=lambda: (composite.add_comparator(added), finished.append(1))
            )
            worker.start()
            worker.join(timeout=1.0)
            return super().compare(first, second)

    composite.add_comparator(HandOffComparator(str, result=1))

    assert composite.compare("a", "b") == 1
    assert finished == [1]
    assert composite.get_comparator(1) is added
    assert composite.compare(1, 2) == -1


def test_get_comparator_rejects_boolean_index() -> None:
    first, second = NumberComparator(), StringComparator()
    composite = CompositeComparator([first, second])

    assert composite.get_comparator(1) is second
    assert composite.get_comparator(True) is None
    assert composite.get_comparator(False) is None
    assert len(composite) == 2
