"""In-process event dispatch with priority-ordered listeners and comparators."""

from .config import DispatcherConfig, default_config_path
from .errors import (
    ConfigError,
    DispatchCoreError,
    IndexOutOfRangeError,
    InvalidArgumentError,
)
from .events import Event, EventDispatcher, EventListener
from .priority import PriorityList, PriorityRegistry
from .sort import (
    Comparator,
    CompositeComparator,
    DateComparator,
    KeyComparator,
    NumberComparator,
    StringComparator,
    sort_values,
)

__version__ = "0.1.0"

__all__ = [
    "Comparator",
    "KeyComparator",
    "CompositeComparator",
    "NumberComparator",
    "StringComparator",
    "DateComparator",
    "sort_values",
    "PriorityList",
    "PriorityRegistry",
    "Event",
    "EventListener",
    "EventDispatcher",
    "DispatcherConfig",
    "default_config_path",
    "DispatchCoreError",
    "InvalidArgumentError",
    "IndexOutOfRangeError",
    "ConfigError",
]
