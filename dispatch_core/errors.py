"""Error types raised by the dispatch core."""

from __future__ import annotations


class DispatchCoreError(Exception):
    """Base type for dispatch core failures."""


class InvalidArgumentError(DispatchCoreError, TypeError):
    """Raised when an operation receives an argument it cannot work with."""


class IndexOutOfRangeError(DispatchCoreError, IndexError):
    """Raised when an insertion index falls outside ``[0, length]``."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} is out of range for a sequence of length {length}")
        self.index = index
        self.length = length


class ConfigError(DispatchCoreError):
    """Raised when a configuration value has the wrong type."""
