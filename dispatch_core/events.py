"""Two-phase event dispatcher with priority-ordered filters and handlers."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, ContextManager

from .config import DispatcherConfig
from .errors import InvalidArgumentError
from .priority import PriorityRegistry

__all__ = ["Event", "EventListener", "EventDispatcher"]

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Event:
    """Mutable record handed to every listener of a dispatch.

    Listeners may annotate ``payload`` or consume the event. Consuming is
    one-way: once set, the flag stays set.
    """

    name: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    dispatcher: "EventDispatcher | None" = field(default=None, repr=False)
    _consumed: bool = field(default=False, init=False, repr=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    @consumed.setter
    def consumed(self, value: bool) -> None:
        if self._consumed and not value:
            raise InvalidArgumentError("a consumed event cannot be released")
        self._consumed = bool(value)

    def consume(self) -> None:
        """Stop delivery of this event to the remaining listeners."""

        self._consumed = True


EventListener = Callable[[Event], None]


class EventDispatcher:
    """Registers listeners per event name and dispatches events to them.

    Dispatch runs in two phases. Filters see the event first (capturing) and
    can annotate it or consume it; handlers run afterwards (bubbling). Within
    a phase listeners run by priority, highest first, ties in registration
    order, and delivery stops as soon as a listener consumes the event.
    Listener errors propagate to the caller of :meth:`dispatch`.
    """

    def __init__(self, config: DispatcherConfig | None = None) -> None:
        self.config = config or DispatcherConfig()
        self._filters: PriorityRegistry[EventListener] = PriorityRegistry()
        self._handlers: PriorityRegistry[EventListener] = PriorityRegistry()
        self._lock: ContextManager[Any] = RLock() if self.config.synchronized else nullcontext()

    # ---------- Filters (capturing phase) ----------

    def add_filter(self, event_name: str, listener: EventListener, priority: int | None = None) -> None:
        self._add(self._filters, "filter", event_name, listener, priority)

    def remove_filter(self, event_name: str, listener: EventListener) -> None:
        self._remove(self._filters, "filter", event_name, listener)

    def get_filters(self, event_name: str | None = None) -> list[EventListener]:
        """Return the filters of ``event_name`` in delivery order.

        Without a name, every registered filter is returned, grouped by event
        name in first-registration order rather than an empty list.
        """

        return self._get(self._filters, event_name)

    def has_filters(self, event_name: str) -> bool:
        with self._lock:
            return self._filters.has(event_name)

    def filter(self, event_name: str, *, priority: int | None = None) -> Callable[[EventListener], EventListener]:
        """Decorator form of :meth:`add_filter`."""

        def decorator(listener: EventListener) -> EventListener:
            self.add_filter(event_name, listener, priority)
            return listener

        return decorator

    # ---------- Handlers (bubbling phase) ----------

    def add_handler(self, event_name: str, listener: EventListener, priority: int | None = None) -> None:
        self._add(self._handlers, "handler", event_name, listener, priority)

    def remove_handler(self, event_name: str, listener: EventListener) -> None:
        self._remove(self._handlers, "handler", event_name, listener)

    def get_handlers(self, event_name: str | None = None) -> list[EventListener]:
        """Return the handlers of ``event_name`` in delivery order.

        Without a name, every registered handler is returned, grouped by event
        name in first-registration order.
        """

        return self._get(self._handlers, event_name)

    def has_handlers(self, event_name: str) -> bool:
        with self._lock:
            return self._handlers.has(event_name)

    def handler(self, event_name: str, *, priority: int | None = None) -> Callable[[EventListener], EventListener]:
        """Decorator form of :meth:`add_handler`."""

        def decorator(listener: EventListener) -> EventListener:
            self.add_handler(event_name, listener, priority)
            return listener

        return decorator

    # ---------- Introspection ----------

    def event_names(self) -> tuple[str, ...]:
        """Names with at least one filter or handler, filters' names first."""

        with self._lock:
            names = dict.fromkeys(self._filters.names())
            names.update(dict.fromkeys(self._handlers.names()))
        return tuple(names)

    def clear(self, event_name: str | None = None) -> None:
        with self._lock:
            self._filters.clear(event_name)
            self._handlers.clear(event_name)

    # ---------- Dispatch ----------

    def dispatch(self, event_name: str, event: Event | None = None) -> Event | None:
        """Deliver ``event`` to the filters and then the handlers of ``event_name``.

        Returns the event once both phases ran without consuming it, or
        ``None`` if a filter or handler consumed it.
        """

        if not isinstance(event_name, str):
            raise InvalidArgumentError(f"event name must be a str, got {type(event_name).__name__}")
        if event is None:
            event = Event()
        elif not isinstance(event, Event):
            raise InvalidArgumentError(f"expected an Event, got {type(event).__name__}")
        event.dispatcher = self
        event.name = event_name

        self._run_phase("capturing", self.get_filters(event_name), event)
        if event.consumed:
            return None

        self._run_phase("bubbling", self.get_handlers(event_name), event)
        if event.consumed:
            return None
        return event

    def _run_phase(self, phase: str, listeners: list[EventListener], event: Event) -> None:
        logger.debug("%s %s: %d listener(s)", phase, event.name, len(listeners))
        for listener in listeners:
            if event.consumed:
                break
            if self.config.trace:
                logger.debug("%s %s -> %r", phase, event.name, listener)
            try:
                listener(event)
            except Exception:
                logger.debug("%s listener %r failed for %s", phase, listener, event.name)
                raise
            if event.consumed:
                logger.debug("%s consumed during %s by %r", event.name, phase, listener)

    # ---------- Registry helpers ----------

    def _add(
        self,
        registry: PriorityRegistry[EventListener],
        kind: str,
        event_name: str,
        listener: EventListener,
        priority: int | None,
    ) -> None:
        if priority is None:
            priority = self.config.default_priority
        self._validate(event_name, listener, priority)
        with self._lock:
            registry.add(event_name, listener, priority)
        logger.debug("registered %s %r for %s (priority=%d)", kind, listener, event_name, priority)

    def _remove(
        self,
        registry: PriorityRegistry[EventListener],
        kind: str,
        event_name: str,
        listener: EventListener,
    ) -> None:
        with self._lock:
            removed = registry.remove(event_name, listener)
        if removed:
            logger.debug("removed %d %s(s) %r from %s", removed, kind, listener, event_name)

    def _get(self, registry: PriorityRegistry[EventListener], event_name: str | None) -> list[EventListener]:
        with self._lock:
            if event_name is not None:
                return registry.listeners(event_name)
            collected: list[EventListener] = []
            for name in registry.names():
                collected.extend(registry.listeners(name))
            return collected

    @staticmethod
    def _validate(event_name: Any, listener: Any, priority: Any) -> None:
        if not isinstance(event_name, str):
            raise InvalidArgumentError(f"event name must be a str, got {type(event_name).__name__}")
        if not callable(listener):
            raise InvalidArgumentError(f"listener must be callable, got {type(listener).__name__}")
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise InvalidArgumentError(f"priority must be an int, got {type(priority).__name__}")
