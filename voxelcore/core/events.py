"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings. The progression
engine publishes on the bus; the presentation layer subscribes.

Usage:
    # Define events
    class ProgressionEvent(Enum):
        MISSION_COMPLETED = auto()

    # Subscribe
    event_bus.subscribe(ProgressionEvent.MISSION_COMPLETED, on_completed)

    # Publish
    event_bus.publish(ProgressionEvent.MISSION_COMPLETED, mission_id="first_builder")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)

    Events published from inside a handler are queued and dispatched
    after the current event finishes, so listeners always observe
    events in publish order. Dispatch state is per thread: an event
    published from a worker thread is delivered on that thread.
    """

    def __init__(self):
        # Map of event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Per-thread publishing flag and queue of events published during handling
        self._local = threading.local()
        # Guards the handler lists
        self._lock = threading.Lock()

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        if weak:
            if hasattr(handler, '__self__'):
                # Bound method - use WeakMethod
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        entry = (priority, handler_ref, one_shot)

        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])

            # Insert sorted by priority (highest first, stable for equal priority)
            insert_idx = len(handlers)
            for i, (p, _, _) in enumerate(handlers):
                if priority > p:
                    insert_idx = i
                    break

            handlers.insert(insert_idx, entry)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type
            handler: The handler to remove
        """
        with self._lock:
            if event_type not in self._handlers:
                return

            handlers = self._handlers[event_type]
            self._handlers[event_type] = [
                (p, h, o) for p, h, o in handlers
                if self._get_handler(h) != handler
            ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """
        Publish a pre-created event.

        Args:
            event: The event to publish
        """
        if getattr(self._local, 'publishing', False):
            self._local.queue.append(event)
        else:
            self._dispatch(event)

    def has_subscribers(self, event_type: Enum) -> bool:
        """Check whether any live handler listens for an event type."""
        with self._lock:
            entries = list(self._handlers.get(event_type, []))
        return any(self._get_handler(h) is not None for _, h, _ in entries)

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        with self._lock:
            if event_type is None:
                self._handlers.clear()
            elif event_type in self._handlers:
                del self._handlers[event_type]

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers, then drain this thread's queue."""
        local = self._local
        local.publishing = True
        local.queue = []
        try:
            self._deliver(event)
            while local.queue:
                self._deliver(local.queue.pop(0))
        finally:
            local.publishing = False

    def _deliver(self, event: Event) -> None:
        """Deliver a single event to its handlers."""
        # Iterate a copy: handlers may subscribe while being called
        with self._lock:
            entries = list(self._handlers.get(event.type, []))
        if not entries:
            return

        to_remove = []

        for entry in entries:
            _, handler_ref, one_shot = entry
            handler = self._get_handler(handler_ref)

            if handler is None:
                # Weak reference was garbage collected
                to_remove.append(entry)
                continue

            try:
                handler(event)
            except Exception:
                # Log but don't crash the publisher
                logger.exception(f"Error in event handler for {event.type}")

            if one_shot:
                to_remove.append(entry)

            if event.consumed:
                break

        if not to_remove:
            return

        # Remove dead/one-shot handlers
        with self._lock:
            handlers = self._handlers.get(event.type, [])
            for entry in to_remove:
                if entry in handlers:
                    handlers.remove(entry)

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
