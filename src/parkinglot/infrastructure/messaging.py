# File: src/parkinglot/infrastructure/messaging.py
"""
Messaging Infrastructure for the Parking Lot Core

In-process publish/subscribe for the domain events raised by the
entry and exit flows. Handlers run synchronously in the publishing
thread; a failing handler is logged and does not affect the others
or the operation that raised the event.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Type, Union
from enum import Enum
from threading import Lock
import logging

from ..domain.models import (
    DomainEvent, VehicleEnteredEvent, EntryRejectedEvent, VehicleExitedEvent
)


# ============================================================================
# MESSAGE TYPES AND ENUMS
# ============================================================================

class EventType(str, Enum):
    """Domain event types"""
    VEHICLE_ENTERED = "vehicle_entered"
    ENTRY_REJECTED = "entry_rejected"
    VEHICLE_EXITED = "vehicle_exited"


EVENT_TYPES: Dict[Type[DomainEvent], EventType] = {
    VehicleEnteredEvent: EventType.VEHICLE_ENTERED,
    EntryRejectedEvent: EventType.ENTRY_REJECTED,
    VehicleExitedEvent: EventType.VEHICLE_EXITED,
}


def event_type_of(event: DomainEvent) -> EventType:
    """
    Event type for a domain event instance
    Raises: ValueError for event classes without a registered type
    """
    try:
        return EVENT_TYPES[type(event)]
    except KeyError:
        raise ValueError(f"Unregistered event class: {type(event).__name__}") from None


# ============================================================================
# EVENT HANDLERS
# ============================================================================

class EventHandler(ABC):
    """Base class for event handlers"""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        pass


class CallbackEventHandler(EventHandler):
    """Adapts a plain callable to the EventHandler interface"""

    def __init__(self, callback: Callable[[DomainEvent], None]):
        self._callback = callback

    def handle(self, event: DomainEvent) -> None:
        self._callback(event)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallbackEventHandler):
            return False
        return self._callback == other._callback

    def __hash__(self) -> int:
        return hash(self._callback)


class LoggingEventHandler(EventHandler):
    """Writes every event it receives to the log at INFO level"""

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def handle(self, event: DomainEvent) -> None:
        self._logger.info(f"Event: {event.to_dict()}")


# ============================================================================
# EVENT BUS (In-memory)
# ============================================================================

class EventBus:
    """
    In-memory event bus for intra-process event publishing
    Subscribers are kept per event type in subscription order
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._lock = Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _as_handler(handler: Union[EventHandler, Callable[[DomainEvent], None]]) -> EventHandler:
        if isinstance(handler, EventHandler):
            return handler
        return CallbackEventHandler(handler)

    def subscribe(
        self,
        event_type: EventType,
        handler: Union[EventHandler, Callable[[DomainEvent], None]]
    ) -> None:
        """Subscribe to events of a specific type"""
        handler = self._as_handler(handler)
        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)
                self._logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.value}")

    def subscribe_all(self, handler: Union[EventHandler, Callable[[DomainEvent], None]]) -> None:
        """Subscribe one handler to every event type"""
        handler = self._as_handler(handler)
        for event_type in EventType:
            self.subscribe(event_type, handler)

    def unsubscribe(
        self,
        event_type: EventType,
        handler: Union[EventHandler, Callable[[DomainEvent], None]]
    ) -> bool:
        """Unsubscribe handler from events; returns False if it was not subscribed"""
        handler = self._as_handler(handler)
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                self._logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type.value}")
                return True
            return False

    def publish(self, event: DomainEvent) -> int:
        """
        Publish an event to all subscribers of its type
        Returns: number of handlers that processed it without error
        """
        event_type = event_type_of(event)
        self._logger.debug(f"Publishing event: {event_type.value}")

        with self._lock:
            handlers = list(self._subscribers.get(event_type, []))

        handled = 0
        for handler in handlers:
            if not handler.can_handle(event):
                continue
            try:
                handler.handle(event)
                handled += 1
            except Exception:
                self._logger.exception(
                    f"Error handling event {event_type.value} with {handler.__class__.__name__}"
                )
        return handled

    def subscriber_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def clear_subscribers(self) -> None:
        """Clear all subscribers (for testing)"""
        with self._lock:
            self._subscribers.clear()
