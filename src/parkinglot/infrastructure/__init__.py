"""Infrastructure: clocks, in-memory repositories and the event bus"""

from .clock import Clock, SystemClock, ManualClock
from .repositories import (
    Repository, InMemoryRepository, InMemoryTicketRepository, InMemoryReceiptRepository
)
from .messaging import (
    EventType, EventHandler, CallbackEventHandler, LoggingEventHandler,
    EventBus, event_type_of
)
