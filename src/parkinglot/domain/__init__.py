"""Domain layer: entities, the slot registry and domain services"""

from .models import (
    VehicleType, SlotSize, PaymentStatus, PaymentMethod, COMPATIBLE_SIZES,
    Money, NoSlotAvailable, Vehicle, ParkingSlot, Ticket, Receipt,
    DomainEvent, VehicleEnteredEvent, EntryRejectedEvent, VehicleExitedEvent
)
from .exceptions import (
    ParkingError, UnknownSlotIdError, DuplicateSlotIdError,
    TicketAlreadyClosedError, InvalidDurationError, UnknownTicketError, SlotAlreadyFreeError
)
from .strategies import (
    AllocationStrategy, FirstFitStrategy, PricingStrategy, FlatRatePricingStrategy
)
from .aggregates import SlotRegistry
from .services import SequenceGenerator, TicketIssuer, FeeCalculator
