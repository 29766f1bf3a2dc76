"""
parkinglot - slot allocation and ticket/fee lifecycle for a single parking facility
"""

from .domain import (
    VehicleType, SlotSize, PaymentStatus, PaymentMethod,
    Money, NoSlotAvailable, Vehicle, ParkingSlot, Ticket, Receipt,
    ParkingError, UnknownSlotIdError, DuplicateSlotIdError,
    TicketAlreadyClosedError, InvalidDurationError, UnknownTicketError, SlotAlreadyFreeError,
    SlotRegistry, SequenceGenerator, TicketIssuer, FeeCalculator,
    FirstFitStrategy, FlatRatePricingStrategy
)
from .application import (
    EntryFlow, ExitFlow, ParkingFacility, FacilityConfigDTO, SlotConfigDTO,
    TicketDTO, ReceiptDTO, FacilityStatusDTO, load_facility_config
)
from .infrastructure import ManualClock, SystemClock, EventBus, EventType

__version__ = "1.0.0"
