# File: src/parkinglot/domain/models.py
"""
Domain Models for the Parking Lot Core

This module contains:
1. Enums: vehicle categories, slot sizes, payment status and method
2. Value Objects: Money and the NoSlotAvailable entry outcome
3. Entities: Vehicle, ParkingSlot, Ticket and Receipt
4. Domain Events: events raised by the entry and exit flows

Slots, tickets and receipts carry integer ids handed out by the
facility (slots) or by sequence generators (tickets, receipts).
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum
import re

from .exceptions import TicketAlreadyClosedError


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class VehicleType(Enum):
    """Vehicle categories accepted at the gate"""
    BIKE = "bike"
    CAR = "car"
    TRUCK = "truck"

    def __str__(self) -> str:
        return self.value.title()


class SlotSize(Enum):
    """Physical size category of a parking slot"""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    def can_accommodate(self, vehicle_type: VehicleType) -> bool:
        """
        Check if a slot of this size can take the given vehicle type
        Business rule: bikes fit anywhere, cars need medium or large,
        trucks need large
        """
        return self in COMPATIBLE_SIZES[vehicle_type]

    def __str__(self) -> str:
        return self.value.title()


# Literal compatibility table; no size ordering is implied.
COMPATIBLE_SIZES: Dict[VehicleType, frozenset] = {
    VehicleType.BIKE: frozenset({SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE}),
    VehicleType.CAR: frozenset({SlotSize.MEDIUM, SlotSize.LARGE}),
    VehicleType.TRUCK: frozenset({SlotSize.LARGE}),
}


class PaymentStatus(Enum):
    """Payment status recorded on a receipt"""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentMethod(Enum):
    """How the driver settled the fee (recorded only)"""
    CASH = "cash"
    CARD = "card"
    MOBILE_APP = "mobile_app"


# ============================================================================
# VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class Money:
    """
    Value Object: Monetary amount with currency
    Provides the arithmetic needed for fee calculation
    """
    amount: Decimal
    currency: str = "INR"

    def __post_init__(self):
        """Validate money amount"""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        if self.amount < Decimal('0'):
            raise ValueError("Money amount cannot be negative")

        if len(self.currency) != 3:
            raise ValueError(f"Currency must be 3-letter code: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money amounts (same currency only)"""
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} to {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, multiplier) -> 'Money':
        """Multiply money by a non-negative int or Decimal"""
        multiplier = Decimal(multiplier)
        if multiplier < Decimal('0'):
            raise ValueError("Multiplier cannot be negative")
        return Money(self.amount * multiplier, self.currency)

    __rmul__ = __mul__

    def format(self) -> str:
        """Format money for display"""
        return f"{self.amount:.2f} {self.currency}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": str(self.amount),
            "currency": self.currency
        }

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class NoSlotAvailable:
    """
    Entry outcome when no compatible free slot exists
    Returned instead of a ticket; it is an expected result, not an error
    """
    vehicle_id: int
    vehicle_type: VehicleType

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"No {self.vehicle_type} slot available for vehicle {self.vehicle_id}"


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

_PLATE_PATTERN = re.compile(r'^[A-Z0-9\s\-]+$')


@dataclass(frozen=True)
class Vehicle:
    """
    Entity: Vehicle arriving at the facility
    Immutable once created; the plate is normalized to upper case
    """
    id: int
    plate: str
    vehicle_type: VehicleType

    def __post_init__(self):
        """Validate and normalize the license plate"""
        if not self.plate or not self.plate.strip():
            raise ValueError("License plate cannot be empty")

        object.__setattr__(self, 'plate', self.plate.strip().upper())

        if len(self.plate) < 2 or len(self.plate) > 15:
            raise ValueError(f"License plate must be 2-15 characters, got: {self.plate}")

        if not _PLATE_PATTERN.match(self.plate):
            raise ValueError(
                f"License plate can only contain letters, numbers, spaces, and hyphens: {self.plate}"
            )

        if not isinstance(self.vehicle_type, VehicleType):
            raise ValueError(f"Unknown vehicle type: {self.vehicle_type!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "plate": self.plate,
            "vehicle_type": self.vehicle_type.value
        }

    def __str__(self) -> str:
        return f"{self.vehicle_type} [{self.plate}]"


class ParkingSlot:
    """
    Entity: Individual parking space with a size and occupancy state
    Occupancy is toggled by the SlotRegistry only
    """

    def __init__(self, id: int, size: SlotSize, floor: int = 1):
        self._id = id
        self.size = size
        self.floor = floor
        self.is_occupied = False

        self._validate()

    def _validate(self) -> None:
        """Validate slot attributes"""
        if self._id <= 0:
            raise ValueError("Slot id must be positive")

        if self.floor < 0:
            raise ValueError("Floor number cannot be negative")

        if not isinstance(self.size, SlotSize):
            raise ValueError(f"Unknown slot size: {self.size!r}")

    @property
    def id(self) -> int:
        return self._id

    def occupy(self) -> None:
        """
        Mark the slot occupied
        Raises: ValueError if slot is already occupied
        """
        if self.is_occupied:
            raise ValueError(f"Slot {self._id} is already occupied")
        self.is_occupied = True

    def vacate(self) -> bool:
        """
        Mark the slot free
        Returns: True if the slot was occupied before the call
        """
        was_occupied = self.is_occupied
        self.is_occupied = False
        return was_occupied

    def can_accommodate(self, vehicle_type: VehicleType) -> bool:
        return self.size.can_accommodate(vehicle_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "size": self.size.value,
            "floor": self.floor,
            "is_occupied": self.is_occupied
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParkingSlot):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((self._id, type(self).__name__))

    def __repr__(self) -> str:
        return f"ParkingSlot(id={self._id}, size={self.size.value}, floor={self.floor})"

    def __str__(self) -> str:
        status = "Occupied" if self.is_occupied else "Available"
        return f"Slot {self._id} ({self.size}, floor {self.floor}) - {status}"


class Ticket:
    """
    Entity: Binds a vehicle to an allocated slot and its entry time
    Lifecycle: Issued (active) -> Closed (inactive), one way only
    """

    def __init__(self, id: int, vehicle_id: int, slot_id: int, entry_time: datetime):
        self._id = id
        self.vehicle_id = vehicle_id
        self.slot_id = slot_id
        self.entry_time = entry_time
        self._active = True

    @property
    def id(self) -> int:
        return self._id

    @property
    def active(self) -> bool:
        return self._active

    def _close(self) -> None:
        """
        Close the ticket; only ExitFlow calls this, after releasing the slot
        Raises: TicketAlreadyClosedError if it was closed before
        """
        if not self._active:
            raise TicketAlreadyClosedError(self._id)
        self._active = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "vehicle_id": self.vehicle_id,
            "slot_id": self.slot_id,
            "entry_time": self.entry_time.isoformat(),
            "active": self._active
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ticket):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((self._id, type(self).__name__))

    def __repr__(self) -> str:
        return f"Ticket(id={self._id}, slot_id={self.slot_id}, active={self._active})"


@dataclass(frozen=True)
class Receipt:
    """Entity: Record of a completed exit, immutable once issued"""
    id: int
    ticket_id: int
    exit_time: datetime
    total_fee: Money
    status: PaymentStatus = PaymentStatus.SUCCESS
    payment_method: PaymentMethod = PaymentMethod.CASH

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "exit_time": self.exit_time.isoformat(),
            "total_fee": self.total_fee.to_dict(),
            "status": self.status.value,
            "payment_method": self.payment_method.value
        }

    def __str__(self) -> str:
        return f"Receipt {self.id} for ticket {self.ticket_id}: {self.total_fee} ({self.status.value})"


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

@dataclass(frozen=True)
class DomainEvent:
    """Base class for domain events"""
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": type(self).__name__,
            "occurred_at": self.occurred_at.isoformat()
        }


@dataclass(frozen=True)
class VehicleEnteredEvent(DomainEvent):
    """Raised when a vehicle got a slot and a ticket"""
    ticket_id: int = 0
    vehicle_id: int = 0
    slot_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "ticket_id": self.ticket_id,
            "vehicle_id": self.vehicle_id,
            "slot_id": self.slot_id
        })
        return data


@dataclass(frozen=True)
class EntryRejectedEvent(DomainEvent):
    """Raised when a vehicle was turned away for lack of a slot"""
    vehicle_id: int = 0
    vehicle_type: Optional[VehicleType] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "vehicle_id": self.vehicle_id,
            "vehicle_type": self.vehicle_type.value if self.vehicle_type else None
        })
        return data


@dataclass(frozen=True)
class VehicleExitedEvent(DomainEvent):
    """Raised when a ticket was closed and its slot released"""
    ticket_id: int = 0
    receipt_id: int = 0
    slot_id: int = 0
    fee: Money = field(default_factory=lambda: Money(Decimal('0')))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "ticket_id": self.ticket_id,
            "receipt_id": self.receipt_id,
            "slot_id": self.slot_id,
            "fee": self.fee.to_dict()
        })
        return data
