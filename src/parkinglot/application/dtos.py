# File: src/parkinglot/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Parking Lot Core

1. Configuration DTOs - facility layout and rate, loaded from JSON
2. Output DTOs - serializable views of tickets, receipts and occupancy

DTO Principles:
- Validation at creation
- No business logic, only data and conversion to/from domain objects
"""

from typing import Dict, List, Optional, Any, Type, TypeVar
from datetime import datetime
from decimal import Decimal
from pathlib import Path
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.models import (
    SlotSize, PaymentStatus, PaymentMethod,
    Money, ParkingSlot, Ticket, Receipt
)

T = TypeVar('T', bound='BaseDTO')


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra='forbid'
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create DTO from dictionary"""
        return cls.model_validate(data)

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """Create DTO from JSON string"""
        return cls.model_validate_json(json_str)


# ============================================================================
# CONFIGURATION DTOs
# ============================================================================

class SlotConfigDTO(BaseDTO):
    """One slot of the facility layout"""
    id: int = Field(ge=1, description="Slot id, unique within the facility")
    size: SlotSize = Field(description="Slot size category")
    floor: int = Field(default=1, ge=0, description="Floor number")

    def to_domain(self) -> ParkingSlot:
        return ParkingSlot(id=self.id, size=SlotSize(self.size), floor=self.floor)


class FacilityConfigDTO(BaseDTO):
    """Facility layout and pricing, supplied once at start-up"""
    name: str = Field(default="Parking Lot", min_length=1, description="Facility name")
    slots: List[SlotConfigDTO] = Field(min_length=1, description="Slots in allocation order")
    rate_per_hour: Decimal = Field(gt=0, description="Flat fee per billed hour")
    currency: str = Field(default="INR", min_length=3, max_length=3, description="Currency code (ISO 4217)")
    ticket_id_start: int = Field(default=1, ge=1, description="First ticket id")
    receipt_id_start: int = Field(default=1, ge=1, description="First receipt id")

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("Currency must be alphabetic")
        return v.upper()

    @model_validator(mode='after')
    def validate_unique_slot_ids(self) -> 'FacilityConfigDTO':
        """Reject layouts that reuse a slot id"""
        seen = set()
        for slot in self.slots:
            if slot.id in seen:
                raise ValueError(f"Duplicate slot id in configuration: {slot.id}")
            seen.add(slot.id)
        return self

    @property
    def hourly_rate(self) -> Money:
        return Money(self.rate_per_hour, self.currency)

    def to_slots(self) -> List[ParkingSlot]:
        return [slot.to_domain() for slot in self.slots]

    @classmethod
    def default(cls) -> 'FacilityConfigDTO':
        """Sample facility: one small, one medium, one large slot at 50.0/hour"""
        return cls(
            slots=[
                SlotConfigDTO(id=1, size=SlotSize.SMALL, floor=1),
                SlotConfigDTO(id=2, size=SlotSize.MEDIUM, floor=1),
                SlotConfigDTO(id=3, size=SlotSize.LARGE, floor=1),
            ],
            rate_per_hour=Decimal('50.0')
        )


def load_facility_config(path) -> FacilityConfigDTO:
    """
    Read a facility configuration from a JSON file
    Raises: FileNotFoundError, json.JSONDecodeError, pydantic.ValidationError
    """
    data = json.loads(Path(path).read_text(encoding='utf-8'))
    return FacilityConfigDTO.from_dict(data)


# ============================================================================
# OUTPUT DTOs
# ============================================================================

class MoneyDTO(BaseDTO):
    """Money value object DTO"""
    amount: Decimal = Field(ge=0, description="Amount")
    currency: str = Field(min_length=3, max_length=3, description="Currency code")

    @classmethod
    def from_domain(cls, money: Money) -> 'MoneyDTO':
        return cls(amount=money.amount, currency=money.currency)


class TicketDTO(BaseDTO):
    """DTO for an issued ticket"""
    ticket_id: int
    vehicle_id: int
    slot_id: int
    entry_time: datetime
    active: bool

    @classmethod
    def from_domain(cls, ticket: Ticket) -> 'TicketDTO':
        return cls(
            ticket_id=ticket.id,
            vehicle_id=ticket.vehicle_id,
            slot_id=ticket.slot_id,
            entry_time=ticket.entry_time,
            active=ticket.active
        )


class ReceiptDTO(BaseDTO):
    """DTO for a receipt issued at exit"""
    receipt_id: int
    ticket_id: int
    exit_time: datetime
    total_fee: MoneyDTO
    status: PaymentStatus
    payment_method: PaymentMethod

    @classmethod
    def from_domain(cls, receipt: Receipt) -> 'ReceiptDTO':
        return cls(
            receipt_id=receipt.id,
            ticket_id=receipt.ticket_id,
            exit_time=receipt.exit_time,
            total_fee=MoneyDTO.from_domain(receipt.total_fee),
            status=receipt.status,
            payment_method=receipt.payment_method
        )


class SlotStatusDTO(BaseDTO):
    """Occupancy counters for one slot size"""
    total: int = Field(ge=0)
    occupied: int = Field(ge=0)
    available: int = Field(ge=0)


class FacilityStatusDTO(BaseDTO):
    """DTO for current facility occupancy"""
    name: str
    total_slots: int = Field(ge=0)
    occupied_slots: int = Field(ge=0)
    available_slots: int = Field(ge=0)
    occupancy_rate: float = Field(ge=0, le=100)
    by_size: Dict[str, SlotStatusDTO]
    active_tickets: int = Field(ge=0)
    receipts_issued: int = Field(ge=0)
    timestamp: Optional[datetime] = None
