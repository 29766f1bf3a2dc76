"""Application layer: entry/exit use cases, DTOs and the facility service"""

from .flows import EntryFlow, ExitFlow, EntryResult
from .dtos import (
    BaseDTO, SlotConfigDTO, FacilityConfigDTO, MoneyDTO, TicketDTO, ReceiptDTO,
    SlotStatusDTO, FacilityStatusDTO, load_facility_config
)
from .parking_service import ParkingFacility
