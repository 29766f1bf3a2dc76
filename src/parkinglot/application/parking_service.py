# File: src/parkinglot/application/parking_service.py
"""
Parking Facility Application Service

Builds the core components from a facility configuration and exposes
the gate operations to drivers (CLI, tests, embedding applications).

Responsibilities:
1. Facility initialization from configuration
2. Wiring of registry, issuer, fee calculator, flows and history
3. Ticket lookup by id and occupancy reporting
"""

from typing import List, Optional
import logging

from ..domain.models import Vehicle, Ticket, Receipt, PaymentMethod
from ..domain.aggregates import SlotRegistry
from ..domain.services import SequenceGenerator, TicketIssuer, FeeCalculator
from ..domain.strategies import FlatRatePricingStrategy, AllocationStrategy
from ..domain.exceptions import UnknownTicketError
from ..infrastructure.clock import Clock, SystemClock
from ..infrastructure.repositories import InMemoryTicketRepository, InMemoryReceiptRepository
from ..infrastructure.messaging import EventBus
from .flows import EntryFlow, ExitFlow, EntryResult
from .dtos import (
    FacilityConfigDTO, FacilityStatusDTO, SlotStatusDTO, load_facility_config
)


class ParkingFacility:
    """
    Application service for one parking facility

    The facility lives as long as the process; nothing is persisted.
    Ticket and receipt ids come from two independent sequences created
    here and handed to the components that need them.
    """

    def __init__(
        self,
        config: FacilityConfigDTO,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
        allocation_strategy: Optional[AllocationStrategy] = None
    ):
        self._logger = logging.getLogger(self.__class__.__name__)
        self.config = config
        self.name = config.name
        self.clock = clock or SystemClock()
        self.event_bus = event_bus or EventBus()

        self.ticket_sequence = SequenceGenerator(config.ticket_id_start, name="tickets")
        self.receipt_sequence = SequenceGenerator(config.receipt_id_start, name="receipts")

        self.registry = SlotRegistry(config.to_slots(), strategy=allocation_strategy)
        self.ticket_issuer = TicketIssuer(self.ticket_sequence)
        self.fee_calculator = FeeCalculator(FlatRatePricingStrategy(config.hourly_rate))

        self.tickets = InMemoryTicketRepository()
        self.receipt_log = InMemoryReceiptRepository()

        self.entry_flow = EntryFlow(
            self.registry,
            self.ticket_issuer,
            clock=self.clock,
            ticket_repository=self.tickets,
            event_bus=self.event_bus
        )
        self.exit_flow = ExitFlow(
            self.registry,
            self.fee_calculator,
            receipt_sequence=self.receipt_sequence,
            clock=self.clock,
            receipt_repository=self.receipt_log,
            event_bus=self.event_bus
        )

        self._logger.info(
            f"Created facility {self.name}: {self.registry.total_slots} slots, "
            f"{config.hourly_rate.format()}/hour"
        )

    @classmethod
    def from_config(cls, config: FacilityConfigDTO, **kwargs) -> 'ParkingFacility':
        return cls(config, **kwargs)

    @classmethod
    def from_config_file(cls, path, **kwargs) -> 'ParkingFacility':
        """Build a facility from a JSON configuration file"""
        return cls(load_facility_config(path), **kwargs)

    # ========================================================================
    # GATE OPERATIONS
    # ========================================================================

    def enter(self, vehicle: Vehicle) -> EntryResult:
        return self.entry_flow.enter(vehicle)

    def exit(self, ticket: Ticket, payment_method: PaymentMethod = PaymentMethod.CASH) -> Receipt:
        """
        Exit with a ticket issued by this facility
        Raises: UnknownTicketError if the ticket is not from this facility's history
        """
        if self.tickets.get(ticket.id) is not ticket:
            self._logger.error(f"Rejected exit for ticket {ticket.id} not issued by {self.name}")
            raise UnknownTicketError(ticket.id)
        return self.exit_flow.exit(ticket, payment_method)

    def exit_by_ticket_id(
        self,
        ticket_id: int,
        payment_method: PaymentMethod = PaymentMethod.CASH
    ) -> Receipt:
        """
        Exit using only the ticket id
        Raises: UnknownTicketError if the id was never issued here
        """
        return self.exit(self.get_ticket(ticket_id), payment_method)

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_ticket(self, ticket_id: int) -> Ticket:
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            raise UnknownTicketError(ticket_id)
        return ticket

    def active_tickets(self) -> List[Ticket]:
        return self.tickets.find_active()

    def receipts(self) -> List[Receipt]:
        return self.receipt_log.get_all(limit=self.receipt_log.count())

    def status(self) -> FacilityStatusDTO:
        """Current occupancy of the facility"""
        report = self.registry.get_status_report()
        return FacilityStatusDTO(
            name=self.name,
            total_slots=report["total_slots"],
            occupied_slots=report["occupied_slots"],
            available_slots=report["available_slots"],
            occupancy_rate=report["occupancy_rate"],
            by_size={
                size: SlotStatusDTO(**counts) for size, counts in report["by_size"].items()
            },
            active_tickets=len(self.active_tickets()),
            receipts_issued=self.receipt_log.count(),
            timestamp=self.clock.now()
        )

    def __str__(self) -> str:
        return f"ParkingFacility({self.name}, {self.registry})"
