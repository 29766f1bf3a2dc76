# File: src/parkinglot/application/flows.py
"""
Entry and Exit use cases

EntryFlow composes the SlotRegistry and the TicketIssuer to handle an
arriving vehicle. ExitFlow composes the FeeCalculator and the
SlotRegistry to close a ticket and issue a receipt.

Both flows either complete fully or leave slots and tickets as they
found them.
"""

from typing import Optional, Union
from threading import RLock
import logging

from ..domain.models import (
    Vehicle, Ticket, Receipt, NoSlotAvailable,
    PaymentStatus, PaymentMethod,
    VehicleEnteredEvent, EntryRejectedEvent, VehicleExitedEvent
)
from ..domain.aggregates import SlotRegistry
from ..domain.services import TicketIssuer, FeeCalculator, SequenceGenerator
from ..domain.exceptions import TicketAlreadyClosedError, SlotAlreadyFreeError
from ..infrastructure.clock import Clock, SystemClock
from ..infrastructure.repositories import InMemoryTicketRepository, InMemoryReceiptRepository
from ..infrastructure.messaging import EventBus


EntryResult = Union[Ticket, NoSlotAvailable]


class EntryFlow:
    """Handles a vehicle arriving at the gate"""

    def __init__(
        self,
        registry: SlotRegistry,
        ticket_issuer: TicketIssuer,
        clock: Optional[Clock] = None,
        ticket_repository: Optional[InMemoryTicketRepository] = None,
        event_bus: Optional[EventBus] = None
    ):
        self._registry = registry
        self._ticket_issuer = ticket_issuer
        self._clock = clock or SystemClock()
        self._ticket_repository = ticket_repository
        self._event_bus = event_bus
        self._logger = logging.getLogger(self.__class__.__name__)

    def enter(self, vehicle: Vehicle) -> EntryResult:
        """
        Allocate a slot and issue a ticket for the vehicle

        Returns:
            The new active Ticket, or NoSlotAvailable when no compatible
            slot is free (no ticket is created in that case)
        """
        self._logger.info(f"Vehicle arriving: {vehicle}")

        slot = self._registry.allocate(vehicle.vehicle_type)
        if slot is None:
            outcome = NoSlotAvailable(vehicle_id=vehicle.id, vehicle_type=vehicle.vehicle_type)
            self._logger.info(str(outcome))
            self._publish(EntryRejectedEvent(
                occurred_at=self._clock.now(),
                vehicle_id=vehicle.id,
                vehicle_type=vehicle.vehicle_type
            ))
            return outcome

        try:
            entry_time = self._clock.now()
            ticket = self._ticket_issuer.generate(vehicle, slot.id, entry_time)
            if self._ticket_repository is not None:
                self._ticket_repository.add(ticket)
        except Exception:
            self._logger.error(f"Ticket creation failed, releasing slot {slot.id}")
            self._registry.release(slot.id)
            raise

        self._logger.info(
            f"Vehicle {vehicle.plate} parked in slot {slot.id} (Ticket: {ticket.id})"
        )
        self._publish(VehicleEnteredEvent(
            occurred_at=entry_time,
            ticket_id=ticket.id,
            vehicle_id=vehicle.id,
            slot_id=slot.id
        ))
        return ticket

    def _publish(self, event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)


class ExitFlow:
    """
    Handles a vehicle leaving: fee, slot release, ticket close, receipt
    Receipt ids come from their own sequence, independent of ticket ids
    """

    def __init__(
        self,
        registry: SlotRegistry,
        fee_calculator: FeeCalculator,
        receipt_sequence: Optional[SequenceGenerator] = None,
        clock: Optional[Clock] = None,
        receipt_repository: Optional[InMemoryReceiptRepository] = None,
        event_bus: Optional[EventBus] = None
    ):
        self._registry = registry
        self._fee_calculator = fee_calculator
        self._receipt_sequence = receipt_sequence or SequenceGenerator(name="receipts")
        self._clock = clock or SystemClock()
        self._receipt_repository = receipt_repository
        self._event_bus = event_bus
        self._lock = RLock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def exit(self, ticket: Ticket, payment_method: PaymentMethod = PaymentMethod.CASH) -> Receipt:
        """
        Close the ticket and return the receipt for the stay

        Raises:
            TicketAlreadyClosedError: the ticket was closed by an earlier exit
            InvalidDurationError: the clock reads earlier than the entry time
            UnknownSlotIdError: the ticket's slot is not in the registry
            SlotAlreadyFreeError: the ticket's slot is not occupied
        """
        with self._lock:
            if not ticket.active:
                self._logger.warning(f"Rejected exit for closed ticket {ticket.id}")
                raise TicketAlreadyClosedError(ticket.id)

            exit_time = self._clock.now()
            fee = self._fee_calculator.calculate(ticket, exit_time)

            if not self._registry.is_occupied(ticket.slot_id):
                self._logger.error(
                    f"Rejected exit for ticket {ticket.id}: slot {ticket.slot_id} is not occupied"
                )
                raise SlotAlreadyFreeError(ticket.slot_id, ticket.id)

            self._registry.release(ticket.slot_id)
            ticket._close()

            receipt = Receipt(
                id=self._receipt_sequence.next(),
                ticket_id=ticket.id,
                exit_time=exit_time,
                total_fee=fee,
                status=PaymentStatus.SUCCESS,
                payment_method=payment_method
            )
            if self._receipt_repository is not None:
                self._receipt_repository.add(receipt)

        self._logger.info(
            f"Vehicle left slot {ticket.slot_id}. Fee: {fee.format()} (Receipt: {receipt.id})"
        )
        if self._event_bus is not None:
            self._event_bus.publish(VehicleExitedEvent(
                occurred_at=exit_time,
                ticket_id=ticket.id,
                receipt_id=receipt.id,
                slot_id=ticket.slot_id,
                fee=fee
            ))
        return receipt
