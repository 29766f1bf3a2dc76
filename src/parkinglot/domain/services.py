# File: src/parkinglot/domain/services.py
"""
Domain Services for the Parking Lot Core

1. SequenceGenerator - thread-safe monotonic id source
2. TicketIssuer - creates tickets for allocated slots
3. FeeCalculator - turns a ticket and an exit time into a fee
"""

from typing import Optional
from datetime import datetime, timedelta
from threading import Lock
import logging

from .models import Vehicle, Ticket, Money
from .strategies import PricingStrategy
from .exceptions import InvalidDurationError

ONE_HOUR = timedelta(hours=1)


class SequenceGenerator:
    """
    Monotonic integer sequence, safe to share between threads
    Each call to next() returns a value never returned before
    """

    def __init__(self, start: int = 1, name: str = "sequence"):
        self._start = start
        self._next = start
        self.name = name
        self._lock = Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    @property
    def current(self) -> Optional[int]:
        """Last value handed out, None before the first call"""
        with self._lock:
            if self._next == self._start:
                return None
            return self._next - 1

    def __repr__(self) -> str:
        return f"SequenceGenerator(name={self.name!r}, next={self._next})"


class TicketIssuer:
    """
    Domain Service: issues tickets with unique, increasing ids
    The id sequence is injected so that it can be shared or inspected
    """

    def __init__(self, sequence: Optional[SequenceGenerator] = None):
        self._sequence = sequence or SequenceGenerator(name="tickets")
        self._logger = logging.getLogger(self.__class__.__name__)

    def generate(self, vehicle: Vehicle, slot_id: int, entry_time: datetime) -> Ticket:
        """Create an active ticket for the vehicle parked in slot_id"""
        ticket = Ticket(
            id=self._sequence.next(),
            vehicle_id=vehicle.id,
            slot_id=slot_id,
            entry_time=entry_time
        )
        self._logger.debug(f"Issued ticket {ticket.id} for {vehicle.plate} in slot {slot_id}")
        return ticket


class FeeCalculator:
    """
    Domain Service: computes the fee owed for a ticket

    Billed hours are the elapsed time rounded up to whole hours, with a
    minimum of one hour. The price of those hours comes from the pricing
    strategy.
    """

    def __init__(self, pricing_strategy: PricingStrategy):
        self._pricing_strategy = pricing_strategy
        self._logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def billed_hours(duration: timedelta) -> int:
        """
        Whole hours to bill for a duration
        Raises: ValueError for a negative duration
        """
        if duration < timedelta(0):
            raise ValueError("Duration cannot be negative")

        hours, remainder = divmod(duration, ONE_HOUR)
        if remainder:
            hours += 1
        return max(1, hours)

    def calculate(self, ticket: Ticket, exit_time: datetime) -> Money:
        """
        Fee for a ticket closed at exit_time
        Raises: InvalidDurationError if exit_time is before the entry time,
        or if only one of the two timestamps carries a timezone
        """
        try:
            duration = exit_time - ticket.entry_time
        except TypeError:
            self._logger.error(f"Ticket {ticket.id}: cannot mix naive and aware timestamps")
            raise InvalidDurationError(
                ticket.entry_time, exit_time,
                reason=f"cannot be compared with entry time {ticket.entry_time.isoformat()}"
            ) from None

        if duration < timedelta(0):
            self._logger.error(
                f"Ticket {ticket.id}: exit {exit_time.isoformat()} precedes entry "
                f"{ticket.entry_time.isoformat()}"
            )
            raise InvalidDurationError(ticket.entry_time, exit_time)

        hours = self.billed_hours(duration)
        fee = self._pricing_strategy.price(hours)
        self._logger.debug(f"Ticket {ticket.id}: {duration} -> {hours}h -> {fee}")
        return fee
