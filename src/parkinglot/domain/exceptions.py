# File: src/parkinglot/domain/exceptions.py
"""
Exceptions raised by the parking lot core

A missing slot at entry is not an exception; the entry flow returns
a NoSlotAvailable outcome for that case.
"""


class ParkingError(Exception):
    """Base exception for parking lot errors"""
    pass


class UnknownSlotIdError(ParkingError, KeyError):
    """Release requested for a slot id the registry does not hold"""

    def __init__(self, slot_id: int):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateSlotIdError(ParkingError, ValueError):
    """Two slots with the same id were registered"""

    def __init__(self, slot_id: int):
        self.slot_id = slot_id
        super().__init__(f"Duplicate slot id: {slot_id}")


class TicketAlreadyClosedError(ParkingError):
    """Exit requested for a ticket that is no longer active"""

    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} is already closed")


class SlotAlreadyFreeError(ParkingError):
    """Exit requested for a ticket whose slot is not occupied"""

    def __init__(self, slot_id: int, ticket_id: int):
        self.slot_id = slot_id
        self.ticket_id = ticket_id
        super().__init__(f"Slot {slot_id} of ticket {ticket_id} is not occupied")


class InvalidDurationError(ParkingError, ValueError):
    """Stay duration cannot be computed: exit before entry, or mixed naive/aware timestamps"""

    def __init__(self, entry_time, exit_time, reason: str = None):
        self.entry_time = entry_time
        self.exit_time = exit_time
        if reason is None:
            reason = f"is before entry time {entry_time.isoformat()}"
        super().__init__(f"Exit time {exit_time.isoformat()} {reason}")


class UnknownTicketError(ParkingError, KeyError):
    """Lookup of a ticket id that was never issued"""

    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} not found")

    def __str__(self) -> str:
        return self.args[0]
