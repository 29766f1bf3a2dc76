# File: src/parkinglot/domain/aggregates.py
"""
Aggregate Root for slot occupancy

SlotRegistry owns every ParkingSlot of the facility and is the only
place where occupancy changes. Scan-then-occupy is a check-then-act
sequence, so allocate and release run under one lock.
"""

from typing import Dict, Iterable, List, Optional, Any
from threading import RLock
import logging

from .models import ParkingSlot, VehicleType, SlotSize
from .strategies import AllocationStrategy, FirstFitStrategy
from .exceptions import UnknownSlotIdError, DuplicateSlotIdError


class SlotRegistry:
    """
    Aggregate Root: ordered collection of all parking slots
    Enforces that a slot is handed out to at most one vehicle at a time
    """

    def __init__(
        self,
        slots: Iterable[ParkingSlot],
        strategy: Optional[AllocationStrategy] = None
    ):
        self._slots: List[ParkingSlot] = []
        self._by_id: Dict[int, ParkingSlot] = {}
        self._strategy = strategy or FirstFitStrategy()
        self._lock = RLock()
        self._logger = logging.getLogger(self.__class__.__name__)

        for slot in slots:
            if slot.id in self._by_id:
                raise DuplicateSlotIdError(slot.id)
            self._slots.append(slot)
            self._by_id[slot.id] = slot

        self._logger.debug(
            f"Registered {len(self._slots)} slots using {self._strategy}"
        )

    # ========================================================================
    # PUBLIC BUSINESS METHODS
    # ========================================================================

    def allocate(self, vehicle_type: VehicleType) -> Optional[ParkingSlot]:
        """
        Occupy the first free slot compatible with the vehicle type
        Returns: the occupied slot, or None when nothing fits
        """
        with self._lock:
            slot = self._strategy.select_slot(self._slots, vehicle_type)
            if slot is None:
                self._logger.info(f"No free slot for {vehicle_type.value}")
                return None

            slot.occupy()
            self._logger.info(f"Allocated slot {slot.id} ({slot.size.value}) to {vehicle_type.value}")
            return slot

    def release(self, slot_id: int) -> None:
        """
        Mark the slot free
        Raises: UnknownSlotIdError if the id is not registered
        """
        with self._lock:
            slot = self._by_id.get(slot_id)
            if slot is None:
                self._logger.error(f"Release requested for unknown slot {slot_id}")
                raise UnknownSlotIdError(slot_id)

            if not slot.vacate():
                self._logger.warning(f"Slot {slot_id} was already free")
                return

            self._logger.info(f"Released slot {slot_id}")

    # ========================================================================
    # QUERY METHODS (Read-only)
    # ========================================================================

    def get_slot(self, slot_id: int) -> Optional[ParkingSlot]:
        return self._by_id.get(slot_id)

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def slots(self) -> List[ParkingSlot]:
        """Snapshot of slots in registration order"""
        with self._lock:
            return list(self._slots)

    @property
    def total_slots(self) -> int:
        return len(self._slots)

    @property
    def occupied_slots(self) -> int:
        with self._lock:
            return sum(1 for slot in self._slots if slot.is_occupied)

    @property
    def available_slots(self) -> int:
        return self.total_slots - self.occupied_slots

    def available_count(self, vehicle_type: VehicleType) -> int:
        """Number of free slots the vehicle type could be given"""
        with self._lock:
            return sum(
                1 for slot in self._slots
                if not slot.is_occupied and slot.can_accommodate(vehicle_type)
            )

    def is_occupied(self, slot_id: int) -> bool:
        """
        Occupancy of a registered slot
        Raises: UnknownSlotIdError if the id is not registered
        """
        slot = self._by_id.get(slot_id)
        if slot is None:
            raise UnknownSlotIdError(slot_id)
        with self._lock:
            return slot.is_occupied

    def get_status_report(self) -> Dict[str, Any]:
        """Occupancy summary, overall and per slot size"""
        with self._lock:
            by_size: Dict[str, Dict[str, int]] = {}
            for size in SlotSize:
                sized = [slot for slot in self._slots if slot.size == size]
                occupied = sum(1 for slot in sized if slot.is_occupied)
                by_size[size.value] = {
                    "total": len(sized),
                    "occupied": occupied,
                    "available": len(sized) - occupied
                }

            occupied_total = sum(1 for slot in self._slots if slot.is_occupied)
            total = len(self._slots)
            return {
                "total_slots": total,
                "occupied_slots": occupied_total,
                "available_slots": total - occupied_total,
                "occupancy_rate": (occupied_total / total * 100.0) if total else 0.0,
                "by_size": by_size
            }

    def __str__(self) -> str:
        return f"SlotRegistry({self.occupied_slots}/{self.total_slots} occupied)"
