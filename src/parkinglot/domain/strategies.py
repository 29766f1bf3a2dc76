# File: src/parkinglot/domain/strategies.py
"""
Strategy Pattern Implementation for the Parking Lot Core

Key Strategies:
1. Allocation Strategies - which free compatible slot a vehicle gets
2. Pricing Strategies - what a number of billed hours costs

The facility ships one of each: first-fit allocation in registration
order and a flat hourly rate.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from decimal import Decimal
import logging

from .models import ParkingSlot, VehicleType, Money


# ============================================================================
# STRATEGY INTERFACES
# ============================================================================

class AllocationStrategy(ABC):
    """
    Abstract base class for slot allocation algorithms
    Implementations must be deterministic for a given slot sequence
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def select_slot(
        self,
        slots: Sequence[ParkingSlot],
        vehicle_type: VehicleType
    ) -> Optional[ParkingSlot]:
        """
        Pick a free slot compatible with the vehicle type
        Returns: ParkingSlot if one matches, None otherwise
        """
        pass

    def get_strategy_name(self) -> str:
        """Get human-readable strategy name"""
        return self.__class__.__name__.replace("Strategy", "")

    def __str__(self) -> str:
        return f"{self.get_strategy_name()} Strategy"


class PricingStrategy(ABC):
    """Abstract base class for fee algorithms"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def price(self, billed_hours: int) -> Money:
        """Fee for the given number of billed hours"""
        pass


# ============================================================================
# ALLOCATION STRATEGIES
# ============================================================================

class FirstFitStrategy(AllocationStrategy):
    """
    Strategy: first free compatible slot in registration order
    Same requests against the same slots always give the same slots
    """

    def select_slot(
        self,
        slots: Sequence[ParkingSlot],
        vehicle_type: VehicleType
    ) -> Optional[ParkingSlot]:
        for slot in slots:
            if not slot.is_occupied and slot.can_accommodate(vehicle_type):
                self.logger.debug(f"Selected slot {slot.id} for {vehicle_type.value}")
                return slot
        return None


# ============================================================================
# PRICING STRATEGIES
# ============================================================================

class FlatRatePricingStrategy(PricingStrategy):
    """Strategy: every billed hour costs the same flat rate"""

    def __init__(self, rate_per_hour: Money):
        super().__init__()
        if rate_per_hour.amount <= Decimal('0'):
            raise ValueError("Hourly rate must be positive")
        self.rate_per_hour = rate_per_hour

    def price(self, billed_hours: int) -> Money:
        if billed_hours < 1:
            raise ValueError(f"Billed hours must be at least 1, got {billed_hours}")
        return self.rate_per_hour * billed_hours
