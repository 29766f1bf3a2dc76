#!/usr/bin/env python3
"""
Slot Registry Unit Tests

Allocation order, compatibility, exhaustion and release behaviour.
"""

import unittest
import itertools
import sys
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from parkinglot.domain.models import ParkingSlot, SlotSize, VehicleType
from parkinglot.domain.aggregates import SlotRegistry
from parkinglot.domain.strategies import FirstFitStrategy
from parkinglot.domain.exceptions import UnknownSlotIdError, DuplicateSlotIdError


def make_slots(*sizes, start=1):
    return [ParkingSlot(start + i, size, floor=1) for i, size in enumerate(sizes)]


class TestAllocation(unittest.TestCase):
    """Unit tests for SlotRegistry.allocate"""

    def setUp(self):
        self.registry = SlotRegistry(make_slots(SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE))

    def test_car_skips_small_slot(self):
        slot = self.registry.allocate(VehicleType.CAR)
        self.assertEqual(slot.id, 2)
        self.assertTrue(slot.is_occupied)

    def test_truck_gets_large_slot(self):
        self.assertEqual(self.registry.allocate(VehicleType.TRUCK).id, 3)

    def test_bike_gets_first_slot(self):
        self.assertEqual(self.registry.allocate(VehicleType.BIKE).id, 1)

    def test_registration_order_not_size_order(self):
        registry = SlotRegistry(make_slots(SlotSize.LARGE, SlotSize.MEDIUM))
        self.assertEqual(registry.allocate(VehicleType.CAR).id, 1)

    def test_truck_rejected_when_only_small_and_medium_free(self):
        self.registry.allocate(VehicleType.TRUCK)
        before = [slot.is_occupied for slot in self.registry.slots]

        self.assertIsNone(self.registry.allocate(VehicleType.TRUCK))
        self.assertEqual([slot.is_occupied for slot in self.registry.slots], before)

    def test_allocated_slot_always_compatible_and_free(self):
        sizes = [SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE] * 3
        requests = [VehicleType.TRUCK, VehicleType.CAR, VehicleType.BIKE] * 5

        registry = SlotRegistry(make_slots(*sizes))
        handed_out = set()
        for vehicle_type in requests:
            slot = registry.allocate(vehicle_type)
            if slot is None:
                continue
            self.assertTrue(slot.size.can_accommodate(vehicle_type))
            self.assertNotIn(slot.id, handed_out)
            handed_out.add(slot.id)

    def test_k_free_slots_then_none(self):
        for vehicle_type in VehicleType:
            for sizes in itertools.product(list(SlotSize), repeat=3):
                with self.subTest(vehicle_type=vehicle_type, sizes=sizes):
                    registry = SlotRegistry(make_slots(*sizes))
                    k = registry.available_count(vehicle_type)

                    slots = [registry.allocate(vehicle_type) for _ in range(k)]
                    self.assertTrue(all(slot is not None for slot in slots))
                    self.assertEqual(len({slot.id for slot in slots}), k)
                    self.assertIsNone(registry.allocate(vehicle_type))

    def test_allocation_is_deterministic(self):
        requests = [VehicleType.BIKE, VehicleType.CAR, VehicleType.BIKE, VehicleType.TRUCK]
        sizes = [SlotSize.MEDIUM, SlotSize.SMALL, SlotSize.LARGE, SlotSize.LARGE]

        def run():
            registry = SlotRegistry(make_slots(*sizes))
            return [getattr(registry.allocate(v), 'id', None) for v in requests]

        self.assertEqual(run(), run())
        self.assertEqual(run(), [1, 3, 2, 4])


class TestRelease(unittest.TestCase):
    """Unit tests for SlotRegistry.release"""

    def setUp(self):
        self.registry = SlotRegistry(make_slots(SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE))

    def test_released_slot_can_be_allocated_again(self):
        slot = self.registry.allocate(VehicleType.TRUCK)
        self.assertIsNone(self.registry.allocate(VehicleType.TRUCK))

        self.registry.release(slot.id)

        self.assertFalse(self.registry.is_occupied(slot.id))
        self.assertEqual(self.registry.allocate(VehicleType.TRUCK).id, slot.id)

    def test_unknown_slot_id_raises(self):
        with self.assertRaises(UnknownSlotIdError) as ctx:
            self.registry.release(99)
        self.assertEqual(ctx.exception.slot_id, 99)
        self.assertIsInstance(ctx.exception, KeyError)

    def test_release_of_free_slot_is_logged_and_ignored(self):
        with self.assertLogs('SlotRegistry', level='WARNING'):
            self.registry.release(1)
        self.assertFalse(self.registry.is_occupied(1))


class TestRegistryQueries(unittest.TestCase):
    """Unit tests for registry construction and read-only queries"""

    def test_duplicate_slot_ids_rejected(self):
        slots = [ParkingSlot(1, SlotSize.SMALL), ParkingSlot(1, SlotSize.LARGE)]
        with self.assertRaises(DuplicateSlotIdError):
            SlotRegistry(slots)

    def test_counters(self):
        registry = SlotRegistry(make_slots(SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE))
        registry.allocate(VehicleType.CAR)

        self.assertEqual(registry.total_slots, 3)
        self.assertEqual(len(registry), 3)
        self.assertEqual(registry.occupied_slots, 1)
        self.assertEqual(registry.available_slots, 2)
        self.assertEqual(registry.available_count(VehicleType.CAR), 1)
        self.assertEqual(registry.available_count(VehicleType.BIKE), 2)
        self.assertTrue(registry.get_slot(2).is_occupied)
        self.assertIsNone(registry.get_slot(4))

    def test_status_report(self):
        registry = SlotRegistry(make_slots(SlotSize.SMALL, SlotSize.MEDIUM, SlotSize.LARGE, SlotSize.LARGE))
        registry.allocate(VehicleType.TRUCK)

        report = registry.get_status_report()
        self.assertEqual(report["total_slots"], 4)
        self.assertEqual(report["occupied_slots"], 1)
        self.assertAlmostEqual(report["occupancy_rate"], 25.0)
        self.assertEqual(report["by_size"]["large"], {"total": 2, "occupied": 1, "available": 1})
        self.assertEqual(report["by_size"]["small"]["occupied"], 0)

    def test_is_occupied_unknown_id(self):
        registry = SlotRegistry(make_slots(SlotSize.SMALL))
        with self.assertRaises(UnknownSlotIdError):
            registry.is_occupied(5)

    def test_custom_strategy_is_used(self):
        class LastFitStrategy(FirstFitStrategy):
            def select_slot(self, slots, vehicle_type):
                return super().select_slot(list(reversed(slots)), vehicle_type)

        registry = SlotRegistry(
            make_slots(SlotSize.LARGE, SlotSize.LARGE), strategy=LastFitStrategy()
        )
        self.assertEqual(registry.allocate(VehicleType.CAR).id, 2)


if __name__ == "__main__":
    unittest.main()
