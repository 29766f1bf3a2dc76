#!/usr/bin/env python3
"""
Integration Tests for ParkingFacility

Facility wiring from configuration, lookups by ticket id and
occupancy reporting.
"""

import unittest
import json
import tempfile
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from parkinglot.application.dtos import FacilityConfigDTO, FacilityStatusDTO
from parkinglot.application.parking_service import ParkingFacility
from parkinglot.domain.models import Vehicle, VehicleType, Ticket, NoSlotAvailable
from parkinglot.domain.exceptions import UnknownTicketError, TicketAlreadyClosedError
from parkinglot.infrastructure.clock import ManualClock
from parkinglot.infrastructure.messaging import EventBus, EventType

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class TestParkingFacility(unittest.TestCase):
    """Integration tests for the facility service"""

    def setUp(self):
        self.clock = ManualClock(EPOCH)
        self.facility = ParkingFacility.from_config(FacilityConfigDTO.default(), clock=self.clock)
        self.car = Vehicle(101, "DL01AB1234", VehicleType.CAR)

    def test_sample_facility_scenario(self):
        ticket = self.facility.enter(self.car)
        self.assertEqual((ticket.id, ticket.slot_id), (1, 2))

        self.clock.advance(3601)
        receipt = self.facility.exit(ticket)

        self.assertEqual(receipt.id, 1)
        self.assertEqual(receipt.total_fee.amount, Decimal('100'))
        self.assertEqual(receipt.total_fee.format(), "100.00 INR")
        self.assertEqual(self.facility.active_tickets(), [])
        self.assertEqual(self.facility.receipts(), [receipt])

    def test_exit_by_ticket_id(self):
        ticket = self.facility.enter(self.car)
        receipt = self.facility.exit_by_ticket_id(ticket.id)

        self.assertEqual(receipt.ticket_id, ticket.id)
        self.assertFalse(self.facility.get_ticket(ticket.id).active)
        with self.assertRaises(TicketAlreadyClosedError):
            self.facility.exit_by_ticket_id(ticket.id)

    def test_unknown_ticket_id(self):
        with self.assertRaises(UnknownTicketError):
            self.facility.exit_by_ticket_id(404)
        with self.assertRaises(KeyError):
            self.facility.get_ticket(404)

    def test_ticket_not_issued_here_cannot_free_slot(self):
        ticket = self.facility.enter(self.car)
        forged = Ticket(id=999, vehicle_id=7, slot_id=ticket.slot_id, entry_time=EPOCH)

        with self.assertRaises(UnknownTicketError):
            self.facility.exit(forged)

        self.assertTrue(self.facility.registry.is_occupied(ticket.slot_id))
        self.assertTrue(forged.active)
        self.assertEqual(self.facility.receipts(), [])

        second = self.facility.enter(Vehicle(104, "DL02CD5678", VehicleType.CAR))
        self.assertNotEqual(second.slot_id, ticket.slot_id)
        self.assertEqual(self.facility.exit(ticket).ticket_id, ticket.id)

    def test_ticket_from_other_facility_rejected(self):
        other = ParkingFacility.from_config(FacilityConfigDTO.default(), clock=self.clock)
        foreign = other.enter(self.car)
        own = self.facility.enter(Vehicle(104, "DL02CD5678", VehicleType.CAR))
        self.assertEqual((foreign.id, foreign.slot_id), (own.id, own.slot_id))

        with self.assertRaises(UnknownTicketError):
            self.facility.exit(foreign)

        self.assertTrue(own.active)
        self.assertTrue(foreign.active)
        self.assertTrue(self.facility.registry.is_occupied(own.slot_id))

    def test_status(self):
        self.facility.enter(self.car)
        self.facility.enter(Vehicle(102, "HR26DK8337", VehicleType.TRUCK))

        status = self.facility.status()

        self.assertIsInstance(status, FacilityStatusDTO)
        self.assertEqual(status.total_slots, 3)
        self.assertEqual(status.occupied_slots, 2)
        self.assertEqual(status.available_slots, 1)
        self.assertEqual(status.active_tickets, 2)
        self.assertEqual(status.receipts_issued, 0)
        self.assertEqual(status.by_size["small"].available, 1)
        self.assertEqual(status.timestamp, EPOCH)

    def test_no_slot_creates_no_ticket(self):
        self.facility.enter(Vehicle(102, "HR26DK8337", VehicleType.TRUCK))
        result = self.facility.enter(Vehicle(103, "UP16AA1111", VehicleType.TRUCK))

        self.assertIsInstance(result, NoSlotAvailable)
        self.assertFalse(result)
        self.assertEqual(self.facility.tickets.count(), 1)

    def test_id_starts_from_config(self):
        config = FacilityConfigDTO.default().model_copy(
            update={"ticket_id_start": 500, "receipt_id_start": 9000}
        )
        facility = ParkingFacility.from_config(config, clock=self.clock)

        ticket = facility.enter(self.car)
        self.assertEqual(ticket.id, 500)
        self.assertEqual(facility.exit(ticket).id, 9000)

    def test_external_event_bus(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.VEHICLE_EXITED, seen.append)
        facility = ParkingFacility.from_config(FacilityConfigDTO.default(), clock=self.clock, event_bus=bus)

        facility.exit(facility.enter(self.car))

        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].slot_id, 2)

    def test_from_config_file(self):
        data = {
            "name": "Two Bays",
            "rate_per_hour": "20",
            "currency": "usd",
            "slots": [{"id": 7, "size": "large"}, {"id": 8, "size": "medium"}]
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "facility.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            facility = ParkingFacility.from_config_file(path, clock=self.clock)

        ticket = facility.enter(self.car)
        self.assertIsInstance(ticket, Ticket)
        self.assertEqual(ticket.slot_id, 7)

        self.clock.advance(hours=5)
        self.assertEqual(facility.exit(ticket).total_fee.format(), "100.00 USD")


if __name__ == "__main__":
    unittest.main()
