# File: src/parkinglot/main.py
"""
Command-line driver for the parking lot core

Builds a facility (sample layout or a JSON configuration file), parks
one vehicle, lets a simulated amount of time pass and checks it out
again, printing the ticket and the receipt.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .application.dtos import FacilityConfigDTO, TicketDTO, ReceiptDTO, load_facility_config
from .application.parking_service import ParkingFacility
from .domain.exceptions import ParkingError
from .domain.models import Vehicle, VehicleType, NoSlotAvailable
from .infrastructure.clock import ManualClock, SystemClock
from .infrastructure.messaging import LoggingEventHandler

EXIT_OK = 0
EXIT_NO_SLOT = 1
EXIT_ERROR = 2


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup application logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    return logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parkinglot",
        description="Park a vehicle, simulate a stay and check it out again."
    )
    parser.add_argument("--config", help="JSON facility configuration (default: sample 3-slot lot)")
    parser.add_argument("--vehicle-id", type=int, default=101)
    parser.add_argument("--plate", default="DL01AB1234")
    parser.add_argument(
        "--vehicle-type",
        choices=[vehicle_type.value for vehicle_type in VehicleType],
        default=VehicleType.CAR.value
    )
    parser.add_argument(
        "--stay-minutes", type=float, default=0.0,
        help="Simulated time between entry and exit"
    )
    parser.add_argument("--json", action="store_true", help="Print ticket and receipt as JSON")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level)

    try:
        config = load_facility_config(args.config) if args.config else FacilityConfigDTO.default()
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid facility configuration: {e}")
        return EXIT_ERROR

    clock = ManualClock(SystemClock().now())
    facility = ParkingFacility.from_config(config, clock=clock)
    facility.event_bus.subscribe_all(LoggingEventHandler(logger))

    try:
        vehicle = Vehicle(args.vehicle_id, args.plate, VehicleType(args.vehicle_type))
    except ValueError as e:
        logger.error(f"Invalid vehicle: {e}")
        return EXIT_ERROR

    try:
        result = facility.enter(vehicle)
        if isinstance(result, NoSlotAvailable):
            print("No slot available")
            return EXIT_NO_SLOT

        clock.advance(minutes=args.stay_minutes)
        receipt = facility.exit(result)
    except ParkingError as e:
        logger.error(f"Parking operation failed: {e}")
        return EXIT_ERROR

    if args.json:
        print(TicketDTO.from_domain(result).to_json())
        print(ReceiptDTO.from_domain(receipt).to_json())
    else:
        print(f"Ticket ID: {result.id} | Slot: {result.slot_id}")
        print(f"Receipt ID: {receipt.id} | Fee: {receipt.total_fee.format()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
