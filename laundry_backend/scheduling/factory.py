"""Wires the scheduling components to SQLAlchemy repositories for one session."""

from datetime import datetime
from functools import partial
from typing import Callable

from sqlalchemy.orm import Session

from laundry_backend.repositories.appointment_repository import AppointmentRepository
from laundry_backend.repositories.hall_repository import HallRepository
from laundry_backend.repositories.machine_repository import MachineRepository
from laundry_backend.repositories.wallet_repository import WalletRepository
from laundry_backend.scheduling.availability import AvailabilityEngine
from laundry_backend.scheduling.booking import BookingService
from laundry_backend.scheduling.locks import machine_pool_lock
from laundry_backend.scheduling.machine_assigner import MachineAssigner
from laundry_backend.scheduling.pricing import PricingLookup
from laundry_backend.scheduling.reservation_manager import ReservationManager
from laundry_backend.scheduling.slot_generator import SlotGenerator


def build_pricing(db: Session) -> PricingLookup:
    return PricingLookup(HallRepository(db), MachineRepository(db))


def build_slot_generator(db: Session, clock: Callable[[], datetime] = datetime.now) -> SlotGenerator:
    machines = MachineRepository(db)
    availability = AvailabilityEngine(machines, AppointmentRepository(db))
    return SlotGenerator(machines, availability, build_pricing(db), clock=clock)


def build_booking_service(db: Session, clock: Callable[[], datetime] = datetime.now) -> BookingService:
    machines = MachineRepository(db)
    appointments = AppointmentRepository(db)
    reservations = ReservationManager(
        MachineAssigner(machines, appointments),
        appointments,
        pool_lock=partial(machine_pool_lock, db),
        clock=clock,
    )
    return BookingService(build_pricing(db), reservations, appointments, WalletRepository(db), clock=clock)
