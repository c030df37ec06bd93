"""
Interfaces the scheduling core depends on.

The SQLAlchemy repositories in laundry_backend.repositories satisfy these;
tests may pass anything with the same methods.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from laundry_backend.models.appointment import Appointment
from laundry_backend.models.enums import AppointmentStatus, MachineStatus, MachineType, Phase
from laundry_backend.models.hall import Hall
from laundry_backend.models.machine import Machine
from laundry_backend.repositories.wallet_repository import AffordabilityCheck


class MachineInventory(Protocol):
    def machines_by_hall_and_type(
        self,
        hall_id: int,
        machine_type: MachineType,
        status_filter: Optional[Iterable[MachineStatus]] = ...,
    ) -> list[Machine]: ...

    def count_by_hall_and_type(
        self,
        hall_id: int,
        machine_type: MachineType,
        status_filter: Optional[Iterable[MachineStatus]] = ...,
    ) -> int: ...

    def machine_by_id(self, machine_id: int) -> Optional[Machine]: ...

    def cycle_minutes(self, hall_id: int, machine_type: MachineType) -> Optional[int]: ...

    def longest_cycle_minutes(self, hall_id: int) -> Optional[int]: ...


class AppointmentLedger(Protocol):
    def appointments_overlapping_window(
        self,
        hall_id: int,
        service_type: Optional[Phase],
        window_start: datetime,
        window_end: datetime,
        status_filter: Iterable[AppointmentStatus] = ...,
    ) -> list[Appointment]: ...

    def insert_appointment(self, **data) -> Appointment: ...

    def delete_appointment(self, appointment_id: int) -> bool: ...

    def appointment_by_id(self, appointment_id: int) -> Optional[Appointment]: ...

    def mark_cancelled(self, appointment: Appointment, cancelled_at: datetime) -> Appointment: ...

    def update_status(self, appointment: Appointment, status: AppointmentStatus) -> Appointment: ...

    def upcoming_for_user(self, user_id: int, now: datetime) -> list[Appointment]: ...


class HallDirectory(Protocol):
    def hall_by_id(self, hall_id: int) -> Optional[Hall]: ...


class Wallet(Protocol):
    def get_balance(self, user_id: int) -> Decimal: ...

    def validate_affordability(self, user_id: int, amount: Decimal) -> AffordabilityCheck: ...

    def debit(self, user_id: int, amount: Decimal, reference: str) -> Decimal: ...

    def credit(self, user_id: int, amount: Decimal, reference: str) -> Decimal: ...
