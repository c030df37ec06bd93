"""Single-machine reservations: assign a machine, then record the appointment."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, ContextManager, NamedTuple

from laundry_backend.core.errors import NotFoundError
from laundry_backend.models.appointment import Appointment
from laundry_backend.models.enums import ACTIVE_APPOINTMENT_STATUSES, MachineType, Phase
from laundry_backend.scheduling.locks import no_lock
from laundry_backend.scheduling.machine_assigner import MachineAssigner
from laundry_backend.scheduling.ports import AppointmentLedger

logger = logging.getLogger(__name__)

PoolLock = Callable[[int, MachineType], ContextManager[None]]


class ReservationRequest(NamedTuple):
    user_id: int
    hall_id: int
    appointment_datetime: datetime
    duration_mins: int
    service_type: Phase
    total_cost: Decimal


class ReservationManager:
    def __init__(
        self,
        assigner: MachineAssigner,
        appointments: AppointmentLedger,
        pool_lock: PoolLock = no_lock,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.assigner = assigner
        self.appointments = appointments
        self.pool_lock = pool_lock
        self.clock = clock

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.appointments.appointment_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError('Appointment not found.')
        return appointment

    def create_reservation(self, request: ReservationRequest) -> Appointment:
        """Book exactly one machine for one load. Raises CapacityExceededError when none is free."""
        with self.pool_lock(request.hall_id, request.service_type.machine_type):
            machine_id = self.assigner.assign_machine(
                request.hall_id,
                request.appointment_datetime,
                request.duration_mins,
                request.service_type,
            )
            appointment = self.appointments.insert_appointment(
                user_id=request.user_id,
                hall_id=request.hall_id,
                machine_id=machine_id,
                appointment_datetime=request.appointment_datetime,
                duration_mins=request.duration_mins,
                service_type=request.service_type,
                total_cost=request.total_cost,
            )

        logger.info(
            'Reserved machine %s for appointment %s (user %s, %s at %s)',
            machine_id, appointment.id, request.user_id, request.service_type.value, request.appointment_datetime,
        )
        return appointment

    def cancel_reservation(self, appointment_id: int) -> bool:
        """
        Mark a pending or confirmed appointment cancelled, freeing its machine.
        Returns False when the appointment is missing or already past that point.
        """
        appointment = self.appointments.appointment_by_id(appointment_id)
        if appointment is None or appointment.status not in ACTIVE_APPOINTMENT_STATUSES:
            return False

        self.appointments.mark_cancelled(appointment, self.clock())
        logger.info('Cancelled appointment %s', appointment_id)
        return True

    def release(self, appointment_ids: list[int]) -> list[int]:
        """Remove reservations that were never paid for. Returns the ids actually removed."""
        released = [appointment_id for appointment_id in appointment_ids if self.appointments.delete_appointment(appointment_id)]
        logger.warning('Released %s of %s reservation(s): %s', len(released), len(appointment_ids), released)
        return released
