"""Picks the specific machine that will run a single load."""

import logging
from datetime import datetime

from laundry_backend.core.errors import CapacityExceededError
from laundry_backend.models.enums import Phase
from laundry_backend.scheduling.availability import overlapping_appointments
from laundry_backend.scheduling.ports import AppointmentLedger, MachineInventory
from laundry_backend.scheduling.time_utils import TimeWindow

logger = logging.getLogger(__name__)


class MachineAssigner:
    """
    Assigns the lowest-id available machine that has no pending or confirmed
    appointment overlapping the requested interval.

    Lowest-id-first is the assignment policy: it is reproducible, and on a
    quiet day it concentrates bookings on the low-numbered machines.
    """

    def __init__(self, machines: MachineInventory, appointments: AppointmentLedger):
        self.machines = machines
        self.appointments = appointments

    def busy_machine_ids(self, hall_id: int, requested: TimeWindow) -> set[int]:
        return {
            appointment.machine_id
            for appointment in overlapping_appointments(self.machines, self.appointments, hall_id, None, requested)
            if appointment.machine_id is not None
        }

    def assign_machine(self, hall_id: int, start_time: datetime, duration_mins: int, service_type: Phase) -> int:
        machine_type = service_type.machine_type
        candidates = self.machines.machines_by_hall_and_type(hall_id, machine_type)
        if not candidates:
            raise CapacityExceededError(f'No {machine_type.value}s found in this hall.')

        requested = TimeWindow.starting_at(start_time, duration_mins)
        busy = self.busy_machine_ids(hall_id, requested)

        for machine in candidates:
            if machine.id not in busy:
                logger.debug('Assigned %s %s in hall %s for %s', machine_type.value, machine.id, hall_id, start_time)
                return machine.id

        raise CapacityExceededError(f'No {machine_type.value} available for the selected time slot.')
