"""
Capacity checks for a hall's washers and dryers.

Occupancy is never stored on a machine. It is derived every time by scanning
the appointment ledger for pending or confirmed appointments whose interval
overlaps the one being asked about.
"""

from datetime import datetime, timedelta
from typing import Optional

from laundry_backend.core import config
from laundry_backend.models.enums import Phase
from laundry_backend.scheduling.ports import AppointmentLedger, MachineInventory
from laundry_backend.scheduling.time_utils import TimeWindow


def lookback_minutes(machines: MachineInventory, hall_id: int) -> int:
    """
    How far before a requested start an overlapping appointment may have begun.

    Sized from configuration: the largest configured load count times the
    longest cycle of any machine in the hall.
    """
    longest_cycle = machines.longest_cycle_minutes(hall_id) or config.DEFAULT_CYCLE_MINUTES
    return config.max_configured_loads() * longest_cycle


def overlapping_appointments(
    machines: MachineInventory,
    appointments: AppointmentLedger,
    hall_id: int,
    service_type: Optional[Phase],
    requested: TimeWindow,
) -> list:
    window_start = requested.start - timedelta(minutes=lookback_minutes(machines, hall_id))
    candidates = appointments.appointments_overlapping_window(hall_id, service_type, window_start, requested.end)
    return [
        appointment
        for appointment in candidates
        if TimeWindow.starting_at(appointment.appointment_datetime, appointment.duration_mins).overlaps(requested)
    ]


class AvailabilityEngine:
    def __init__(self, machines: MachineInventory, appointments: AppointmentLedger):
        self.machines = machines
        self.appointments = appointments

    def occupied_count(self, hall_id: int, start_time: datetime, service_type: Phase, duration_mins: int) -> int:
        requested = TimeWindow.starting_at(start_time, duration_mins)
        return len(overlapping_appointments(self.machines, self.appointments, hall_id, service_type, requested))

    def is_slot_available(
        self,
        hall_id: int,
        start_time: datetime,
        service_type: Phase,
        duration_mins: int,
        required_machine_count: int = 1,
    ) -> bool:
        """
        Whether at least required_machine_count machines of the phase's type are
        free for the whole of [start_time, start_time + duration_mins).

        duration_mins is a single load's cycle; loads run side by side on
        separate machines. No machine is picked here.
        """
        if required_machine_count < 1:
            raise ValueError('required_machine_count must be at least 1.')

        total_machines = self.machines.count_by_hall_and_type(hall_id, service_type.machine_type)
        if total_machines < required_machine_count:
            return False

        occupied = self.occupied_count(hall_id, start_time, service_type, duration_mins)
        return total_machines - occupied >= required_machine_count
