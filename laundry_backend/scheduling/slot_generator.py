"""Bookable start times for a hall, day, service and load count."""

import logging
from datetime import date, datetime
from typing import Callable, NamedTuple, Optional

from laundry_backend.core import config
from laundry_backend.models.enums import MachineType
from laundry_backend.models.hall import Hall
from laundry_backend.scheduling.availability import AvailabilityEngine
from laundry_backend.scheduling.ports import MachineInventory
from laundry_backend.scheduling.pricing import PricingLookup
from laundry_backend.scheduling.service_types import (
    PlannedPhase,
    ServiceType,
    machine_types_for,
    plan_phases,
    total_duration,
    validate_load_count,
)
from laundry_backend.scheduling.time_utils import (
    TimeWindow,
    add_minutes,
    format_wall_clock,
    iterate_slot_starts,
    operating_window,
)

logger = logging.getLogger(__name__)

_MACHINE_LABELS = {MachineType.WASHER: 'washers', MachineType.DRYER: 'dryers'}


class SlotsResult(NamedTuple):
    slots: list[str]
    machine_error: Optional[str] = None


class SlotGenerator:
    def __init__(
        self,
        machines: MachineInventory,
        availability: AvailabilityEngine,
        pricing: PricingLookup,
        clock: Callable[[], datetime] = datetime.now,
        increment_minutes: Optional[int] = None,
    ):
        self.machines = machines
        self.availability = availability
        self.pricing = pricing
        self.clock = clock
        self.increment_minutes = increment_minutes or config.SLOT_INCREMENT_MINUTES

    def machine_error(self, hall_id: int, service_type: ServiceType) -> Optional[str]:
        """Describe which required machine types the hall has none of, if any."""
        missing = [
            machine_type
            for machine_type in machine_types_for(service_type)
            if self.machines.count_by_hall_and_type(hall_id, machine_type) == 0
        ]
        if not missing:
            return None
        return f"No {' or '.join(_MACHINE_LABELS[machine_type] for machine_type in missing)} available in this hall"

    def candidate_starts(self, hall: Hall, day: date, duration_mins: int, now: datetime) -> list[datetime]:
        hours = operating_window(day, hall.opening_time, hall.closing_time)
        return [
            start
            for start in iterate_slot_starts(hours, self.increment_minutes)
            if TimeWindow.starting_at(start, duration_mins).fits_within(hours) and start > now
        ]

    def is_bookable(self, hall_id: int, start: datetime, plan: list[PlannedPhase], load_count: int) -> bool:
        # all() stops at the first phase without enough machines.
        return all(
            self.availability.is_slot_available(
                hall_id,
                add_minutes(start, planned.offset_mins),
                planned.phase,
                planned.duration_mins,
                load_count,
            )
            for planned in plan
        )

    def get_available_slots(self, hall: Hall, day: date, service_type: ServiceType, load_count: int) -> SlotsResult:
        validate_load_count(service_type, load_count)

        machine_error = self.machine_error(hall.id, service_type)
        if machine_error:
            return SlotsResult(slots=[], machine_error=machine_error)

        plan = plan_phases(service_type, self.pricing.phase_costs(hall.id, service_type))
        candidates = self.candidate_starts(hall, day, total_duration(plan), self.clock())

        slots = [
            format_wall_clock(start)
            for start in candidates
            if self.is_bookable(hall.id, start, plan, load_count)
        ]
        logger.debug(
            'Hall %s on %s: %s of %s candidate %s slots bookable for %s load(s)',
            hall.id, day, len(slots), len(candidates), service_type.value, load_count,
        )
        return SlotsResult(slots=slots)
