"""Per-hall price and cycle duration lookups."""

from decimal import Decimal
from typing import NamedTuple

from laundry_backend.core import config
from laundry_backend.core.errors import NotFoundError
from laundry_backend.models.enums import MachineType, Phase
from laundry_backend.models.hall import Hall
from laundry_backend.scheduling.ports import HallDirectory, MachineInventory
from laundry_backend.scheduling.service_types import (
    SERVICE_LABELS,
    PhaseCost,
    ServiceType,
    phases_for,
    plan_phases,
    total_duration,
    unit_price,
)


class ServiceDetails(NamedTuple):
    label: str
    price: Decimal
    duration: int


class PricingLookup:
    def __init__(self, halls: HallDirectory, machines: MachineInventory):
        self.halls = halls
        self.machines = machines

    def get_hall(self, hall_id: int) -> Hall:
        hall = self.halls.hall_by_id(hall_id)
        if hall is None:
            raise NotFoundError('Hall not found')
        return hall

    def price_and_duration(self, hall_id: int, machine_type: MachineType) -> PhaseCost:
        hall = self.get_hall(hall_id)

        if machine_type is MachineType.WASHER:
            price = hall.washer_price
        elif machine_type is MachineType.DRYER:
            price = hall.dryer_price
        else:
            raise ValueError(f'Unhandled machine type: {machine_type!r}')

        duration = self.machines.cycle_minutes(hall_id, machine_type) or config.DEFAULT_CYCLE_MINUTES
        return PhaseCost(price=Decimal(price or 0), duration_mins=duration)

    def phase_costs(self, hall_id: int, service_type: ServiceType) -> dict[Phase, PhaseCost]:
        return {
            phase: self.price_and_duration(hall_id, phase.machine_type)
            for phase in phases_for(service_type)
        }

    def service_details(self, hall_id: int, service_type: ServiceType) -> ServiceDetails:
        plan = plan_phases(service_type, self.phase_costs(hall_id, service_type))
        return ServiceDetails(
            label=SERVICE_LABELS[service_type],
            price=unit_price(plan),
            duration=total_duration(plan),
        )
