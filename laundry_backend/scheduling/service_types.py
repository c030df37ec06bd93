"""Bookable services and how each one decomposes into single-machine phases."""

import enum
from decimal import Decimal
from typing import NamedTuple

from laundry_backend.core import config
from laundry_backend.core.errors import InvalidBookingRequest
from laundry_backend.models.enums import MachineType, Phase


class ServiceType(str, enum.Enum):
    WASH = 'wash'
    DRY = 'dry'
    WASH_DRY = 'wash_dry'


SERVICE_LABELS = {
    ServiceType.WASH: 'Wash Only',
    ServiceType.DRY: 'Dry Only',
    ServiceType.WASH_DRY: 'Wash & Dry',
}


class PhaseCost(NamedTuple):
    price: Decimal
    duration_mins: int


class PlannedPhase(NamedTuple):
    """One phase of a booking: every load runs it in parallel from offset_mins."""

    phase: Phase
    offset_mins: int
    duration_mins: int
    unit_price: Decimal


def phases_for(service_type: ServiceType) -> tuple[Phase, ...]:
    if service_type is ServiceType.WASH:
        return (Phase.WASH,)
    if service_type is ServiceType.DRY:
        return (Phase.DRY,)
    if service_type is ServiceType.WASH_DRY:
        return (Phase.WASH, Phase.DRY)
    raise ValueError(f'Unhandled service type: {service_type!r}')


def machine_types_for(service_type: ServiceType) -> tuple[MachineType, ...]:
    return tuple(phase.machine_type for phase in phases_for(service_type))


def max_loads_for(service_type: ServiceType) -> int:
    if service_type is ServiceType.WASH_DRY:
        return config.MAX_LOADS_WASH_DRY
    if service_type in (ServiceType.WASH, ServiceType.DRY):
        return config.MAX_LOADS_SINGLE_SERVICE
    raise ValueError(f'Unhandled service type: {service_type!r}')


def validate_load_count(service_type: ServiceType, loads: int) -> int:
    max_loads = max_loads_for(service_type)
    if loads < 1 or loads > max_loads:
        raise InvalidBookingRequest(
            f'{SERVICE_LABELS[service_type]} bookings take between 1 and {max_loads} loads.'
        )
    return loads


def plan_phases(service_type: ServiceType, costs: dict[Phase, PhaseCost]) -> list[PlannedPhase]:
    """
    Lay the phases of a service out back to back.

    Wash-then-dry starts drying the moment washing ends; single services have
    one phase at offset 0.
    """
    planned: list[PlannedPhase] = []
    offset = 0
    for phase in phases_for(service_type):
        cost = costs[phase]
        planned.append(PlannedPhase(phase, offset, cost.duration_mins, cost.price))
        offset += cost.duration_mins
    return planned


def total_duration(plan: list[PlannedPhase]) -> int:
    return sum(planned.duration_mins for planned in plan)


def unit_price(plan: list[PlannedPhase]) -> Decimal:
    return sum((planned.unit_price for planned in plan), Decimal('0'))
