from decimal import Decimal

import pytest

from laundry_backend.core import config
from laundry_backend.core.errors import InvalidBookingRequest
from laundry_backend.models.enums import MachineType, Phase
from laundry_backend.scheduling.service_types import (
    PhaseCost,
    PlannedPhase,
    ServiceType,
    machine_types_for,
    phases_for,
    plan_phases,
    total_duration,
    unit_price,
    validate_load_count,
)

COSTS = {
    Phase.WASH: PhaseCost(price=Decimal('250.00'), duration_mins=45),
    Phase.DRY: PhaseCost(price=Decimal('200.00'), duration_mins=60),
}


def test_every_service_type_decomposes_into_phases() -> None:
    assert phases_for(ServiceType.WASH) == (Phase.WASH,)
    assert phases_for(ServiceType.DRY) == (Phase.DRY,)
    assert phases_for(ServiceType.WASH_DRY) == (Phase.WASH, Phase.DRY)


def test_machine_types_follow_phases() -> None:
    assert machine_types_for(ServiceType.WASH) == (MachineType.WASHER,)
    assert machine_types_for(ServiceType.DRY) == (MachineType.DRYER,)
    assert machine_types_for(ServiceType.WASH_DRY) == (MachineType.WASHER, MachineType.DRYER)


def test_wash_dry_plan_starts_drying_when_washing_ends() -> None:
    plan = plan_phases(ServiceType.WASH_DRY, COSTS)

    assert plan == [
        PlannedPhase(Phase.WASH, 0, 45, Decimal('250.00')),
        PlannedPhase(Phase.DRY, 45, 60, Decimal('200.00')),
    ]
    assert total_duration(plan) == 105
    assert unit_price(plan) == Decimal('450.00')


def test_single_service_plan_uses_single_load_duration() -> None:
    plan = plan_phases(ServiceType.DRY, COSTS)

    assert plan == [PlannedPhase(Phase.DRY, 0, 60, Decimal('200.00'))]
    assert total_duration(plan) == 60


def test_validate_load_count_accepts_limits() -> None:
    assert validate_load_count(ServiceType.WASH, config.MAX_LOADS_SINGLE_SERVICE) == config.MAX_LOADS_SINGLE_SERVICE
    assert validate_load_count(ServiceType.WASH_DRY, config.MAX_LOADS_WASH_DRY) == config.MAX_LOADS_WASH_DRY


@pytest.mark.parametrize(
    ('service_type', 'loads'),
    [
        (ServiceType.WASH, 0),
        (ServiceType.DRY, config.MAX_LOADS_SINGLE_SERVICE + 1),
        (ServiceType.WASH_DRY, config.MAX_LOADS_WASH_DRY + 1),
    ],
)
def test_validate_load_count_rejects_out_of_range(service_type: ServiceType, loads: int) -> None:
    with pytest.raises(InvalidBookingRequest):
        validate_load_count(service_type, loads)
