from datetime import date, datetime

import pytest

from laundry_backend.core.errors import InvalidBookingRequest
from laundry_backend.models.enums import MachineType, Phase
from laundry_backend.scheduling.factory import build_slot_generator
from laundry_backend.scheduling.service_types import ServiceType

BOOKING_DAY = date(2026, 1, 5)
BEFORE_OPENING = datetime(2026, 1, 5, 7, 0)


@pytest.fixture
def slot_generator(appointment_db):
    return build_slot_generator(appointment_db, clock=lambda: BEFORE_OPENING)


def test_last_slot_ends_exactly_at_closing(slot_generator, make_hall) -> None:
    hall = make_hall(washers=1)

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 1)

    assert result.machine_error is None
    assert result.slots[0] == '08:00'
    assert result.slots[-1] == '21:15'
    assert '21:30' not in result.slots
    assert len(result.slots) == 54


def test_slots_are_chronological_at_fifteen_minute_steps(slot_generator, make_hall) -> None:
    hall = make_hall(washers=1, opening_time='09:00', closing_time='10:30')

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 1)

    assert result.slots == ['09:00', '09:15', '09:30', '09:45']


def test_past_slots_are_not_offered(appointment_db, make_hall) -> None:
    hall = make_hall(washers=1, opening_time='09:00', closing_time='12:00')
    generator = build_slot_generator(appointment_db, clock=lambda: datetime(2026, 1, 5, 10, 0))

    result = generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 1)

    assert result.slots[0] == '10:15'


def test_other_days_are_unaffected_by_the_clock(appointment_db, make_hall) -> None:
    hall = make_hall(washers=1, opening_time='09:00', closing_time='10:00')
    generator = build_slot_generator(appointment_db, clock=lambda: datetime(2026, 1, 5, 23, 0))

    assert generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 1).slots == []
    assert generator.get_available_slots(hall, date(2026, 1, 6), ServiceType.WASH, 1).slots == ['09:00', '09:15']


@pytest.mark.parametrize(
    ('washers', 'dryers', 'service_type', 'message'),
    [
        (0, 2, ServiceType.WASH, 'No washers available in this hall'),
        (2, 0, ServiceType.DRY, 'No dryers available in this hall'),
        (0, 0, ServiceType.WASH_DRY, 'No washers or dryers available in this hall'),
        (0, 2, ServiceType.WASH_DRY, 'No washers available in this hall'),
        (2, 0, ServiceType.WASH_DRY, 'No dryers available in this hall'),
    ],
)
def test_missing_machine_types_are_reported(slot_generator, make_hall, washers, dryers, service_type, message) -> None:
    hall = make_hall(washers=washers, dryers=dryers)

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, service_type, 1)

    assert result.slots == []
    assert result.machine_error == message


def test_multiple_loads_need_that_many_free_machines(slot_generator, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=2, opening_time='10:00', closing_time='11:00')
    make_appointment(hall, machine_ids(hall, MachineType.WASHER)[0], datetime(2026, 1, 5, 10, 0), duration_mins=45)

    one_load = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 1)
    two_loads = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 2)

    assert one_load.slots == ['10:00', '10:15']
    assert two_loads.slots == []


def test_loads_do_not_lengthen_single_service_slots(slot_generator, make_hall) -> None:
    hall = make_hall(washers=3, opening_time='10:00', closing_time='11:00')

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH, 3)

    assert result.slots == ['10:00', '10:15']


def test_wash_dry_checks_dryers_when_washing_ends(slot_generator, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=1, dryers=1, opening_time='10:00', closing_time='14:00')
    make_appointment(
        hall,
        machine_ids(hall, MachineType.DRYER)[0],
        datetime(2026, 1, 5, 11, 45),
        duration_mins=60,
        service_type=Phase.DRY,
    )

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH_DRY, 1)

    # Drying from 10:45 ends as the booked dryer starts; from 12:00 it starts as that one ends.
    assert result.slots == ['10:00', '12:00', '12:15']


def test_wash_dry_requires_free_washers(slot_generator, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=1, dryers=1, opening_time='10:00', closing_time='12:30')
    make_appointment(hall, machine_ids(hall, MachineType.WASHER)[0], datetime(2026, 1, 5, 10, 0), duration_mins=45)

    result = slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH_DRY, 1)

    assert result.slots == ['10:45']


def test_load_count_outside_limits_is_rejected(slot_generator, make_hall) -> None:
    hall = make_hall(washers=4, dryers=4)

    with pytest.raises(InvalidBookingRequest):
        slot_generator.get_available_slots(hall, BOOKING_DAY, ServiceType.WASH_DRY, 3)
