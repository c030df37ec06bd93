from datetime import datetime

import pytest

from laundry_backend.core.errors import CapacityExceededError
from laundry_backend.models.enums import AppointmentStatus, MachineStatus, MachineType, Phase
from laundry_backend.models.machine import Machine
from laundry_backend.repositories.appointment_repository import AppointmentRepository
from laundry_backend.repositories.machine_repository import MachineRepository
from laundry_backend.scheduling.machine_assigner import MachineAssigner

TEN_AM = datetime(2026, 1, 5, 10, 0)


@pytest.fixture
def assigner(appointment_db):
    return MachineAssigner(MachineRepository(appointment_db), AppointmentRepository(appointment_db))


def test_lowest_id_machine_is_assigned_first(assigner, make_hall, machine_ids) -> None:
    hall = make_hall(washers=3)

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == machine_ids(hall, MachineType.WASHER)[0]


def test_busy_machines_are_skipped(assigner, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=3)
    washer_ids = machine_ids(hall, MachineType.WASHER)
    make_appointment(hall, washer_ids[0], datetime(2026, 1, 5, 9, 30), duration_mins=45)

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == washer_ids[1]


def test_machine_freed_exactly_at_start_is_reused(assigner, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=2)
    washer_ids = machine_ids(hall, MachineType.WASHER)
    make_appointment(hall, washer_ids[0], datetime(2026, 1, 5, 9, 15), duration_mins=45)

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == washer_ids[0]


def test_cancelled_appointments_do_not_block(assigner, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=1)
    washer_id = machine_ids(hall, MachineType.WASHER)[0]
    make_appointment(hall, washer_id, TEN_AM, status=AppointmentStatus.CANCELLED)

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == washer_id


def test_machines_out_of_rotation_are_never_assigned(appointment_db, assigner, make_hall, machine_ids) -> None:
    hall = make_hall(washers=2)
    washer_ids = machine_ids(hall, MachineType.WASHER)
    appointment_db.get(Machine, washer_ids[0]).status = MachineStatus.OUT_OF_SERVICE
    appointment_db.commit()

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == washer_ids[1]


def test_dryer_bookings_do_not_block_washers(assigner, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=1, dryers=1)
    make_appointment(hall, machine_ids(hall, MachineType.DRYER)[0], TEN_AM, duration_mins=60, service_type=Phase.DRY)

    assert assigner.assign_machine(hall.id, TEN_AM, 45, Phase.WASH) == machine_ids(hall, MachineType.WASHER)[0]
    with pytest.raises(CapacityExceededError):
        assigner.assign_machine(hall.id, TEN_AM, 60, Phase.DRY)


def test_all_machines_busy_raises(assigner, make_hall, make_appointment, machine_ids) -> None:
    hall = make_hall(washers=2)
    for washer_id in machine_ids(hall, MachineType.WASHER):
        make_appointment(hall, washer_id, TEN_AM)

    with pytest.raises(CapacityExceededError) as exception_info:
        assigner.assign_machine(hall.id, datetime(2026, 1, 5, 10, 30), 45, Phase.WASH)

    assert exception_info.value.message == 'No washer available for the selected time slot.'


def test_hall_without_machines_of_type_raises(assigner, make_hall) -> None:
    hall = make_hall(washers=2)

    with pytest.raises(CapacityExceededError) as exception_info:
        assigner.assign_machine(hall.id, TEN_AM, 60, Phase.DRY)

    assert exception_info.value.message == 'No dryers found in this hall.'
