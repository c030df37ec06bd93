import os
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from laundry_backend.database import Base  # noqa: E402
from laundry_backend.models.appointment import Appointment  # noqa: E402
from laundry_backend.models.enums import AppointmentStatus, MachineStatus, MachineType, Phase  # noqa: E402
from laundry_backend.models.hall import Hall  # noqa: E402
from laundry_backend.models.machine import Machine  # noqa: E402
from laundry_backend.models.payment import Payment  # noqa: E402
from laundry_backend.models.user import User  # noqa: E402

TABLES = [Hall.__table__, Machine.__table__, User.__table__, Appointment.__table__, Payment.__table__]


@pytest.fixture
def appointment_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=TABLES)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))


@pytest.fixture
def make_hall(appointment_db):
    def _make_hall(
        washers: int = 0,
        dryers: int = 0,
        opening_time: str = '08:00',
        closing_time: str = '22:00',
        washer_minutes: int = 45,
        dryer_minutes: int = 60,
        washer_price: str = '250.00',
        dryer_price: str = '200.00',
    ) -> Hall:
        hall = Hall(
            name='Chancellor Hall',
            opening_time=opening_time,
            closing_time=closing_time,
            washer_price=Decimal(washer_price),
            dryer_price=Decimal(dryer_price),
        )
        appointment_db.add(hall)
        appointment_db.flush()

        for _ in range(washers):
            appointment_db.add(
                Machine(hall_id=hall.id, type=MachineType.WASHER, status=MachineStatus.AVAILABLE, duration_mins=washer_minutes)
            )
        for _ in range(dryers):
            appointment_db.add(
                Machine(hall_id=hall.id, type=MachineType.DRYER, status=MachineStatus.AVAILABLE, duration_mins=dryer_minutes)
            )

        appointment_db.commit()
        appointment_db.refresh(hall)
        return hall

    return _make_hall


@pytest.fixture
def make_user(appointment_db):
    def _make_user(balance: str = '1000.00', email: str = 'resident@example.edu') -> User:
        user = User(email=email, wallet_balance=Decimal(balance))
        appointment_db.add(user)
        appointment_db.commit()
        appointment_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_appointment(appointment_db):
    def _make_appointment(
        hall: Hall,
        machine_id: int | None,
        start: datetime,
        duration_mins: int = 45,
        service_type: Phase = Phase.WASH,
        status: AppointmentStatus = AppointmentStatus.CONFIRMED,
        user_id: int = 1,
    ) -> Appointment:
        appointment = Appointment(
            user_id=user_id,
            hall_id=hall.id,
            machine_id=machine_id,
            appointment_datetime=start,
            duration_mins=duration_mins,
            service_type=service_type,
            status=status,
            total_cost=Decimal('250.00'),
        )
        appointment_db.add(appointment)
        appointment_db.commit()
        appointment_db.refresh(appointment)
        return appointment

    return _make_appointment


@pytest.fixture
def machine_ids(appointment_db):
    def _machine_ids(hall: Hall, machine_type: MachineType) -> list[int]:
        return [
            machine.id
            for machine in appointment_db.query(Machine).filter(Machine.hall_id == hall.id, Machine.type == machine_type).order_by(Machine.id)
        ]

    return _machine_ids
