"""Seed halls, their machines and a demo resident.

Usage:
    python -m laundry_backend.seed
"""
import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from laundry_backend.database import Base, SessionLocal, engine
from laundry_backend.models import appointment, payment  # noqa: F401
from laundry_backend.models.enums import MachineStatus, MachineType
from laundry_backend.models.hall import Hall
from laundry_backend.models.machine import Machine
from laundry_backend.models.user import User

logger = logging.getLogger(__name__)

HALLS = [
    'Chancellor Hall',
    'Taylor Hall',
    'Preston Hall',
    'Irvine Hall',
]

WASHER_CYCLE_MINUTES = 45
DRYER_CYCLE_MINUTES = 60

WASHER_STATUSES = [MachineStatus.AVAILABLE] * 5 + [MachineStatus.MAINTENANCE]
DRYER_STATUSES = [MachineStatus.AVAILABLE] * 3 + [MachineStatus.OUT_OF_SERVICE]


def seed_hall(db: Session, name: str) -> Hall:
    hall = Hall(
        name=name,
        opening_time='08:00',
        closing_time='22:00',
        washer_price=Decimal('250.00'),
        dryer_price=Decimal('200.00'),
    )
    db.add(hall)
    db.flush()

    for status in WASHER_STATUSES:
        db.add(Machine(hall_id=hall.id, type=MachineType.WASHER, status=status, duration_mins=WASHER_CYCLE_MINUTES))
    for status in DRYER_STATUSES:
        db.add(Machine(hall_id=hall.id, type=MachineType.DRYER, status=status, duration_mins=DRYER_CYCLE_MINUTES))

    return hall


def seed(db: Session) -> None:
    if db.query(Hall).first() is not None:
        logger.info('Halls already present; skipping seed.')
        return

    halls = [seed_hall(db, name) for name in HALLS]
    db.add(User(email='resident@example.edu', hall_id=halls[0].id, wallet_balance=Decimal('1250.00')))
    db.commit()
    logger.info('Seeded %s halls with %s washers and %s dryers each.', len(halls), len(WASHER_STATUSES), len(DRYER_STATUSES))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
