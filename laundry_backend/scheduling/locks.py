"""
Serialization of machine assignment per (hall, machine type).

Finding a free machine and inserting the appointment that claims it must not
interleave with another request for the same pool. Inside one process a
threading.Lock covers that; on PostgreSQL a transaction-scoped advisory lock
extends it across processes and is released when the insert commits.
"""

from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.orm import Session

from laundry_backend.core import config
from laundry_backend.models.enums import MachineType

_registry_lock = Lock()
_pool_locks: dict[tuple[int, MachineType], Lock] = {}

_TYPE_KEYS = {MachineType.WASHER: 1, MachineType.DRYER: 2}


def advisory_key(hall_id: int, machine_type: MachineType) -> int:
    return hall_id * 10 + _TYPE_KEYS[machine_type]


def _pool_lock(hall_id: int, machine_type: MachineType) -> Lock:
    with _registry_lock:
        return _pool_locks.setdefault((hall_id, machine_type), Lock())


@contextmanager
def machine_pool_lock(db: Session, hall_id: int, machine_type: MachineType) -> Iterator[None]:
    if not config.MACHINE_LOCKING:
        yield
        return

    with _pool_lock(hall_id, machine_type):
        if db.get_bind().dialect.name == 'postgresql':
            db.execute(text('SELECT pg_advisory_xact_lock(:key)'), {'key': advisory_key(hall_id, machine_type)})
        try:
            yield
        except Exception:
            # Releases the advisory lock when nothing was committed.
            db.rollback()
            raise


@contextmanager
def no_lock(hall_id: int, machine_type: MachineType) -> Iterator[None]:
    yield
