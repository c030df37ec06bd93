"""Machine repository - read access to a hall's machine inventory"""

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from laundry_backend.models.enums import MachineStatus, MachineType
from laundry_backend.models.machine import Machine

SCHEDULABLE_STATUSES = (MachineStatus.AVAILABLE,)


class MachineRepository:
    """Repository for machine lookups. Machines are ordered by id everywhere."""

    def __init__(self, db: Session):
        self.db = db

    def _hall_type_query(self, hall_id: int, machine_type: MachineType, status_filter: Optional[Iterable[MachineStatus]]):
        query = self.db.query(Machine).filter(Machine.hall_id == hall_id, Machine.type == machine_type)
        if status_filter is not None:
            query = query.filter(Machine.status.in_(list(status_filter)))
        return query

    def machines_by_hall_and_type(
        self,
        hall_id: int,
        machine_type: MachineType,
        status_filter: Optional[Iterable[MachineStatus]] = SCHEDULABLE_STATUSES,
    ) -> list[Machine]:
        return self._hall_type_query(hall_id, machine_type, status_filter).order_by(Machine.id.asc()).all()

    def count_by_hall_and_type(
        self,
        hall_id: int,
        machine_type: MachineType,
        status_filter: Optional[Iterable[MachineStatus]] = SCHEDULABLE_STATUSES,
    ) -> int:
        return self._hall_type_query(hall_id, machine_type, status_filter).count()

    def machine_by_id(self, machine_id: int) -> Optional[Machine]:
        return self.db.query(Machine).filter(Machine.id == machine_id).first()

    def cycle_minutes(self, hall_id: int, machine_type: MachineType) -> Optional[int]:
        """Cycle length of the hall's first machine of this type, whatever its status."""
        row = (
            self.db.query(Machine.duration_mins)
            .filter(Machine.hall_id == hall_id, Machine.type == machine_type)
            .order_by(Machine.id.asc())
            .first()
        )
        return row[0] if row and row[0] else None

    def longest_cycle_minutes(self, hall_id: int) -> Optional[int]:
        return self.db.query(func.max(Machine.duration_mins)).filter(Machine.hall_id == hall_id).scalar()
