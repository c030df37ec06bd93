"""Hall repository"""

from typing import Optional

from sqlalchemy.orm import Session

from laundry_backend.models.hall import Hall


class HallRepository:
    def __init__(self, db: Session):
        self.db = db

    def hall_by_id(self, hall_id: int) -> Optional[Hall]:
        return self.db.query(Hall).filter(Hall.id == hall_id).first()
