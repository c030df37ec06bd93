"""Machine model definitions."""

from sqlalchemy import Column, Enum as SQLEnum, ForeignKey, Integer
from laundry_backend.database import Base
from laundry_backend.models.enums import MachineStatus, MachineType, enum_values


class Machine(Base):
    """A washer or dryer seeded into a hall. Only its status changes after creation."""
    __tablename__ = "machines"

    id = Column(Integer, primary_key=True, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=False, index=True)
    type = Column(SQLEnum(MachineType, name="machine_type", values_callable=enum_values), nullable=False)
    status = Column(
        SQLEnum(MachineStatus, name="machine_status", values_callable=enum_values),
        default=MachineStatus.AVAILABLE,
        nullable=False,
    )
    duration_mins = Column(Integer, default=45, nullable=False)
