"""Appointment model definitions."""

from datetime import datetime, timedelta

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, Numeric
from laundry_backend.database import Base
from laundry_backend.models.enums import AppointmentStatus, Phase, enum_values


class Appointment(Base):
    """One machine booked for one load over [appointment_datetime, +duration_mins)."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=False)
    machine_id = Column(Integer, ForeignKey("machines.id"), nullable=True)
    appointment_datetime = Column(DateTime, nullable=False)
    duration_mins = Column(Integer, nullable=False)
    service_type = Column(SQLEnum(Phase, name="service_type", values_callable=enum_values), nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status", values_callable=enum_values),
        default=AppointmentStatus.PENDING,
        nullable=False,
    )
    total_cost = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    cancelled_at = Column(DateTime, nullable=True)

    @property
    def ends_at(self) -> datetime:
        return self.appointment_datetime + timedelta(minutes=self.duration_mins)
