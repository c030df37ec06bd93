"""Appointment repository - the ledger of booked machine intervals"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from laundry_backend.models.appointment import Appointment
from laundry_backend.models.enums import ACTIVE_APPOINTMENT_STATUSES, AppointmentStatus, Phase


class AppointmentRepository:
    """Repository for appointment database operations"""

    def __init__(self, db: Session):
        self.db = db

    def appointments_overlapping_window(
        self,
        hall_id: int,
        service_type: Optional[Phase],
        window_start: datetime,
        window_end: datetime,
        status_filter: Iterable[AppointmentStatus] = ACTIVE_APPOINTMENT_STATUSES,
    ) -> list[Appointment]:
        """
        Appointments in the hall that start inside [window_start, window_end).

        Callers pick window_start far enough back to catch appointments that
        started earlier but are still running; exact overlap is decided by the caller.
        A service_type of None returns both phases.
        """
        query = self.db.query(Appointment).filter(
            Appointment.hall_id == hall_id,
            Appointment.appointment_datetime >= window_start,
            Appointment.appointment_datetime < window_end,
            Appointment.status.in_(list(status_filter)),
        )
        if service_type is not None:
            query = query.filter(Appointment.service_type == service_type)
        return query.order_by(Appointment.appointment_datetime.asc(), Appointment.id.asc()).all()

    def insert_appointment(
        self,
        *,
        user_id: int,
        hall_id: int,
        machine_id: Optional[int],
        appointment_datetime: datetime,
        duration_mins: int,
        service_type: Phase,
        total_cost: Decimal,
        status: AppointmentStatus = AppointmentStatus.PENDING,
    ) -> Appointment:
        appointment = Appointment(
            user_id=user_id,
            hall_id=hall_id,
            machine_id=machine_id,
            appointment_datetime=appointment_datetime,
            duration_mins=duration_mins,
            service_type=service_type,
            status=status,
            total_cost=total_cost,
        )
        self.db.add(appointment)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(appointment)
        return appointment

    def delete_appointment(self, appointment_id: int) -> bool:
        appointment = self.appointment_by_id(appointment_id)
        if appointment is None:
            return False
        self.db.delete(appointment)
        self.db.commit()
        return True

    def appointment_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.query(Appointment).filter(Appointment.id == appointment_id).first()

    def upcoming_for_user(self, user_id: int, now: datetime) -> list[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.user_id == user_id,
                Appointment.appointment_datetime >= now,
                Appointment.status.in_(list(ACTIVE_APPOINTMENT_STATUSES)),
            )
            .order_by(Appointment.appointment_datetime.asc(), Appointment.id.asc())
            .all()
        )

    def mark_cancelled(self, appointment: Appointment, cancelled_at: datetime) -> Appointment:
        appointment.status = AppointmentStatus.CANCELLED
        appointment.cancelled_at = cancelled_at
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def update_status(self, appointment: Appointment, status: AppointmentStatus) -> Appointment:
        appointment.status = status
        self.db.commit()
        self.db.refresh(appointment)
        return appointment
