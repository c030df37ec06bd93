from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from laundry_backend.core.errors import SchedulingError, database_unavailable, scheduling_error_to_http
from laundry_backend.database import SessionLocal, ensure_appointment_schema, ensure_machine_schema
from laundry_backend.models.enums import AppointmentStatus, Phase
from laundry_backend.scheduling.booking import BookingRequest
from laundry_backend.scheduling.factory import build_booking_service, build_pricing, build_slot_generator
from laundry_backend.scheduling.service_types import ServiceType
from laundry_backend.scheduling.time_utils import at_wall_clock, format_wall_clock, parse_wall_clock

router = APIRouter(tags=['appointments'])


class CreateBookingRequest(BaseModel):
    user_id: int
    hall_id: int
    date: date
    time: str
    service_type: ServiceType
    loads: int = 1

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str) -> str:
        return format_wall_clock(parse_wall_clock(value))

    @field_validator('loads')
    @classmethod
    def validate_loads(cls, value: int) -> int:
        if value < 1:
            raise ValueError('At least one load is required.')
        return value


class UpdateStatusRequest(BaseModel):
    status: AppointmentStatus


class SlotsResponse(BaseModel):
    slots: list[str]
    machine_error: str | None = None


class ServiceDetailsResponse(BaseModel):
    service_type: ServiceType
    label: str
    price: Decimal
    duration: int


class AppointmentResponse(BaseModel):
    id: int
    user_id: int
    hall_id: int
    machine_id: int | None = None
    appointment_datetime: datetime
    duration_mins: int
    service_type: Phase
    status: AppointmentStatus
    total_cost: Decimal
    created_at: datetime | None = None
    cancelled_at: datetime | None = None

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    appointments: list[AppointmentResponse]
    total_cost: Decimal
    new_balance: Decimal


class CancellationResponse(BaseModel):
    cancelled: bool
    refunded: Decimal
    new_balance: Decimal | None = None


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
        ensure_machine_schema()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@router.get('/slots', response_model=SlotsResponse)
def list_available_slots(
    hall_id: int = Query(...),
    date: date = Query(...),
    service_type: ServiceType = Query(...),
    loads: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        hall = build_pricing(db).get_hall(hall_id)
        result = build_slot_generator(db).get_available_slots(hall, date, service_type, loads)
        return SlotsResponse(slots=result.slots, machine_error=result.machine_error)
    except SchedulingError as exc:
        raise scheduling_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/service-details', response_model=ServiceDetailsResponse)
def get_service_details(
    hall_id: int = Query(...),
    service_type: ServiceType = Query(...),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        details = build_pricing(db).service_details(hall_id, service_type)
        return ServiceDetailsResponse(
            service_type=service_type,
            label=details.label,
            price=details.price,
            duration=details.duration,
        )
    except SchedulingError as exc:
        raise scheduling_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/book', response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(data: CreateBookingRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        result = build_booking_service(db).book(
            BookingRequest(
                user_id=data.user_id,
                hall_id=data.hall_id,
                start_time=at_wall_clock(data.date, data.time),
                service_type=data.service_type,
                loads=data.loads,
            )
        )
        return BookingResponse(
            appointments=[AppointmentResponse.model_validate(appointment) for appointment in result.appointments],
            total_cost=result.total_cost,
            new_balance=result.new_balance,
        )
    except SchedulingError as exc:
        raise scheduling_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('', response_model=list[AppointmentResponse])
def list_my_appointments(
    user_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='User id is required.',
        )

    ensure_database_ready()

    try:
        return build_booking_service(db).upcoming_for_user(user_id)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.delete('/{appointment_id}', response_model=CancellationResponse)
def cancel_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        result = build_booking_service(db).cancel(appointment_id)
        return CancellationResponse(
            cancelled=result.cancelled,
            refunded=result.refunded,
            new_balance=result.new_balance,
        )
    except SchedulingError as exc:
        raise scheduling_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(appointment_id: int, data: UpdateStatusRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return build_booking_service(db).change_status(appointment_id, data.status)
    except SchedulingError as exc:
        raise scheduling_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
