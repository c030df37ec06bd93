"""
Booking of one or more loads for a resident.

A request for N loads of one service becomes N single-machine reservations
that all start together. Wash-then-dry becomes N wash reservations at the
requested time plus N dry reservations starting when the wash cycle ends.

Reservations are created one after another: each machine assignment sees the
appointment written by the previous one, which is what puts every load on a
different machine. If any reservation or the final debit fails, everything
created for the request is removed again before the error is raised.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, NamedTuple, Optional

from laundry_backend.core.errors import (
    InsufficientFundsError,
    InvalidBookingRequest,
    PartialBookingFailure,
    SchedulingError,
)
from laundry_backend.models.appointment import Appointment
from laundry_backend.models.enums import AppointmentStatus
from laundry_backend.models.hall import Hall
from laundry_backend.scheduling.ports import AppointmentLedger, Wallet
from laundry_backend.scheduling.pricing import PricingLookup
from laundry_backend.scheduling.reservation_manager import ReservationManager, ReservationRequest
from laundry_backend.scheduling.service_types import (
    PlannedPhase,
    ServiceType,
    plan_phases,
    total_duration,
    unit_price,
    validate_load_count,
)
from laundry_backend.scheduling.time_utils import TimeWindow, add_minutes, operating_window

logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.IN_PROGRESS: frozenset({AppointmentStatus.COMPLETED}),
}


class BookingRequest(NamedTuple):
    user_id: int
    hall_id: int
    start_time: datetime
    service_type: ServiceType
    loads: int


class BookingQuote(NamedTuple):
    plan: list[PlannedPhase]
    loads: int
    total_cost: Decimal


class BookingResult(NamedTuple):
    appointments: list[Appointment]
    total_cost: Decimal
    new_balance: Decimal


class CancellationResult(NamedTuple):
    cancelled: bool
    refunded: Decimal
    new_balance: Optional[Decimal]


class BookingService:
    def __init__(
        self,
        pricing: PricingLookup,
        reservations: ReservationManager,
        appointments: AppointmentLedger,
        wallet: Wallet,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.pricing = pricing
        self.reservations = reservations
        self.appointments = appointments
        self.wallet = wallet
        self.clock = clock

    def quote(self, hall_id: int, service_type: ServiceType, loads: int) -> BookingQuote:
        validate_load_count(service_type, loads)
        plan = plan_phases(service_type, self.pricing.phase_costs(hall_id, service_type))
        return BookingQuote(plan=plan, loads=loads, total_cost=unit_price(plan) * loads)

    def _check_start_time(self, hall: Hall, start_time: datetime, quote: BookingQuote) -> None:
        if start_time <= self.clock():
            raise InvalidBookingRequest('Appointments must be scheduled in the future.')

        hours = operating_window(start_time.date(), hall.opening_time, hall.closing_time)
        if not TimeWindow.starting_at(start_time, total_duration(quote.plan)).fits_within(hours):
            raise InvalidBookingRequest('Appointment is outside the hall\'s operating hours.')

    def book(self, request: BookingRequest) -> BookingResult:
        hall = self.pricing.get_hall(request.hall_id)
        quote = self.quote(hall.id, request.service_type, request.loads)
        self._check_start_time(hall, request.start_time, quote)

        affordability = self.wallet.validate_affordability(request.user_id, quote.total_cost)
        if not affordability.can_book:
            logger.info(
                'Rejected booking for user %s: cost %s exceeds balance %s',
                request.user_id, quote.total_cost, affordability.current_balance,
            )
            raise InsufficientFundsError(current_balance=affordability.current_balance, required=quote.total_cost)

        created: list[Appointment] = []
        try:
            for planned in quote.plan:
                phase_start = add_minutes(request.start_time, planned.offset_mins)
                for _ in range(quote.loads):
                    created.append(
                        self.reservations.create_reservation(
                            ReservationRequest(
                                user_id=request.user_id,
                                hall_id=hall.id,
                                appointment_datetime=phase_start,
                                duration_mins=planned.duration_mins,
                                service_type=planned.phase,
                                total_cost=planned.unit_price,
                            )
                        )
                    )

            new_balance = self.wallet.debit(request.user_id, quote.total_cost, f'appointment_{created[0].id}')
        except Exception as exc:
            if not created:
                raise
            created_ids = [appointment.id for appointment in created]
            logger.warning('Booking for user %s failed after %s reservation(s): %s', request.user_id, len(created), exc)
            released = self.reservations.release(created_ids)
            if isinstance(exc, SchedulingError):
                raise PartialBookingFailure(exc, created_ids, released) from exc
            raise

        logger.info(
            'Booked %s x %s for user %s in hall %s at %s (appointments %s, charged %s)',
            quote.loads, request.service_type.value, request.user_id, hall.id, request.start_time,
            [appointment.id for appointment in created], quote.total_cost,
        )
        return BookingResult(appointments=created, total_cost=quote.total_cost, new_balance=new_balance)

    def cancel(self, appointment_id: int) -> CancellationResult:
        """Cancel one appointment and refund its own cost, not the whole booking's."""
        appointment = self.reservations.get_appointment(appointment_id)
        user_id = appointment.user_id
        refund = Decimal(appointment.total_cost)

        if not self.reservations.cancel_reservation(appointment_id):
            return CancellationResult(cancelled=False, refunded=Decimal('0'), new_balance=None)

        new_balance = self.wallet.credit(user_id, refund, f'refund_appointment_{appointment_id}')
        return CancellationResult(cancelled=True, refunded=refund, new_balance=new_balance)

    def change_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        """
        Move an appointment along its lifecycle. Cancelled, completed and no-show
        appointments are final, so nothing can put a released machine back in use.
        """
        appointment = self.reservations.get_appointment(appointment_id)
        if status not in STATUS_TRANSITIONS.get(appointment.status, frozenset()):
            raise InvalidBookingRequest(
                f'Cannot change an appointment from {appointment.status.value} to {status.value}.'
            )

        if status is AppointmentStatus.CANCELLED:
            self.cancel(appointment_id)
            return self.reservations.get_appointment(appointment_id)

        return self.appointments.update_status(appointment, status)

    def upcoming_for_user(self, user_id: int) -> list[Appointment]:
        return self.appointments.upcoming_for_user(user_id, self.clock())
