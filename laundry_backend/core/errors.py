"""
Domain errors raised by the scheduling core and their HTTP mapping.
Routes catch SchedulingError and convert it with scheduling_error_to_http so they stay thin.
"""
from decimal import Decimal

from fastapi import HTTPException, status

MSG_DATABASE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and Postgres credentials.'


class SchedulingError(Exception):
    """Base class for every error the scheduler reports to its caller."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND


class CapacityExceededError(SchedulingError):
    """No machine of the required type is free for the requested interval."""

    status_code = status.HTTP_409_CONFLICT


class InsufficientFundsError(SchedulingError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED

    def __init__(self, current_balance: Decimal, required: Decimal):
        self.current_balance = current_balance
        self.required = required
        self.shortfall = max(required - current_balance, Decimal('0'))
        super().__init__(
            f'Insufficient credits. You need {self.shortfall:.2f} more to complete this booking. '
            f'Current balance: {current_balance:.2f}'
        )


class InvalidBookingRequest(SchedulingError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidHallHours(SchedulingError):
    status_code = status.HTTP_400_BAD_REQUEST


class PartialBookingFailure(SchedulingError):
    """
    A multi-load booking failed after some loads were already reserved.
    The reserved loads listed in rolled_back_ids have been removed again.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, cause: Exception, created_ids: list[int], rolled_back_ids: list[int]):
        self.cause = cause
        self.created_ids = created_ids
        self.rolled_back_ids = rolled_back_ids
        super().__init__(
            f'Booking failed after reserving {len(created_ids)} load(s); '
            f'released {len(rolled_back_ids)} of them. {cause}'
        )


def scheduling_error_to_http(exc: SchedulingError) -> HTTPException:
    if isinstance(exc, InsufficientFundsError):
        return HTTPException(
            status_code=exc.status_code,
            detail={
                'message': exc.message,
                'shortfall': str(exc.shortfall),
                'current_balance': str(exc.current_balance),
            },
        )
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=MSG_DATABASE_UNAVAILABLE,
    )
