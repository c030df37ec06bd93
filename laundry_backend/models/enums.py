"""Status and type enumerations shared by the laundry models."""

import enum


def enum_values(enum_class: type[enum.Enum]) -> list[str]:
    """Persist enum values ("washer") rather than member names ("WASHER")."""
    return [member.value for member in enum_class]


class MachineType(str, enum.Enum):
    WASHER = "washer"
    DRYER = "dryer"


class MachineStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    OUT_OF_SERVICE = "out_of_service"
    MAINTENANCE = "maintenance"


class Phase(str, enum.Enum):
    """The single-machine service an appointment row books."""

    WASH = "wash"
    DRY = "dry"

    @property
    def machine_type(self) -> MachineType:
        if self is Phase.WASH:
            return MachineType.WASHER
        if self is Phase.DRY:
            return MachineType.DRYER
        raise ValueError(f"Unhandled phase: {self!r}")


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Only these statuses hold a machine for their interval.
ACTIVE_APPOINTMENT_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
