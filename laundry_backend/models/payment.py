"""Payment ledger model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, Numeric, String
from laundry_backend.database import Base
from laundry_backend.models.enums import PaymentStatus, enum_values


class Payment(Base):
    """A wallet movement. Debits are stored as negative amounts."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="USD")
    status = Column(
        SQLEnum(PaymentStatus, name="payment_status", values_callable=enum_values),
        default=PaymentStatus.SUCCEEDED,
    )
    reference = Column(String(255))
    created_at = Column(DateTime, default=datetime.now)
