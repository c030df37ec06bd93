"""User model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from laundry_backend.database import Base


class User(Base):
    """Represents a resident with a prepaid laundry wallet."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=True)
    wallet_balance = Column(Numeric(10, 2), default=0, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
