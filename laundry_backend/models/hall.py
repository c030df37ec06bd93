"""Hall model definitions."""

from sqlalchemy import Column, Integer, Numeric, String
from laundry_backend.database import Base


class Hall(Base):
    """A residence hall laundry room with its own operating hours and prices."""
    __tablename__ = "halls"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    opening_time = Column(String(5), nullable=False)  # "08:00"
    closing_time = Column(String(5), nullable=False)  # "22:00"
    washer_price = Column(Numeric(10, 2), default=0)
    dryer_price = Column(Numeric(10, 2), default=0)
