"""Booking model definitions."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from mounasabet.database import Base


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    # Only these hold provider time.
    ACTIVE = (PENDING, CONFIRMED)


class Booking(Base):
    """Represents a customer's reservation of provider time."""
    __tablename__ = "bookings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    provider_id = Column(String, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default=BookingStatus.PENDING)

    services = relationship(
        "BookingService",
        back_populates="booking",
        cascade="all, delete-orphan",
    )


class BookingService(Base):
    """Links a booking to one of the services it covers."""
    __tablename__ = "booking_services"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(String, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(String, nullable=False)

    booking = relationship("Booking", back_populates="services")
