"""Availability slot model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Index, String, Time, UniqueConstraint, text
from mounasabet.database import Base


class AvailabilitySlot(Base):
    """A provider's declared open window on one date, optionally for one service."""
    __tablename__ = "availability_slots"
    __table_args__ = (
        UniqueConstraint(
            "provider_id",
            "service_id",
            "date",
            "start_time",
            name="uq_availability_slots_scoped",
        ),
        # NULL service ids never collide under the constraint above.
        Index(
            "uq_availability_slots_unscoped",
            "provider_id",
            "date",
            "start_time",
            unique=True,
            sqlite_where=text("service_id IS NULL"),
            postgresql_where=text("service_id IS NULL"),
        ),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    provider_id = Column(String, nullable=False, index=True)
    service_id = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
