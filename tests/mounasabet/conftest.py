import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from mounasabet.database import Base  # noqa: E402
from mounasabet.models.availability import AvailabilitySlot  # noqa: E402
from mounasabet.models.booking import Booking, BookingService  # noqa: E402


@pytest.fixture
def availability_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    tables = [AvailabilitySlot.__table__, Booking.__table__, BookingService.__table__]
    Base.metadata.create_all(bind=engine, tables=tables)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(tables)))


class FailingSession:
    """Stands in for a session whose database has gone away."""

    def __init__(self):
        self.rolled_back = False

    def query(self, *args, **kwargs):
        raise SQLAlchemyError('database is down')

    def rollback(self):
        self.rolled_back = True


@pytest.fixture
def failing_db():
    return FailingSession()


def add_slot(db, slot_date, start_time, end_time, provider_id='prov-1', service_id=None, is_available=True):
    slot = AvailabilitySlot(
        provider_id=provider_id,
        service_id=service_id,
        date=slot_date,
        start_time=start_time,
        end_time=end_time,
        is_available=is_available,
    )
    db.add(slot)
    db.commit()
    return slot


def add_booking(
    db,
    booking_id: str,
    start_time: datetime,
    end_time: datetime,
    status='confirmed',
    provider_id='prov-1',
    service_ids=(),
):
    booking = Booking(
        id=booking_id,
        provider_id=provider_id,
        start_time=start_time,
        end_time=end_time,
        status=status,
        services=[BookingService(service_id=service_id) for service_id in service_ids],
    )
    db.add(booking)
    db.commit()
    return booking


@pytest.fixture
def slot_factory(availability_db):
    def _add(*args, **kwargs):
        return add_slot(availability_db, *args, **kwargs)

    return _add


@pytest.fixture
def booking_factory(availability_db):
    def _add(*args, **kwargs):
        return add_booking(availability_db, *args, **kwargs)

    return _add
