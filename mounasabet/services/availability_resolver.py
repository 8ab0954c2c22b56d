"""Reconcile a provider's declared availability slots against active bookings.

The resolver holds no state between calls. It is handed a SQLAlchemy session
and issues plain queries against ``availability_slots`` and ``bookings``; the
combine step (:func:`build_availability`) is a pure function so it can be
exercised without a database.
"""

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mounasabet.core import config
from mounasabet.models.availability import AvailabilitySlot
from mounasabet.models.booking import Booking, BookingService, BookingStatus
from mounasabet.services.errors import (
    AvailabilityValidationError,
    RetrievalError,
    SlotConflictError,
    WriteError,
)
from mounasabet.utils.time import (
    day_bounds,
    format_time_of_day,
    minute_of_day,
    parse_time_of_day,
    truncate_to_minute,
)

logger = logging.getLogger(__name__)

AvailabilityEntry = dict[str, str | bool]
AvailabilityMap = dict[str, list[AvailabilityEntry]]


def _require_provider_id(provider_id: str | None) -> str:
    normalized = (provider_id or '').strip()
    if not normalized:
        raise AvailabilityValidationError('Provider ID is required.')
    return normalized


def _optional_id(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def resolve_date_range(
    start_date: date | None,
    end_date: date | None,
    today: date | None = None,
) -> tuple[date, date]:
    today = today or date.today()
    start_date = start_date or today
    end_date = end_date or today + timedelta(days=config.DEFAULT_AVAILABILITY_RANGE_DAYS)

    if end_date < start_date:
        raise AvailabilityValidationError('End date must not be before start date.')

    return start_date, end_date


def find_covering_booking(instant: datetime, bookings: list[Booking]) -> Booking | None:
    for booking in bookings:
        if truncate_to_minute(booking.start_time) <= instant < truncate_to_minute(booking.end_time):
            return booking
    return None


def build_availability(slots: list[AvailabilitySlot], bookings: list[Booking]) -> AvailabilityMap:
    """Group slots by ISO date, marking each one booked or free.

    ``slots`` must already be ordered by date and start time. A slot is booked
    when its start instant falls inside ``[start, end)`` of a booking; booking
    bounds are compared as full timestamps, so a booking running past midnight
    also covers the next day's early slots.
    """
    availability: AvailabilityMap = {}

    for slot in slots:
        start_time = parse_time_of_day(slot.start_time)
        instant = datetime.combine(slot.date, start_time)
        booking = find_covering_booking(instant, bookings)

        entry: AvailabilityEntry = {
            'time': format_time_of_day(start_time),
            'available': booking is None,
        }
        if booking is not None:
            entry['bookingId'] = booking.id

        availability.setdefault(slot.date.isoformat(), []).append(entry)

    return availability


class AvailabilityResolver:
    def __init__(self, db: Session):
        self.db = db

    def get_availability(
        self,
        provider_id: str,
        service_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> AvailabilityMap:
        provider_id = _require_provider_id(provider_id)
        service_id = _optional_id(service_id)
        start_date, end_date = resolve_date_range(start_date, end_date)
        range_start, range_end = day_bounds(start_date, end_date)

        try:
            slot_query = self.db.query(AvailabilitySlot).filter(
                AvailabilitySlot.provider_id == provider_id,
                AvailabilitySlot.date >= start_date,
                AvailabilitySlot.date <= end_date,
                AvailabilitySlot.is_available.is_(True),
            )
            if service_id:
                slot_query = slot_query.filter(AvailabilitySlot.service_id == service_id)
            slots = slot_query.order_by(
                AvailabilitySlot.date.asc(),
                AvailabilitySlot.start_time.asc(),
            ).all()

            bookings = self._active_bookings(provider_id, service_id, range_start, range_end)
        except SQLAlchemyError as exc:
            logger.exception('Failed to fetch availability for provider %s', provider_id)
            raise RetrievalError('Failed to fetch availability') from exc

        return build_availability(slots, bookings)

    def set_availability(
        self,
        provider_id: str,
        service_id: str | None,
        slot_date: date,
        start_time: time | str,
        end_time: time | str,
        available: bool = True,
    ) -> None:
        provider_id = _require_provider_id(provider_id)
        service_id = _optional_id(service_id)
        try:
            start = parse_time_of_day(start_time)
            end = parse_time_of_day(end_time)
        except ValueError as exc:
            raise AvailabilityValidationError(str(exc)) from exc

        if minute_of_day(end) <= minute_of_day(start):
            raise AvailabilityValidationError('End time must be after start time.')

        if not available:
            slot_start = datetime.combine(slot_date, start)
            booking = self.find_conflicting_booking(
                provider_id,
                service_id,
                slot_start,
                slot_start + timedelta(minutes=1),
            )
            if booking is not None:
                logger.warning(
                    'Refusing to remove slot %s %s for provider %s: booking %s is active',
                    slot_date.isoformat(),
                    format_time_of_day(start),
                    provider_id,
                    booking.id,
                )
                raise SlotConflictError('This time is already booked.', booking_id=booking.id)

        try:
            matching = self.db.query(AvailabilitySlot).filter(
                AvailabilitySlot.provider_id == provider_id,
                AvailabilitySlot.date == slot_date,
                AvailabilitySlot.start_time == start,
            )
            if service_id:
                matching = matching.filter(AvailabilitySlot.service_id == service_id)
            else:
                matching = matching.filter(AvailabilitySlot.service_id.is_(None))

            if available:
                slot = matching.first()
                if slot is None:
                    self.db.add(
                        AvailabilitySlot(
                            provider_id=provider_id,
                            service_id=service_id,
                            date=slot_date,
                            start_time=start,
                            end_time=end,
                            is_available=True,
                        )
                    )
                else:
                    slot.end_time = end
                    slot.is_available = True
            else:
                matching.delete(synchronize_session=False)

            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Failed to update availability for provider %s', provider_id)
            raise WriteError('Failed to update availability') from exc

        logger.info(
            '%s slot %s %s for provider %s',
            'Opened' if available else 'Removed',
            slot_date.isoformat(),
            format_time_of_day(start),
            provider_id,
        )

    def find_conflicting_booking(
        self,
        provider_id: str,
        service_id: str | None,
        start: datetime,
        end: datetime,
    ) -> Booking | None:
        """Earliest active booking overlapping ``[start, end)``, if any."""
        provider_id = _require_provider_id(provider_id)
        service_id = _optional_id(service_id)
        # Booking timestamps are stored naive.
        if start.tzinfo is not None or end.tzinfo is not None:
            raise AvailabilityValidationError('Start and end must not include a timezone offset.')
        if end <= start:
            raise AvailabilityValidationError('End must be after start.')

        try:
            bookings = self._active_bookings(provider_id, service_id, start, end)
        except SQLAlchemyError as exc:
            logger.exception('Failed to check booking conflicts for provider %s', provider_id)
            raise RetrievalError('Failed to check booking conflicts') from exc

        return bookings[0] if bookings else None

    def _active_bookings(
        self,
        provider_id: str,
        service_id: str | None,
        range_start: datetime,
        range_end: datetime,
    ) -> list[Booking]:
        query = self.db.query(Booking).filter(
            Booking.provider_id == provider_id,
            Booking.status.in_(BookingStatus.ACTIVE),
            Booking.start_time < range_end,
            Booking.end_time > range_start,
        )
        if service_id:
            query = query.filter(Booking.services.any(BookingService.service_id == service_id))
        return query.order_by(Booking.start_time.asc()).all()
