from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mounasabet.database import SessionLocal, ensure_availability_schema, ensure_booking_schema
from mounasabet.services.availability_resolver import AvailabilityResolver
from mounasabet.services.errors import (
    AvailabilityError,
    AvailabilityValidationError,
    SlotConflictError,
)
from mounasabet.utils.time import format_time_of_day, parse_time_of_day

router = APIRouter(tags=['availability'])


class SetAvailabilityRequest(BaseModel):
    date: date
    start_time: str = Field(alias='startTime')
    end_time: str = Field(alias='endTime')
    service_id: str | None = Field(default=None, alias='serviceId')
    available: bool = True

    class Config:
        populate_by_name = True

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time_of_day(cls, value: str) -> str:
        return format_time_of_day(parse_time_of_day(value))

    @field_validator('service_id')
    @classmethod
    def validate_service_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class AvailabilityEntryResponse(BaseModel):
    time: str
    available: bool
    bookingId: str | None = None


class AvailabilityResponse(BaseModel):
    availability: dict[str, list[AvailabilityEntryResponse]]


class SuccessResponse(BaseModel):
    success: bool


class ConflictCheckResponse(BaseModel):
    conflict: bool
    bookingId: str | None = None


def ensure_database_ready() -> None:
    try:
        ensure_availability_schema()
        ensure_booking_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL and database credentials.',
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def to_http_exception(exc: AvailabilityError) -> HTTPException:
    if isinstance(exc, AvailabilityValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, SlotConflictError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=status_code, detail=exc.message)


@router.get(
    '/{provider_id}/availability',
    response_model=AvailabilityResponse,
    response_model_exclude_none=True,
)
def get_provider_availability(
    provider_id: str,
    service_id: str | None = Query(default=None, alias='serviceId'),
    start_date: date | None = Query(default=None, alias='startDate'),
    end_date: date | None = Query(default=None, alias='endDate'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        availability = AvailabilityResolver(db).get_availability(
            provider_id,
            service_id=service_id,
            start_date=start_date,
            end_date=end_date,
        )
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc

    return {'availability': availability}


@router.post('/{provider_id}/availability', response_model=SuccessResponse)
def set_provider_availability(
    provider_id: str,
    data: SetAvailabilityRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        AvailabilityResolver(db).set_availability(
            provider_id,
            data.service_id,
            data.date,
            data.start_time,
            data.end_time,
            available=data.available,
        )
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc

    return {'success': True}


@router.get(
    '/{provider_id}/availability/conflicts',
    response_model=ConflictCheckResponse,
    response_model_exclude_none=True,
)
def check_booking_conflict(
    provider_id: str,
    start: datetime = Query(...),
    end: datetime = Query(...),
    service_id: str | None = Query(default=None, alias='serviceId'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        booking = AvailabilityResolver(db).find_conflicting_booking(provider_id, service_id, start, end)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc

    if booking is None:
        return {'conflict': False}
    return {'conflict': True, 'bookingId': booking.id}
