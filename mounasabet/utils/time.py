from datetime import date, datetime, time, timedelta


def parse_time_of_day(value) -> time:
    """Accept a ``time`` or an ``"HH:MM"``/``"HH:MM:SS"`` string."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
            raise ValueError(f"Invalid time of day: {value!r}")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Invalid time of day: {value!r}")
        return time(hour, minute)
    raise TypeError(f"Unsupported time of day type: {type(value)!r}")


def format_time_of_day(value: time) -> str:
    return value.strftime("%H:%M")


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def day_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Half-open ``[start 00:00, day after end 00:00)`` covering both dates."""
    return (
        datetime.combine(start_date, time.min),
        datetime.combine(end_date + timedelta(days=1), time.min),
    )
