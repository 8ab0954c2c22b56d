from datetime import date, datetime, time

import pytest

from mounasabet.utils.time import (
    day_bounds,
    format_time_of_day,
    minute_of_day,
    parse_time_of_day,
    truncate_to_minute,
)


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('14:00', time(14, 0)),
        ('9:05', time(9, 5)),
        (' 23:59:30 ', time(23, 59)),
        (time(8, 15, 42), time(8, 15)),
    ],
)
def test_parse_time_of_day(value, expected: time) -> None:
    assert parse_time_of_day(value) == expected


@pytest.mark.parametrize('value', ['24:00', '12:60', '12', 'noon', '-1:00'])
def test_parse_time_of_day_rejects_malformed_strings(value: str) -> None:
    with pytest.raises(ValueError):
        parse_time_of_day(value)


def test_parse_time_of_day_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        parse_time_of_day(1400)


def test_minute_of_day_orders_unpadded_times_correctly() -> None:
    # "9:00" > "10:00" as strings; as minutes it sorts first.
    assert minute_of_day(parse_time_of_day('9:00')) < minute_of_day(parse_time_of_day('10:00'))


def test_format_time_of_day_zero_pads() -> None:
    assert format_time_of_day(time(9, 5)) == '09:05'


def test_truncate_to_minute() -> None:
    assert truncate_to_minute(datetime(2025, 9, 15, 14, 0, 59, 999)) == datetime(2025, 9, 15, 14, 0)


def test_day_bounds_is_half_open_over_whole_days() -> None:
    assert day_bounds(date(2025, 9, 15), date(2025, 9, 16)) == (
        datetime(2025, 9, 15, 0, 0),
        datetime(2025, 9, 17, 0, 0),
    )
