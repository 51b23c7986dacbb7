from datetime import date, datetime, timedelta

from app.application.services.time_slots import (
    TIME_OPTIONS,
    combine_date_and_time,
    generate_time_options,
    split_schedule,
)


def _minutes(value: str) -> int:
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def test_generates_25_slots_from_nine_to_nine():
    slots = generate_time_options()
    assert len(slots) == 25
    assert slots[0] == "09:00"
    assert slots[-1] == "21:00"
    assert "21:30" not in slots


def test_slots_are_thirty_minutes_apart():
    slots = generate_time_options()
    gaps = {_minutes(b) - _minutes(a) for a, b in zip(slots, slots[1:])}
    assert gaps == {30}


def test_time_options_is_computed_once():
    assert TIME_OPTIONS == tuple(generate_time_options())
    assert all(len(t) == 5 for t in TIME_OPTIONS)


def test_combine_zeroes_seconds():
    combined = combine_date_and_time(date(2026, 10, 18), "10:30")
    assert combined == datetime(2026, 10, 18, 10, 30, 0, 0)


def test_split_schedule_is_inverse_of_combine():
    when = datetime(2026, 10, 18, 9, 0) + timedelta(hours=3)
    day, time_value = split_schedule(when)
    assert (day, time_value) == (date(2026, 10, 18), "12:00")
    assert combine_date_and_time(day, time_value) == when
