from datetime import date, datetime
from typing import List, Tuple

FIRST_HOUR = 9
LAST_HOUR = 21
SLOT_MINUTES = (0, 30)


def generate_time_options() -> List[str]:
    """Return the bookable times of day, every 30 minutes from 09:00 to 21:00."""
    times = []
    for hour in range(FIRST_HOUR, LAST_HOUR + 1):
        for minute in SLOT_MINUTES:
            # the shop closes at 21:00
            if hour == LAST_HOUR and minute > 0:
                break
            times.append(f"{hour:02d}:{minute:02d}")
    return times


TIME_OPTIONS: Tuple[str, ...] = tuple(generate_time_options())


def parse_time(value: str) -> Tuple[int, int]:
    hour, minute = value.split(":")
    return int(hour), int(minute)


def combine_date_and_time(day: date, time_value: str) -> datetime:
    """Merge a calendar day and an HH:MM slot into one datetime (seconds zeroed)."""
    hour, minute = parse_time(time_value)
    return datetime(day.year, day.month, day.day, hour, minute, 0, 0)


def split_schedule(schedule_at: datetime) -> Tuple[date, str]:
    return schedule_at.date(), schedule_at.strftime("%H:%M")
