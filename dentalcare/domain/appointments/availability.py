"""
Availability - open time slots for a doctor on a date

Slot ticks are pure wall-clock arithmetic on minutes since midnight; the
booked set is passed in so the generator never touches the database.
"""

from datetime import datetime
from typing import Iterable, Optional

from ...models import WEEKDAYS


def weekday_name(date_str: str) -> str:
    """'2024-01-01' -> 'monday'"""
    return WEEKDAYS[datetime.strptime(date_str, "%Y-%m-%d").weekday()]


def _to_minutes(time_str: str) -> int:
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def _to_time(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def generate_time_slots(working_day: Optional[dict], session_duration: int) -> list[str]:
    """
    Every session start between the working day's start (inclusive) and end
    (exclusive), session_duration minutes apart.

    Args:
        working_day: {"start": "HH:MM", "end": "HH:MM", "isWorking": bool}
        session_duration: Minutes per session, must be positive

    Returns:
        Ordered list of HH:MM strings; empty on a non-working day
    """
    if not working_day or not working_day.get("isWorking"):
        return []
    if session_duration <= 0:
        raise ValueError("Session duration must be positive")

    start = _to_minutes(working_day["start"])
    end = _to_minutes(working_day["end"])
    return [_to_time(tick) for tick in range(start, end, session_duration)]


def compute_open_slots(
    working_hours: dict,
    session_duration: int,
    leave_days: Iterable[str],
    date_str: str,
    booked_times: Iterable[str],
) -> list[str]:
    """Slots for date_str minus leave days and times already booked"""
    if date_str in set(leave_days or []):
        return []

    working_day = (working_hours or {}).get(weekday_name(date_str))
    booked = set(booked_times)
    return [t for t in generate_time_slots(working_day, session_duration) if t not in booked]
