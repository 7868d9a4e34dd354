"""Reminder recurrence - occurrence dates for a recurring interval"""

from datetime import datetime

from dateutil.relativedelta import relativedelta

INTERVALS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(weeks=1),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
}


def nth_occurrence(anchor: str, interval: str, n: int) -> str:
    """
    The n-th occurrence after an ISO anchor date.

    Always counted from the anchor, so month and year steps clamp to the
    last day of a shorter month without drifting ('2024-01-31' monthly:
    n=1 -> '2024-02-29', n=2 -> '2024-03-31').

    Raises:
        ValueError: On an unknown interval
    """
    if interval not in INTERVALS:
        raise ValueError(f"Unknown recurring interval: {interval}")
    start = datetime.strptime(anchor, "%Y-%m-%d").date()
    return (start + INTERVALS[interval] * n).isoformat()


def next_occurrence(date_str: str, interval: str) -> str:
    return nth_occurrence(date_str, interval, 1)


def advance_past(anchor: str, interval: str, today: str) -> str:
    """First occurrence strictly after today, so a missed run does not resend a backlog"""
    n = 1
    next_date = nth_occurrence(anchor, interval, n)
    while next_date <= today:
        n += 1
        next_date = nth_occurrence(anchor, interval, n)
    return next_date
