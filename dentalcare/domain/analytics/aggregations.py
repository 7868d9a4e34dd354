"""
Analytics reducers

Plain functions over already-loaded rows; the service does the scanning.
"""

from collections import Counter
from typing import Iterable, Optional

PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}

AGE_GROUPS = ("Under 18", "18-34", "35-54", "55+")


def age_group(age: Optional[int]) -> Optional[str]:
    if age is None:
        return None
    if age < 18:
        return "Under 18"
    if age < 35:
        return "18-34"
    if age < 55:
        return "35-54"
    return "55+"


def count_by(values: Iterable[Optional[str]], missing: Optional[str] = None) -> dict[str, int]:
    """Occurrences per value; None becomes `missing` or is skipped"""
    counter = Counter()
    for value in values:
        if value is None:
            if missing is None:
                continue
            value = missing
        counter[value] += 1
    return dict(counter)


def percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def safe_average(total: float, count: int) -> float:
    return round(total / count, 2) if count else 0.0
