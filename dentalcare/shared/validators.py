"""Shared validation utilities"""

import re
from datetime import date, datetime, timezone
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_iso_date(value: Optional[str]) -> Optional[str]:
    """
    Validate an ISO calendar date string.

    Args:
        value: Date string in YYYY-MM-DD format

    Returns:
        The same string, unchanged

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if value is None:
        return value

    try:
        datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValueError("Date must be in YYYY-MM-DD format") from None

    return value


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Validate a 24h wall-clock time string.

    Args:
        value: Time string in HH:MM format

    Returns:
        The same string, unchanged

    Raises:
        ValueError: If the string is not HH:MM between 00:00 and 23:59
    """
    if value is None:
        return value

    if not isinstance(value, str) or not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM (24h) format")

    return value


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number to digits with an optional leading '+'.

    Raises:
        ValueError: If fewer than 7 or more than 15 digits remain
    """
    if not phone:
        return phone

    stripped = phone.strip()
    digits = re.sub(r"\D", "", stripped)
    if len(digits) < 7 or len(digits) > 15:
        raise ValueError("Phone number must contain between 7 and 15 digits")

    return f"+{digits}" if stripped.startswith("+") else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def utc_today() -> date:
    """Calendar date in UTC, the clock the worker crons and analytics windows run on"""
    return datetime.now(timezone.utc).date()


def today_iso() -> str:
    return utc_today().isoformat()
