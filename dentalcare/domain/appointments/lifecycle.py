"""
Appointment lifecycle - valid status transitions and their side effects

pending -> confirmed | rejected
confirmed -> cancelled | no_show, or completed (medical record creation only)
"""

import logging

logger = logging.getLogger(__name__)

VALID_TRANSITIONS = {
    "pending": ["confirmed", "rejected"],
    "confirmed": ["completed", "cancelled", "no_show"],
    "rejected": [],  # Terminal state
    "completed": [],  # Terminal state
    "cancelled": [],  # Terminal state
    "no_show": [],  # Terminal state
}

# Statuses that return the slot to the open pool
SLOT_RELEASING_STATUSES = ("rejected", "cancelled")

# Patient-facing notification per manual transition; no_show sends none
STATUS_NOTIFICATIONS = {
    "confirmed": (
        "appointment_confirmed",
        "Your appointment for {date} at {time} has been confirmed",
    ),
    "rejected": (
        "appointment_rejected",
        "Your appointment request for {date} at {time} has been rejected",
    ),
    "cancelled": (
        "appointment_cancelled",
        "Your appointment for {date} at {time} has been cancelled",
    ),
}


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Check whether an appointment may move from current_status to new_status.

    Args:
        current_status: Current appointment status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    is_valid = new_status in VALID_TRANSITIONS.get(current_status, [])
    if not is_valid:
        logger.warning(f"⚠️ Invalid appointment transition: {current_status} → {new_status}")
    return is_valid


def releases_slot(new_status: str) -> bool:
    return new_status in SLOT_RELEASING_STATUSES
