import pytest

from dentalcare.domain.appointments.lifecycle import (
    STATUS_NOTIFICATIONS,
    releases_slot,
    validate_status_transition,
)


@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "confirmed"),
        ("pending", "rejected"),
        ("confirmed", "cancelled"),
        ("confirmed", "no_show"),
        ("confirmed", "completed"),
    ],
)
def test_valid_transitions(current, new):
    assert validate_status_transition(current, new) is True


@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "completed"),
        ("pending", "cancelled"),
        ("confirmed", "pending"),
        ("rejected", "confirmed"),
        ("completed", "cancelled"),
        ("cancelled", "confirmed"),
        ("no_show", "confirmed"),
        ("confirmed", "confirmed"),
    ],
)
def test_invalid_transitions(current, new):
    assert validate_status_transition(current, new) is False


def test_only_reject_and_cancel_release_the_slot():
    assert releases_slot("rejected")
    assert releases_slot("cancelled")
    assert not releases_slot("confirmed")
    assert not releases_slot("no_show")


def test_no_show_has_no_patient_notification():
    assert "no_show" not in STATUS_NOTIFICATIONS
    assert STATUS_NOTIFICATIONS["confirmed"][0] == "appointment_confirmed"
