import pytest

from dentalcare.domain.reminders.recurrence import advance_past, next_occurrence, nth_occurrence
from dentalcare.domain.reminders.service import dispatch_due_reminders
from dentalcare.models import Notification, Reminder


def reminder_payload(patient_id, **overrides):
    payload = {
        "patientId": patient_id,
        "type": "cleaning",
        "title": "Cleaning due",
        "message": "Time for your six-monthly cleaning",
        "reminderDate": "2024-03-01",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    "start,interval,expected",
    [
        ("2024-03-01", "daily", "2024-03-02"),
        ("2024-03-01", "weekly", "2024-03-08"),
        ("2024-01-31", "monthly", "2024-02-29"),
        ("2024-02-29", "yearly", "2025-02-28"),
    ],
)
def test_next_occurrence(start, interval, expected):
    assert next_occurrence(start, interval) == expected


def test_next_occurrence_rejects_unknown_interval():
    with pytest.raises(ValueError):
        next_occurrence("2024-03-01", "hourly")


def test_advance_past_skips_missed_dates():
    assert advance_past("2024-03-01", "weekly", today="2024-03-20") == "2024-03-22"


def test_create_and_list_reminders(client, doctor, patient):
    client.post("/reminders", json=reminder_payload(patient[1], reminderDate="2024-05-01"), headers=doctor[0])
    response = client.post("/reminders", json=reminder_payload(patient[1]), headers=doctor[0])

    assert response.status_code == 201
    assert response.json()["status"] == "active"

    reminders = client.get("/reminders", headers=doctor[0]).json()
    assert [r["reminderDate"] for r in reminders] == ["2024-03-01", "2024-05-01"]
    assert reminders[0]["patient"]["userId"] == patient[1]


def test_reminders_are_doctor_only(client, patient):
    response = client.post("/reminders", json=reminder_payload(patient[1]), headers=patient[0])

    assert response.status_code == 403
    assert client.get("/reminders", headers=patient[0]).json() == []


def test_recurring_reminder_needs_interval(client, doctor, patient):
    response = client.post(
        "/reminders", json=reminder_payload(patient[1], isRecurring=True), headers=doctor[0]
    )

    assert response.status_code == 422


def test_reminders_due_on_date(client, doctor, patient):
    client.post("/reminders", json=reminder_payload(patient[1]), headers=doctor[0])
    client.post("/reminders", json=reminder_payload(patient[1], reminderDate="2024-03-02"), headers=doctor[0])

    due = client.get("/reminders/due", params={"date": "2024-03-01"}, headers=doctor[0]).json()

    assert len(due) == 1
    assert due[0]["reminderDate"] == "2024-03-01"


def test_cancel_reminder(client, doctor, patient):
    reminder_id = client.post("/reminders", json=reminder_payload(patient[1]), headers=doctor[0]).json()["id"]

    response = client.patch(f"/reminders/{reminder_id}/status", json={"status": "cancelled"}, headers=doctor[0])
    assert response.json()["status"] == "cancelled"
    assert client.get("/reminders", headers=doctor[0]).json() == []

    response = client.patch(f"/reminders/{reminder_id}/status", json={"status": "completed"}, headers=doctor[0])
    assert response.status_code == 409


def test_dispatch_sends_due_reminders(client, db_session, doctor, patient):
    client.post("/reminders", json=reminder_payload(patient[1]), headers=doctor[0])
    client.post(
        "/reminders",
        json=reminder_payload(patient[1], isRecurring=True, recurringInterval="monthly", title="Floss"),
        headers=doctor[0],
    )
    client.post("/reminders", json=reminder_payload(patient[1], reminderDate="2024-04-01"), headers=doctor[0])

    sent = dispatch_due_reminders(db_session, today="2024-03-01")

    assert sent == 2
    notifications = db_session.query(Notification).filter(Notification.user_id == patient[1]).all()
    assert sorted(n.title for n in notifications) == ["Cleaning due", "Floss"]
    assert all(n.type == "reminder" for n in notifications)

    one_shot, recurring, future = db_session.query(Reminder).order_by(Reminder.id).all()
    assert one_shot.status == "completed"
    assert one_shot.last_sent_date == "2024-03-01"
    assert recurring.status == "active"
    assert recurring.reminder_date == "2024-04-01"
    assert future.last_sent_date is None

    # Running again the same day sends nothing new
    assert dispatch_due_reminders(db_session, today="2024-03-01") == 0


def test_month_end_anchor_does_not_drift():
    assert [nth_occurrence("2024-01-31", "monthly", n) for n in (1, 2, 3)] == [
        "2024-02-29",
        "2024-03-31",
        "2024-04-30",
    ]
    assert advance_past("2024-01-31", "monthly", today="2024-02-29") == "2024-03-31"


def test_monthly_dispatch_keeps_month_end(client, db_session, doctor, patient):
    client.post(
        "/reminders",
        json=reminder_payload(patient[1], reminderDate="2024-01-31", isRecurring=True, recurringInterval="monthly"),
        headers=doctor[0],
    )

    dates = []
    for today in ("2024-01-31", "2024-02-29", "2024-03-31"):
        assert dispatch_due_reminders(db_session, today=today) == 1
        dates.append(db_session.query(Reminder).one().reminder_date)

    assert dates == ["2024-02-29", "2024-03-31", "2024-04-30"]
    assert db_session.query(Reminder).one().anchor_date == "2024-01-31"
