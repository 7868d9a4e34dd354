from dentalcare.domain.appointments.repository import AppointmentRepository
from dentalcare.models import Appointment, AvailabilitySlot, Notification
from dentalcare.shared.validators import today_iso

MONDAY = "2024-01-01"


def slots(client, doctor_id, day=MONDAY):
    response = client.get("/appointments/slots", params={"doctor_id": doctor_id, "date": day})
    assert response.status_code == 200
    return response.json()


def test_open_slots_for_default_monday(client, doctor):
    result = slots(client, doctor[1])

    assert len(result) == 16
    assert result[:2] == ["09:00", "09:30"]
    assert result[-1] == "16:30"


def test_unknown_doctor_has_no_slots(client):
    assert slots(client, 9999) == []


def test_slots_require_iso_date(client, doctor):
    response = client.get("/appointments/slots", params={"doctor_id": doctor[1], "date": "Monday"})

    assert response.status_code == 422


def test_leave_day_closes_the_calendar(client, doctor):
    client.post("/profiles/doctor/leave-days", json={"date": MONDAY}, headers=doctor[0])

    assert slots(client, doctor[1]) == []


def test_booking_creates_pending_appointment_and_notifies_doctor(client, db_session, doctor, patient, book):
    response = book(patient[0], doctor[1], notes="Sensitive molar")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"

    appointment = db_session.get(Appointment, body["appointmentId"])
    assert appointment.patient_id == patient[1]
    assert appointment.notes == "Sensitive molar"

    notifications = db_session.query(Notification).filter(Notification.user_id == doctor[1]).all()
    assert len(notifications) == 1
    assert notifications[0].type == "appointment_request"
    assert notifications[0].related_appointment_id == appointment.id


def test_booked_time_leaves_open_slots(client, doctor, patient, book):
    book(patient[0], doctor[1], time="10:00")

    result = slots(client, doctor[1])
    assert "10:00" not in result
    assert len(result) == 15


def test_double_booking_is_rejected(client, db_session, doctor, patient, make_profile, book):
    other_patient, _ = make_profile("pat-2", "patient")

    assert book(patient[0], doctor[1]).status_code == 201
    response = book(other_patient, doctor[1])

    assert response.status_code == 409
    assert response.json()["detail"] == "Time slot is already booked"
    assert db_session.query(Appointment).count() == 1
    assert db_session.query(AvailabilitySlot).count() == 1
    assert db_session.query(Notification).filter(Notification.user_id == doctor[1]).count() == 1


def test_losing_the_slot_insert_race_rolls_back(client, db_session, monkeypatch, doctor, patient, make_profile, book):
    other_patient, _ = make_profile("pat-2", "patient")
    assert book(patient[0], doctor[1]).status_code == 201

    # The existing row is invisible to the second booking, so it tries to insert the same slot
    monkeypatch.setattr(AppointmentRepository, "get_slot", staticmethod(lambda *args: None))
    response = book(other_patient, doctor[1])

    assert response.status_code == 409
    assert response.json()["detail"] == "Time slot is already booked"
    assert db_session.query(Appointment).count() == 1
    assert db_session.query(AvailabilitySlot).count() == 1
    assert db_session.query(Notification).filter(Notification.user_id == doctor[1]).count() == 1


def test_booking_requires_patient(client, doctor, book):
    response = book(doctor[0], doctor[1])

    assert response.status_code == 403


def test_booking_requires_identity(client, doctor, book):
    response = book({}, doctor[1])

    assert response.status_code == 401


def test_booking_unknown_doctor(client, patient, book):
    response = book(patient[0], 9999)

    assert response.status_code == 404


def test_booking_validates_visit_type_and_time(client, doctor, patient, book):
    assert book(patient[0], doctor[1], visit_type="whitening").status_code == 422
    assert book(patient[0], doctor[1], time="25:00").status_code == 422


def test_my_appointments_include_other_party(client, doctor, patient, book):
    book(patient[0], doctor[1], time="09:00")
    book(patient[0], doctor[1], time="11:00")

    mine = client.get("/appointments/mine", headers=patient[0]).json()
    assert len(mine) == 2
    assert mine[0]["appointmentTime"] == "11:00"
    assert mine[0]["otherUser"]["userId"] == doctor[1]

    doctor_view = client.get("/appointments/mine", headers=doctor[0]).json()
    assert {a["otherUser"]["userId"] for a in doctor_view} == {patient[1]}


def test_my_appointments_empty_when_anonymous(client):
    assert client.get("/appointments/mine").json() == []


def test_today_appointments_sorted_by_time(client, doctor, patient, book):
    today = today_iso()
    book(patient[0], doctor[1], date=today, time="15:00")
    book(patient[0], doctor[1], date=today, time="09:30")
    book(patient[0], doctor[1], date=MONDAY if today != MONDAY else "2024-01-02", time="09:30")

    result = client.get("/appointments/today", headers=doctor[0]).json()

    assert [a["appointmentTime"] for a in result] == ["09:30", "15:00"]
    assert result[0]["patient"]["userId"] == patient[1]


def test_confirm_keeps_slot_booked(client, db_session, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    response = client.patch(
        f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=doctor[0]
    )

    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    slot = db_session.query(AvailabilitySlot).one()
    assert slot.is_booked is True
    assert slot.appointment_id == appointment_id

    notification = (
        db_session.query(Notification).filter(Notification.user_id == patient[1]).one()
    )
    assert notification.type == "appointment_confirmed"


def test_reject_releases_slot_and_allows_rebooking(client, db_session, doctor, patient, make_profile, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    response = client.patch(
        f"/appointments/{appointment_id}/status", json={"status": "rejected"}, headers=doctor[0]
    )

    assert response.status_code == 200
    slot = db_session.query(AvailabilitySlot).one()
    assert slot.is_booked is False
    assert slot.appointment_id is None
    assert "10:00" in slots(client, doctor[1])

    other_patient, _ = make_profile("pat-2", "patient")
    assert book(other_patient, doctor[1]).status_code == 201
    assert db_session.query(AvailabilitySlot).count() == 1


def test_cancel_after_confirm_releases_slot(client, db_session, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]
    client.patch(f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=doctor[0])

    client.patch(f"/appointments/{appointment_id}/status", json={"status": "cancelled"}, headers=doctor[0])

    db_session.expire_all()
    assert db_session.query(AvailabilitySlot).one().is_booked is False
    types = [n.type for n in db_session.query(Notification).filter(Notification.user_id == patient[1])]
    assert sorted(types) == ["appointment_cancelled", "appointment_confirmed"]


def test_no_show_sends_no_notification(client, db_session, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]
    client.patch(f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=doctor[0])

    response = client.patch(
        f"/appointments/{appointment_id}/status", json={"status": "no_show"}, headers=doctor[0]
    )

    assert response.json()["status"] == "no_show"
    assert db_session.query(AvailabilitySlot).one().is_booked is True
    assert db_session.query(Notification).filter(Notification.user_id == patient[1]).count() == 1


def test_invalid_transition_is_conflict(client, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    response = client.patch(
        f"/appointments/{appointment_id}/status", json={"status": "cancelled"}, headers=doctor[0]
    )

    assert response.status_code == 409


def test_completed_cannot_be_set_directly(client, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    response = client.patch(
        f"/appointments/{appointment_id}/status", json={"status": "completed"}, headers=doctor[0]
    )

    assert response.status_code == 422


def test_only_the_appointments_doctor_may_transition(client, doctor, patient, make_profile, book):
    other_doctor, _ = make_profile("doc-2", "doctor")
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    for headers in (other_doctor, patient[0]):
        response = client.patch(
            f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=headers
        )
        assert response.status_code == 403


def test_transition_unknown_appointment(client, doctor):
    response = client.patch("/appointments/999/status", json={"status": "confirmed"}, headers=doctor[0])

    assert response.status_code == 404
