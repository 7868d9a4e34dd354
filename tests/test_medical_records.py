import pytest

from dentalcare.domain.medical_records.dental_chart import (
    TOOTH_POSITIONS,
    expand_chart,
    validate_chart,
)
from dentalcare.models import Appointment, MedicalRecord, Notification
from dentalcare.shared.validators import today_iso

RECORD = {
    "diagnosis": "Occlusal caries",
    "treatment": "Composite filling",
    "doctorNotes": "Review in six months",
    "symptoms": ["sensitivity"],
    "teethChart": {"tooth16": "filling", "tooth48": "missing"},
    "vitalSigns": {"bloodPressure": "120/80", "heartRate": 72},
}


@pytest.fixture
def confirmed_appointment(client, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]
    client.patch(f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=doctor[0])
    return appointment_id


def test_chart_has_32_fdi_positions():
    assert len(TOOTH_POSITIONS) == 32
    assert TOOTH_POSITIONS[0] == "tooth11"
    assert TOOTH_POSITIONS[-1] == "tooth48"
    assert "tooth19" not in TOOTH_POSITIONS


def test_expand_chart_defaults_to_healthy():
    chart = expand_chart({"tooth21": "crown"})

    assert len(chart) == 32
    assert chart["tooth21"] == "crown"
    assert chart["tooth11"] == "none"
    assert expand_chart(None)["tooth31"] == "none"


def test_validate_chart_rejects_unknown_values():
    with pytest.raises(ValueError):
        validate_chart({"tooth99": "cavity"})
    with pytest.raises(ValueError):
        validate_chart({"tooth11": "veneer"})
    assert validate_chart({"tooth11": None, "tooth12": "cavity"}) == {"tooth12": "cavity"}


def test_record_completes_appointment_and_notifies_patient(
    client, db_session, doctor, patient, confirmed_appointment
):
    response = client.post(
        "/medical-records", json={"appointmentId": confirmed_appointment, **RECORD}, headers=doctor[0]
    )

    assert response.status_code == 201
    assert response.json()["appointmentStatus"] == "completed"

    assert db_session.get(Appointment, confirmed_appointment).status == "completed"
    record = db_session.get(MedicalRecord, response.json()["recordId"])
    assert record.patient_id == patient[1]
    assert record.session_date == today_iso()

    summary = (
        db_session.query(Notification)
        .filter(Notification.user_id == patient[1], Notification.type == "session_summary")
        .one()
    )
    assert summary.related_appointment_id == confirmed_appointment


def test_second_record_for_same_appointment_is_kept(client, db_session, doctor, confirmed_appointment):
    for _ in range(2):
        response = client.post(
            "/medical-records", json={"appointmentId": confirmed_appointment, **RECORD}, headers=doctor[0]
        )
        assert response.status_code == 201

    assert (
        db_session.query(MedicalRecord)
        .filter(MedicalRecord.appointment_id == confirmed_appointment)
        .count()
        == 2
    )


def test_record_needs_confirmed_appointment(client, doctor, patient, book):
    appointment_id = book(patient[0], doctor[1]).json()["appointmentId"]

    response = client.post(
        "/medical-records", json={"appointmentId": appointment_id, **RECORD}, headers=doctor[0]
    )

    assert response.status_code == 409


def test_record_only_by_appointments_doctor(client, make_profile, patient, confirmed_appointment):
    other_doctor, _ = make_profile("doc-2", "doctor")

    response = client.post(
        "/medical-records", json={"appointmentId": confirmed_appointment, **RECORD}, headers=other_doctor
    )
    assert response.status_code == 403

    response = client.post(
        "/medical-records", json={"appointmentId": confirmed_appointment, **RECORD}, headers=patient[0]
    )
    assert response.status_code == 403


def test_record_rejects_unknown_tooth_condition(client, doctor, confirmed_appointment):
    payload = {**RECORD, "appointmentId": confirmed_appointment, "teethChart": {"tooth11": "veneer"}}

    response = client.post("/medical-records", json=payload, headers=doctor[0])

    assert response.status_code == 422


def test_patient_reads_own_records_with_full_chart(client, doctor, patient, confirmed_appointment):
    client.post("/medical-records", json={"appointmentId": confirmed_appointment, **RECORD}, headers=doctor[0])

    records = client.get(f"/medical-records/patient/{patient[1]}", headers=patient[0]).json()

    assert len(records) == 1
    chart = records[0]["teethChart"]
    assert len(chart) == 32
    assert chart["tooth16"] == "filling"
    assert chart["tooth17"] == "none"
    assert records[0]["doctor"]["userId"] == doctor[1]
    assert records[0]["vitalSigns"] == {"bloodPressure": "120/80", "heartRate": 72}


def test_patient_cannot_read_other_records(client, make_profile, patient):
    other_patient, other_id = make_profile("pat-2", "patient")

    response = client.get(f"/medical-records/patient/{other_id}", headers=patient[0])

    assert response.status_code == 403


def test_doctor_reads_any_patient(client, make_profile, patient):
    other_doctor, _ = make_profile("doc-2", "doctor")

    response = client.get(f"/medical-records/patient/{patient[1]}", headers=other_doctor)

    assert response.status_code == 200
    assert response.json() == []


def test_anonymous_reads_nothing(client, patient):
    assert client.get(f"/medical-records/patient/{patient[1]}").json() == []
