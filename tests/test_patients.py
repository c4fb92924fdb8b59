from datetime import date, datetime, time, timedelta

import pytest

from clinic_api.core.config import settings
from clinic_api.core.exceptions import ValidationError
from clinic_api.models.appointment import Appointment, AppointmentStatus
from clinic_api.models.patient import Patient
from clinic_api.services.patient_service import PatientService, status_for_condition

def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))

test_patient_data = {
    "name": "Alice Smith",
    "email": "alice@example.com",
    "password": "AlicePass123",
    "phone": "5550101010",
    "address": "1 Main Street",
}

class TestRegistration:

    def test_register_patient(self, client, db):
        response = client.post("/patient", json=test_patient_data)
        assert response.status_code == 201
        assert response.json()["message"] == "Signup successful"
        assert db.query(Patient).count() == 1

    def test_register_duplicate_email(self, client, db):
        """Second registration with the same email conflicts and stores nothing."""
        client.post("/patient", json=test_patient_data)

        duplicate = dict(test_patient_data, phone="5550202020")
        response = client.post("/patient", json=duplicate)
        assert response.status_code == 409
        assert "error" in response.json()
        assert db.query(Patient).filter(Patient.email == test_patient_data["email"]).count() == 1

    def test_register_duplicate_phone(self, client, db):
        client.post("/patient", json=test_patient_data)

        duplicate = dict(test_patient_data, email="other@example.com")
        response = client.post("/patient", json=duplicate)
        assert response.status_code == 409
        assert db.query(Patient).count() == 1

    def test_register_invalid_email(self, client):
        response = client.post("/patient", json=dict(test_patient_data, email="not-an-email"))
        assert response.status_code == 400
        assert "error" in response.json()

class TestLogin:

    def test_login_success(self, client, token_service):
        client.post("/patient", json=test_patient_data)

        response = client.post(
            "/patient/login",
            json={"email": test_patient_data["email"], "password": test_patient_data["password"]},
        )
        assert response.status_code == 200

        data = response.json()
        assert "message" in data
        assert token_service.validate(data["token"], "patient")
        assert token_service.extract_email(data["token"]) == test_patient_data["email"]

    def test_login_wrong_password(self, client):
        """Wrong password is 401 and no token is handed out."""
        client.post("/patient", json=test_patient_data)

        response = client.post(
            "/patient/login",
            json={"email": test_patient_data["email"], "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert "token" not in response.json()
        assert "error" in response.json()

    def test_login_password_is_case_sensitive(self, client):
        client.post("/patient", json=test_patient_data)

        response = client.post(
            "/patient/login",
            json={"email": test_patient_data["email"], "password": "alicepass123"},
        )
        assert response.status_code == 401

    def test_login_unknown_email(self, client, test_db):
        response = client.post(
            "/patient/login", json={"email": "nobody@example.com", "password": "whatever"}
        )
        assert response.status_code == 401

    def test_login_missing_fields(self, client, test_db):
        response = client.post("/patient/login", json={"email": "alice@example.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required."

    def test_login_with_password_hashing(self, client, db, monkeypatch):
        """With hashing enabled the stored credential is not the password."""
        monkeypatch.setattr(settings, "PASSWORD_HASHING", True)
        client.post("/patient", json=test_patient_data)

        stored = db.query(Patient).filter(Patient.email == test_patient_data["email"]).first()
        assert stored.password != test_patient_data["password"]

        response = client.post(
            "/patient/login",
            json={"email": test_patient_data["email"], "password": test_patient_data["password"]},
        )
        assert response.status_code == 200
        assert "token" in response.json()

class TestPatientDetails:

    def test_get_details(self, client, patient, patient_token):
        response = client.get(f"/patient/{patient_token}")
        assert response.status_code == 200

        data = response.json()["patient"]
        assert data["email"] == patient.email
        assert data["id"] == patient.id
        assert "password" not in data

    def test_get_details_invalid_token(self, client, test_db):
        response = client.get("/patient/invalid_token")
        assert response.status_code == 401

    def test_get_details_unknown_patient(self, client, token_service, test_db):
        token = token_service.issue("ghost@example.com", "patient")
        response = client.get(f"/patient/{token}")
        assert response.status_code == 404

    def test_own_appointments(
        self, client, doctor, patient, patient_token, make_appointment
    ):
        day = date.today() + timedelta(days=2)
        make_appointment(doctor, patient, at(day, 9))
        make_appointment(doctor, patient, at(day, 11))

        response = client.get(f"/patient/{patient.id}/{patient_token}")
        assert response.status_code == 200

        appointments = response.json()["appointments"]
        assert len(appointments) == 2
        for appointment in appointments:
            assert set(appointment) == {
                "id", "doctor_id", "doctor_name", "patient_id", "patient_name",
                "patient_email", "patient_phone", "patient_address",
                "appointment_time", "status",
            }

    def test_other_patients_appointments_refused(
        self, client, patient, other_patient_token
    ):
        response = client.get(f"/patient/{patient.id}/{other_patient_token}")
        assert response.status_code == 401

class TestConditionFilter:

    @pytest.fixture
    def history(self, doctor, other_doctor, patient, other_patient, make_appointment):
        day = date.today() + timedelta(days=3)
        return {
            "past_house": make_appointment(doctor, patient, at(day, 9), AppointmentStatus.COMPLETED),
            "future_house": make_appointment(doctor, patient, at(day, 10)),
            "future_cuddy": make_appointment(other_doctor, patient, at(day, 11)),
            "past_cuddy": make_appointment(other_doctor, patient, at(day, 12), AppointmentStatus.COMPLETED),
            "someone_else": make_appointment(doctor, other_patient, at(day, 13), AppointmentStatus.COMPLETED),
        }

    def test_status_for_condition(self):
        assert status_for_condition("past") == AppointmentStatus.COMPLETED
        assert status_for_condition("FUTURE") == AppointmentStatus.SCHEDULED
        with pytest.raises(ValidationError):
            status_for_condition("yesterday")
        with pytest.raises(ValidationError):
            status_for_condition(None)

    def test_condition_is_case_insensitive(self, db, token_service, patient, history):
        """Upper and lower case conditions select exactly the completed appointments."""
        service = PatientService(db, token_service)
        upper = [v.id for v in service.filter_by_condition("PAST", patient.id)]
        lower = [v.id for v in service.filter_by_condition("past", patient.id)]

        direct = [
            a.id for a in db.query(Appointment)
            .filter(Appointment.patient_id == patient.id, Appointment.status == 1)
            .order_by(Appointment.appointment_time)
        ]
        assert upper == lower == direct
        assert set(direct) == {history["past_house"].id, history["past_cuddy"].id}

    def test_filter_by_doctor(self, db, token_service, patient, history):
        service = PatientService(db, token_service)
        ids = {v.id for v in service.filter_by_doctor("house", patient.id)}
        assert ids == {history["past_house"].id, history["future_house"].id}

    def test_filter_by_doctor_and_condition(self, db, token_service, patient, history):
        service = PatientService(db, token_service)
        views = service.filter_by_doctor_and_condition("future", "CUDDY", patient.id)
        assert [v.id for v in views] == [history["future_cuddy"].id]

    def test_filter_by_doctor_wildcards_are_literal(self, db, token_service, patient, history):
        service = PatientService(db, token_service)
        assert service.filter_by_doctor("_", patient.id) == []
        assert service.filter_by_doctor("%", patient.id) == []
        assert service.filter_by_doctor_and_condition("past", "%", patient.id) == []

    def test_filter_endpoint_condition_only(self, client, patient_token, history):
        response = client.get(f"/patient/filter/future/null/{patient_token}")
        assert response.status_code == 200
        ids = {a["id"] for a in response.json()["appointments"]}
        assert ids == {history["future_house"].id, history["future_cuddy"].id}

    def test_filter_endpoint_name_only(self, client, patient_token, history):
        response = client.get(f"/patient/filter/null/Cuddy/{patient_token}")
        assert response.status_code == 200
        ids = {a["id"] for a in response.json()["appointments"]}
        assert ids == {history["future_cuddy"].id, history["past_cuddy"].id}

    def test_filter_endpoint_both(self, client, patient_token, history):
        response = client.get(f"/patient/filter/past/house/{patient_token}")
        assert response.status_code == 200
        ids = [a["id"] for a in response.json()["appointments"]]
        assert ids == [history["past_house"].id]

    def test_filter_endpoint_neither(self, client, patient_token, history):
        response = client.get(f"/patient/filter/null/null/{patient_token}")
        assert response.status_code == 200
        assert len(response.json()["appointments"]) == 4

    def test_filter_endpoint_bad_condition(self, client, patient_token, history):
        response = client.get(f"/patient/filter/someday/house/{patient_token}")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid condition. Use 'past' or 'future'."

    def test_filter_endpoint_unknown_patient(self, client, token_service, test_db):
        token = token_service.issue("ghost@example.com", "patient")
        response = client.get(f"/patient/filter/past/house/{token}")
        assert response.status_code == 404

    def test_filter_endpoint_requires_patient_token(self, client, doctor_token):
        response = client.get(f"/patient/filter/past/house/{doctor_token}")
        assert response.status_code == 401
