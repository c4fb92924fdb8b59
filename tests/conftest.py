import os
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

# Set testing environment before the application is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from clinic_api.main import app
from clinic_api.core.database import Base, SessionLocal, engine
from clinic_api.models.admin import Admin
from clinic_api.models.appointment import Appointment, AppointmentStatus
from clinic_api.models.doctor import Doctor, DoctorAvailability
from clinic_api.models.patient import Patient
from clinic_api.core.security import UserRole

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db(test_db):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def token_service():
    return app.state.token_service

# Test data
@pytest.fixture
def doctor(db):
    record = Doctor(
        name="Gregory House",
        email="house@clinic.example.com",
        password="vicodin",
        specialty="Diagnostics",
        phone="5550001000",
        available_times=[
            DoctorAvailability(time_slot="09:00-10:00"),
            DoctorAvailability(time_slot="10:00-11:00"),
        ],
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@pytest.fixture
def other_doctor(db):
    record = Doctor(
        name="Lisa Cuddy",
        email="cuddy@clinic.example.com",
        password="dean",
        specialty="Endocrinology",
        phone="5550002000",
        available_times=[DoctorAvailability(time_slot="14:00-15:00")],
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@pytest.fixture
def patient(db):
    record = Patient(
        name="Jane Doe",
        email="jane@example.com",
        password="JanePass123",
        phone="5551234567",
        address="12 Elm Street",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@pytest.fixture
def other_patient(db):
    record = Patient(
        name="John Roe",
        email="john@example.com",
        password="JohnPass123",
        phone="5559876543",
        address="34 Oak Avenue",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@pytest.fixture
def admin_user(db):
    record = Admin(username="admin", password="AdminPass123")
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@pytest.fixture
def patient_token(token_service, patient):
    return token_service.issue(patient.email, UserRole.PATIENT)

@pytest.fixture
def other_patient_token(token_service, other_patient):
    return token_service.issue(other_patient.email, UserRole.PATIENT)

@pytest.fixture
def doctor_token(token_service, doctor):
    return token_service.issue(doctor.email, UserRole.DOCTOR)

@pytest.fixture
def admin_token(token_service, admin_user):
    return token_service.issue(admin_user.username, UserRole.ADMIN)

@pytest.fixture
def future_day():
    return date.today() + timedelta(days=7)

@pytest.fixture
def make_appointment(db):
    """Insert an appointment row directly, bypassing validation."""
    def _make(doctor, patient, when, status=AppointmentStatus.SCHEDULED):
        record = Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            appointment_time=when,
            status=status.value,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _make

