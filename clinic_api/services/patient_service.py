from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
from enum import Enum
import logging

from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.security import UserRole, get_password_hash, verify_password
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..schemas.appointment import AppointmentView
from ..schemas.patient import PatientCreate
from .token_service import TokenService

logger = logging.getLogger(__name__)

class RegistrationResult(str, Enum):
    CREATED = "created"
    CONFLICT = "conflict"
    ERROR = "error"

CONDITION_STATUS = {
    "past": AppointmentStatus.COMPLETED,
    "future": AppointmentStatus.SCHEDULED,
}

def status_for_condition(condition: Optional[str]) -> AppointmentStatus:
    """Map "past"/"future" (any case) to an appointment status."""
    status = CONDITION_STATUS.get((condition or "").lower())
    if status is None:
        raise ValidationError("Invalid condition. Use 'past' or 'future'.")
    return status

class PatientService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def create_patient(self, patient_data: PatientCreate) -> RegistrationResult:
        """Register a new patient."""
        existing = self.db.query(Patient).filter(
            or_(Patient.email == patient_data.email, Patient.phone == patient_data.phone)
        ).first()
        if existing:
            return RegistrationResult.CONFLICT

        new_patient = Patient(
            name=patient_data.name,
            email=patient_data.email,
            password=get_password_hash(patient_data.password),
            phone=patient_data.phone,
            address=patient_data.address,
        )

        try:
            self.db.add(new_patient)
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            return RegistrationResult.CONFLICT
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to register patient: {str(e)}")
            return RegistrationResult.ERROR

        logger.info(f"Registered patient {new_patient.id}")
        return RegistrationResult.CREATED

    def validate_patient_login(self, email: Optional[str], password: Optional[str]) -> dict:
        """Authenticate a patient and return a token."""
        if not email or password is None:
            raise ValidationError("Email and password are required.")

        patient = self.db.query(Patient).filter(Patient.email == email).first()
        if not patient or not verify_password(password, patient.password):
            raise AuthenticationError("Invalid email or password.")

        token = self.token_service.issue(patient.email, UserRole.PATIENT)
        return {"token": token, "message": "Login successful."}

    def get_patient_details(self, token: str) -> Patient:
        email = self.token_service.extract_email(token)
        patient = None
        if email:
            patient = self.db.query(Patient).filter(Patient.email == email).first()
        if not patient:
            raise NotFoundError("Patient not found")
        return patient

    def get_patient_appointments(self, patient_id: int, token: str) -> List[AppointmentView]:
        """Appointments of ``patient_id``, only for that patient's own token."""
        email = self.token_service.extract_email(token)
        patient = None
        if email:
            patient = self.db.query(Patient).filter(Patient.email == email).first()
        if not patient or patient.id != patient_id:
            raise AuthenticationError("Unauthorized access to patient appointments")

        appointments = (
            self.db.query(Appointment)
            .filter(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )
        return self._to_views(appointments)

    def filter_by_condition(self, condition: str, patient_id: int) -> List[AppointmentView]:
        status = status_for_condition(condition)
        appointments = (
            self.db.query(Appointment)
            .filter(Appointment.patient_id == patient_id, Appointment.status == status.value)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )
        return self._to_views(appointments)

    def filter_by_doctor(self, name: str, patient_id: int) -> List[AppointmentView]:
        appointments = (
            self._doctor_name_query(name, patient_id)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )
        return self._to_views(appointments)

    def filter_by_doctor_and_condition(
        self, condition: str, name: str, patient_id: int
    ) -> List[AppointmentView]:
        status = status_for_condition(condition)
        appointments = (
            self._doctor_name_query(name, patient_id)
            .filter(Appointment.status == status.value)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )
        return self._to_views(appointments)

    def _doctor_name_query(self, name: str, patient_id: int):
        return (
            self.db.query(Appointment)
            .join(Appointment.doctor)
            .filter(
                Appointment.patient_id == patient_id,
                Doctor.name.icontains(name, autoescape=True),
            )
        )

    @staticmethod
    def _to_views(appointments) -> List[AppointmentView]:
        return [AppointmentView.from_appointment(a) for a in appointments]
