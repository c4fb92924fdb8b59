from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List, Optional
import logging

from ..core.filters import normalize_filter
from ..core.exceptions import (
    AuthenticationError, ConflictError, InternalServerError, NotFoundError, ValidationError
)
from ..core.security import UserRole, get_password_hash, verify_password
from ..models.appointment import Appointment
from ..models.doctor import Doctor, DoctorAvailability
from ..models.prescription import Prescription
from ..schemas.doctor import TIME_SLOT_PATTERN, DoctorCreate
from .token_service import TokenService

logger = logging.getLogger(__name__)

# Slots start with "HH:MM", so string order is time order
NOON = "12:00"

class DoctorService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def list_doctors(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.name.asc()).all()

    def filter_doctors(
        self,
        name: Optional[str] = None,
        time: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> List[Doctor]:
        """Doctors matching every given filter.

        ``time`` is "AM", "PM" or one exact "HH:MM-HH:MM" slot.
        """
        query = self.db.query(Doctor)
        name = normalize_filter(name)
        if name:
            query = query.filter(Doctor.name.icontains(name, autoescape=True))
        specialty = normalize_filter(specialty)
        if specialty:
            query = query.filter(Doctor.specialty.icontains(specialty, autoescape=True))
        time = normalize_filter(time)
        if time:
            query = query.filter(Doctor.available_times.any(self._slot_criterion(time)))
        return query.order_by(Doctor.name.asc()).all()

    @staticmethod
    def _slot_criterion(time: str):
        period = time.upper()
        if period == "AM":
            return DoctorAvailability.time_slot < NOON
        if period == "PM":
            return DoctorAvailability.time_slot >= NOON
        if TIME_SLOT_PATTERN.match(time):
            return DoctorAvailability.time_slot == time
        raise ValidationError("Invalid time. Use 'AM', 'PM' or HH:MM-HH:MM.")

    def save_doctor(self, doctor_data: DoctorCreate) -> Doctor:
        """Add a doctor. Emails are unique across doctors."""
        if self.db.query(Doctor).filter(Doctor.email == doctor_data.email).first():
            raise ConflictError("Doctor already exists")

        doctor = Doctor(
            name=doctor_data.name,
            email=doctor_data.email,
            password=get_password_hash(doctor_data.password),
            specialty=doctor_data.specialty,
            phone=doctor_data.phone,
            available_times=[
                DoctorAvailability(time_slot=slot) for slot in doctor_data.availability
            ],
        )
        try:
            self.db.add(doctor)
            self.db.commit()
            self.db.refresh(doctor)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Doctor already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save doctor: {str(e)}")
            raise InternalServerError("Some internal error occurred")

        logger.info(f"Added doctor {doctor.id}")
        return doctor

    def delete_doctor(self, doctor_id: int) -> dict:
        """Remove a doctor together with their appointments and prescriptions."""
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("Doctor not found")

        appointment_ids = [
            row.id for row in self.db.query(Appointment.id).filter(Appointment.doctor_id == doctor_id)
        ]
        try:
            if appointment_ids:
                self.db.query(Prescription).filter(
                    Prescription.appointment_id.in_(appointment_ids)
                ).delete(synchronize_session=False)
                self.db.query(Appointment).filter(
                    Appointment.id.in_(appointment_ids)
                ).delete(synchronize_session=False)
            self.db.delete(doctor)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete doctor {doctor_id}: {str(e)}")
            raise InternalServerError("Some internal error occurred")

        return {"message": "Doctor deleted successfully"}

    def validate_doctor_login(self, email: Optional[str], password: Optional[str]) -> dict:
        if not email or password is None:
            raise ValidationError("Email and password are required.")

        doctor = self.db.query(Doctor).filter(Doctor.email == email).first()
        if not doctor or not verify_password(password, doctor.password):
            raise AuthenticationError("Invalid email or password.")

        token = self.token_service.issue(doctor.email, UserRole.DOCTOR)
        return {"token": token, "message": "Login successful."}
