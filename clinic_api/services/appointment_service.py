from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import date, datetime, time
from typing import List, Optional
import logging

from ..core.filters import normalize_filter
from ..core.exceptions import (
    AuthenticationError, AuthorizationError, InternalServerError, NotFoundError
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate, AppointmentView
from .token_service import TokenService

logger = logging.getLogger(__name__)

def _naive(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment

class AppointmentService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def validate_appointment(self, appointment: Optional[AppointmentCreate]) -> bool:
        """Check an appointment before it reaches storage.

        Only the calendar date is compared with today, so a same-day booking
        for a time that has already passed is accepted.
        """
        if appointment is None:
            return False
        if appointment.doctor_id is None or appointment.patient_id is None:
            return False
        if appointment.appointment_time is None:
            return False
        if _naive(appointment.appointment_time).date() < date.today():
            return False

        doctor = self.db.query(Doctor).filter(Doctor.id == appointment.doctor_id).first()
        patient = self.db.query(Patient).filter(Patient.id == appointment.patient_id).first()
        return doctor is not None and patient is not None

    def book_appointment(self, appointment: AppointmentCreate) -> bool:
        """Persist a new scheduled appointment. Returns False if storage fails."""
        new_appointment = Appointment(
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            appointment_time=_naive(appointment.appointment_time),
            status=AppointmentStatus.SCHEDULED.value,
        )
        try:
            self.db.add(new_appointment)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to book appointment: {str(e)}")
            return False

        logger.info(f"Booked appointment {new_appointment.id} with doctor {new_appointment.doctor_id}")
        return True

    def update_appointment(self, data: AppointmentUpdate) -> dict:
        """Overwrite the doctor, patient and time of an existing appointment.

        Status is left alone; it only moves forward when a prescription is
        issued.
        """
        appointment = self.db.query(Appointment).filter(Appointment.id == data.id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")

        # Replacement references must resolve like they do at booking time
        if data.doctor_id is not None:
            if not self.db.query(Doctor).filter(Doctor.id == data.doctor_id).first():
                raise NotFoundError("Doctor not found")
            appointment.doctor_id = data.doctor_id
        if data.patient_id is not None:
            if not self.db.query(Patient).filter(Patient.id == data.patient_id).first():
                raise NotFoundError("Patient not found")
            appointment.patient_id = data.patient_id
        if data.appointment_time is not None:
            appointment.appointment_time = _naive(data.appointment_time)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update appointment {data.id}: {str(e)}")
            raise InternalServerError("Error updating appointment")

        return {"message": "Appointment updated successfully"}

    def cancel_appointment(self, appointment_id: int, token: str) -> dict:
        """Delete an appointment owned by the patient behind ``token``."""
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")

        patient_email = self.token_service.extract_email(token)
        if appointment.patient is None or appointment.patient.email != patient_email:
            logger.warning(f"Refused cancellation of appointment {appointment_id} for {patient_email}")
            raise AuthorizationError("Unauthorized to cancel this appointment")

        try:
            self.db.delete(appointment)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to cancel appointment {appointment_id}: {str(e)}")
            raise InternalServerError("Error canceling appointment")

        return {"message": "Appointment canceled successfully"}

    def get_appointments_for_doctor(
        self, patient_name: Optional[str], day: date, token: str
    ) -> List[AppointmentView]:
        """Appointments of the doctor behind ``token`` on ``day``."""
        doctor_email = self.token_service.extract_email(token)
        if doctor_email is None:
            raise AuthenticationError()

        start = datetime.combine(day, time.min)
        end = datetime.combine(day, time.max)

        query = (
            self.db.query(Appointment)
            .join(Appointment.doctor)
            .filter(
                Doctor.email == doctor_email,
                Appointment.appointment_time >= start,
                Appointment.appointment_time <= end,
            )
        )

        patient_name = normalize_filter(patient_name)
        if patient_name:
            query = query.join(Appointment.patient).filter(
                Patient.name.icontains(patient_name, autoescape=True)
            )

        appointments = query.order_by(Appointment.appointment_time.asc()).all()
        return [AppointmentView.from_appointment(a) for a in appointments]
