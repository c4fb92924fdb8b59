from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.exceptions import InternalServerError, NotFoundError
from ..models.appointment import Appointment, AppointmentStatus
from ..models.prescription import Prescription
from ..schemas.prescription import PrescriptionCreate

logger = logging.getLogger(__name__)

class PrescriptionService:
    def __init__(self, db: Session):
        self.db = db

    def save_prescription(self, prescription_data: PrescriptionCreate) -> dict:
        """Store a prescription and mark its appointment completed.

        Both writes share one commit. A further prescription for an already
        completed appointment is stored as another record.
        """
        appointment = self.db.query(Appointment).filter(
            Appointment.id == prescription_data.appointment_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")

        appointment.status = AppointmentStatus.COMPLETED.value
        prescription = Prescription(
            appointment_id=appointment.id,
            patient_name=prescription_data.patient_name,
            medication=prescription_data.medication,
            dosage=prescription_data.dosage,
            doctor_notes=prescription_data.doctor_notes,
        )

        try:
            self.db.add(prescription)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save prescription for appointment {appointment.id}: {str(e)}")
            raise InternalServerError("Failed to save prescription")

        logger.info(f"Saved prescription {prescription.id} for appointment {appointment.id}")
        return {"message": "Prescription saved"}

    def get_prescription(self, appointment_id: int) -> Prescription:
        prescription = (
            self.db.query(Prescription)
            .filter(Prescription.appointment_id == appointment_id)
            .order_by(Prescription.id.asc())
            .first()
        )
        if not prescription:
            raise NotFoundError("No prescription found for this appointment")
        return prescription
