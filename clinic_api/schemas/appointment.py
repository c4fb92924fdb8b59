from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class AppointmentCreate(BaseModel):
    doctor_id: Optional[int] = None
    patient_id: Optional[int] = None
    appointment_time: Optional[datetime] = None

class AppointmentUpdate(BaseModel):
    id: int
    doctor_id: Optional[int] = None
    patient_id: Optional[int] = None
    appointment_time: Optional[datetime] = None

class AppointmentView(BaseModel):
    """Reduced view of an appointment handed to clients."""
    id: int
    doctor_id: int
    doctor_name: str
    patient_id: int
    patient_name: str
    patient_email: str
    patient_phone: Optional[str] = None
    patient_address: Optional[str] = None
    appointment_time: datetime
    status: int

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentView":
        doctor = appointment.doctor
        patient = appointment.patient
        return cls(
            id=appointment.id,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            patient_id=patient.id,
            patient_name=patient.name,
            patient_email=patient.email,
            patient_phone=patient.phone,
            patient_address=patient.address,
            appointment_time=appointment.appointment_time,
            status=appointment.status,
        )
