from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class PrescriptionCreate(BaseModel):
    appointment_id: int
    patient_name: str = Field(..., min_length=1, max_length=100)
    medication: str = Field(..., min_length=1, max_length=100)
    dosage: str = Field(..., min_length=1, max_length=100)
    doctor_notes: Optional[str] = None

class PrescriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: Optional[str] = None
