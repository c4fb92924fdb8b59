from fastapi import APIRouter, Depends, status

from ..schemas.prescription import PrescriptionCreate, PrescriptionResponse
from ..services.prescription_service import PrescriptionService
from .deps import get_prescription_service, require_doctor

router = APIRouter(prefix="/prescription", tags=["Prescriptions"])

@router.post("/{token}", status_code=status.HTTP_201_CREATED)
async def save_prescription(
    prescription_data: PrescriptionCreate,
    token: str = Depends(require_doctor),
    prescription_service: PrescriptionService = Depends(get_prescription_service)
):
    """Issue a prescription and complete its appointment."""
    return prescription_service.save_prescription(prescription_data)

@router.get("/{appointment_id}/{token}")
async def get_prescription(
    appointment_id: int,
    token: str = Depends(require_doctor),
    prescription_service: PrescriptionService = Depends(get_prescription_service)
):
    prescription = prescription_service.get_prescription(appointment_id)
    return {"prescription": PrescriptionResponse.model_validate(prescription)}
