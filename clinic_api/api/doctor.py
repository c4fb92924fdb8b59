from fastapi import APIRouter, Depends, status
from typing import Optional

from ..schemas.auth import LoginRequest, TokenResponse
from ..schemas.doctor import DoctorCreate, DoctorResponse
from ..services.doctor_service import DoctorService
from .deps import get_doctor_service, require_admin

router = APIRouter(prefix="/doctor", tags=["Doctors"])

@router.get("")
async def list_doctors(doctor_service: DoctorService = Depends(get_doctor_service)):
    """List all doctors."""
    doctors = doctor_service.list_doctors()
    return {"doctors": [DoctorResponse.model_validate(d) for d in doctors]}

@router.get("/filter")
async def filter_doctors(
    name: Optional[str] = None,
    time: Optional[str] = None,
    specialty: Optional[str] = None,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    doctors = doctor_service.filter_doctors(name, time, specialty)
    return {"doctors": [DoctorResponse.model_validate(d) for d in doctors]}

@router.post("/login", response_model=TokenResponse)
async def doctor_login(
    login_data: LoginRequest,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Authenticate a doctor and return a token."""
    return doctor_service.validate_doctor_login(login_data.email, login_data.password)

@router.post("/{token}", status_code=status.HTTP_201_CREATED)
async def save_doctor(
    doctor_data: DoctorCreate,
    token: str = Depends(require_admin),
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Add a doctor (admin only)."""
    doctor = doctor_service.save_doctor(doctor_data)
    return {"message": "Doctor added to db", "doctor": DoctorResponse.model_validate(doctor)}

@router.delete("/{doctor_id}/{token}")
async def delete_doctor(
    doctor_id: int,
    token: str = Depends(require_admin),
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Remove a doctor (admin only)."""
    return doctor_service.delete_doctor(doctor_id)
