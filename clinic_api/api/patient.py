from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..schemas.auth import LoginRequest, TokenResponse
from ..schemas.patient import PatientCreate, PatientResponse
from ..core.filters import normalize_filter
from ..services.patient_service import PatientService, RegistrationResult
from .deps import get_patient_service, require_patient

router = APIRouter(prefix="/patient", tags=["Patients"])

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientCreate,
    patient_service: PatientService = Depends(get_patient_service)
):
    """Register a new patient."""
    result = patient_service.create_patient(patient_data)

    if result == RegistrationResult.CREATED:
        return {"message": "Signup successful"}
    if result == RegistrationResult.CONFLICT:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Patient with email id or phone no already exist"}
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )

@router.post("/login", response_model=TokenResponse)
async def patient_login(
    login_data: LoginRequest,
    patient_service: PatientService = Depends(get_patient_service)
):
    """Authenticate a patient and return a token."""
    return patient_service.validate_patient_login(login_data.email, login_data.password)

@router.get("/filter/{condition}/{name}/{token}")
async def filter_patient_appointments(
    condition: str,
    name: str,
    token: str = Depends(require_patient),
    patient_service: PatientService = Depends(get_patient_service)
):
    """Filter the caller's appointments by condition and/or doctor name.

    ``null`` in either segment leaves that filter out.
    """
    patient = patient_service.get_patient_details(token)
    condition = normalize_filter(condition)
    name = normalize_filter(name)

    if condition and name:
        appointments = patient_service.filter_by_doctor_and_condition(condition, name, patient.id)
    elif condition:
        appointments = patient_service.filter_by_condition(condition, patient.id)
    elif name:
        appointments = patient_service.filter_by_doctor(name, patient.id)
    else:
        appointments = patient_service.get_patient_appointments(patient.id, token)

    return {"appointments": appointments}

@router.get("/{patient_id}/{token}")
async def get_patient_appointments(
    patient_id: int,
    token: str = Depends(require_patient),
    patient_service: PatientService = Depends(get_patient_service)
):
    """All appointments of a patient, for that patient only."""
    return {"appointments": patient_service.get_patient_appointments(patient_id, token)}

@router.get("/{token}")
async def get_patient_details(
    token: str = Depends(require_patient),
    patient_service: PatientService = Depends(get_patient_service)
):
    """Details of the patient behind the token."""
    patient = patient_service.get_patient_details(token)
    return {"patient": PatientResponse.model_validate(patient)}
