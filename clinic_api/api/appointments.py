from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from datetime import date

from ..schemas.appointment import AppointmentCreate, AppointmentUpdate
from ..services.appointment_service import AppointmentService
from .deps import get_appointment_service, require_doctor, require_patient

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("/{appointment_date}/{patient_name}/{token}")
async def get_appointments(
    appointment_date: date,
    patient_name: str,
    token: str = Depends(require_doctor),
    appointment_service: AppointmentService = Depends(get_appointment_service)
):
    """Appointments of the calling doctor on a day, optionally by patient name."""
    appointments = appointment_service.get_appointments_for_doctor(
        patient_name, appointment_date, token
    )
    return {"appointments": appointments}

@router.post("/{token}", status_code=status.HTTP_201_CREATED)
async def book_appointment(
    appointment: AppointmentCreate,
    token: str = Depends(require_patient),
    appointment_service: AppointmentService = Depends(get_appointment_service)
):
    """Book a new appointment."""
    if not appointment_service.validate_appointment(appointment):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid appointment details."}
        )

    if not appointment_service.book_appointment(appointment):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to book appointment."}
        )

    return {"message": "Appointment booked successfully!"}

@router.put("/{token}")
async def update_appointment(
    appointment: AppointmentUpdate,
    token: str = Depends(require_patient),
    appointment_service: AppointmentService = Depends(get_appointment_service)
):
    """Update an existing appointment."""
    return appointment_service.update_appointment(appointment)

@router.delete("/{appointment_id}/{token}")
async def cancel_appointment(
    appointment_id: int,
    token: str = Depends(require_patient),
    appointment_service: AppointmentService = Depends(get_appointment_service)
):
    """Cancel one of the caller's appointments."""
    return appointment_service.cancel_appointment(appointment_id, token)
