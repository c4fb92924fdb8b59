from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.exceptions import AuthenticationError
from ..core.security import TokenState, UserRole
from ..services.token_service import TokenService
from ..services.appointment_service import AppointmentService
from ..services.patient_service import PatientService
from ..services.prescription_service import PrescriptionService
from ..services.doctor_service import DoctorService
from ..services.admin_service import AdminService

def get_token_service(request: Request) -> TokenService:
    """The token service built at startup and kept on the application state."""
    return request.app.state.token_service

# Role-based access control dependencies
def require_role(role: UserRole):
    """Create a dependency that checks the ``{token}`` path parameter for ``role``.

    Resolves to the raw token so services can read the identity from it.
    """
    async def role_checker(
        token: str,
        token_service: TokenService = Depends(get_token_service)
    ) -> str:
        state = token_service.inspect(token)
        if state == TokenState.EXPIRED:
            raise AuthenticationError("Token has expired.")
        if state != TokenState.VALID or not token_service.validate(token, role):
            raise AuthenticationError("Invalid or unauthorized token.")
        return token

    return role_checker

require_patient = require_role(UserRole.PATIENT)
require_doctor = require_role(UserRole.DOCTOR)
require_admin = require_role(UserRole.ADMIN)

# Service dependencies
def get_appointment_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> AppointmentService:
    return AppointmentService(db, token_service)

def get_patient_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> PatientService:
    return PatientService(db, token_service)

def get_prescription_service(db: Session = Depends(get_db)) -> PrescriptionService:
    return PrescriptionService(db)

def get_doctor_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> DoctorService:
    return DoctorService(db, token_service)

def get_admin_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> AdminService:
    return AdminService(db, token_service)
