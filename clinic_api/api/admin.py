from fastapi import APIRouter, Depends

from ..schemas.auth import AdminLoginRequest, TokenResponse
from ..services.admin_service import AdminService
from .deps import get_admin_service

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.post("/login", response_model=TokenResponse)
async def admin_login(
    login_data: AdminLoginRequest,
    admin_service: AdminService = Depends(get_admin_service)
):
    """Authenticate an administrator and return a token."""
    return admin_service.validate_admin_login(login_data.username, login_data.password)
