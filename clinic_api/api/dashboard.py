from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pathlib import Path
import logging

from ..core.security import UserRole
from ..services.token_service import TokenService
from .deps import get_token_service

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["Dashboards"], include_in_schema=False)

def _render_dashboard(request: Request, token: str, role: UserRole, template: str,
                      token_service: TokenService):
    if not token_service.validate(token, role):
        logger.info(f"Redirecting {role.value} dashboard request with invalid token")
        return RedirectResponse(url="/", status_code=302)
    return templates.TemplateResponse(
        request,
        template,
        {"token": token, "identity": token_service.extract_email(token)},
    )

@router.get("/adminDashboard/{token}")
async def admin_dashboard(
    request: Request,
    token: str,
    token_service: TokenService = Depends(get_token_service)
):
    return _render_dashboard(request, token, UserRole.ADMIN, "admin/adminDashboard.html", token_service)

@router.get("/doctorDashboard/{token}")
async def doctor_dashboard(
    request: Request,
    token: str,
    token_service: TokenService = Depends(get_token_service)
):
    return _render_dashboard(request, token, UserRole.DOCTOR, "doctor/doctorDashboard.html", token_service)
