from sqlalchemy.orm import Session
from typing import Optional

from ..core.exceptions import AuthenticationError, ValidationError
from ..core.security import UserRole, verify_password
from ..models.admin import Admin
from .token_service import TokenService

class AdminService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def validate_admin_login(self, username: Optional[str], password: Optional[str]) -> dict:
        """Admin tokens carry the username as their identity."""
        if not username or password is None:
            raise ValidationError("Username and password are required.")

        admin = self.db.query(Admin).filter(Admin.username == username).first()
        if not admin or not verify_password(password, admin.password):
            raise AuthenticationError("Invalid username or password.")

        token = self.token_service.issue(admin.username, UserRole.ADMIN)
        return {"token": token, "message": "Login successful."}
