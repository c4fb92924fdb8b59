from datetime import datetime
from typing import Optional
from passlib.context import CryptContext
from pydantic import BaseModel
import secrets
from enum import Enum

from .config import settings

# Password hashing, only used when PASSWORD_HASHING is enabled
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

class TokenState(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"

class TokenPayload(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[datetime] = None

# Password utilities
def verify_password(plain_password: str, stored_password: Optional[str]) -> bool:
    """Check a submitted password against the stored credential.

    Without PASSWORD_HASHING the stored value is the password itself and the
    comparison is an exact match.
    """
    if plain_password is None or stored_password is None:
        return False
    if settings.PASSWORD_HASHING:
        return pwd_context.verify(plain_password, stored_password)
    return secrets.compare_digest(
        plain_password.encode("utf-8"), stored_password.encode("utf-8")
    )

def get_password_hash(password: str) -> str:
    """Return the value to store for a new password."""
    if settings.PASSWORD_HASHING:
        return pwd_context.hash(password)
    return password
