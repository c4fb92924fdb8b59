from pydantic import BaseModel
from typing import Optional

# Fields are optional so that a missing credential is reported by the
# services as a 400 with a readable message.

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class TokenResponse(BaseModel):
    token: str
    message: str
