from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional

class PatientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1, max_length=20)
    address: Optional[str] = Field(None, max_length=255)

class PatientResponse(BaseModel):
    """Patient as returned to clients. The stored credential is never included."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    address: Optional[str] = None
