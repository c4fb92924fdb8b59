from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional
import re

TIME_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d-([01]\d|2[0-3]):[0-5]\d$")

class DoctorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    specialty: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    availability: List[str] = Field(default_factory=list)

    @field_validator("availability")
    @classmethod
    def check_time_slots(cls, slots: List[str]) -> List[str]:
        for slot in slots:
            if not TIME_SLOT_PATTERN.match(slot):
                raise ValueError(f"time slot '{slot}' must look like HH:MM-HH:MM")
            start, end = slot.split("-")
            if start >= end:
                raise ValueError(f"time slot '{slot}' must end after it starts")
        # Order kept, duplicates dropped
        return list(dict.fromkeys(slots))

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    specialty: Optional[str] = None
    phone: Optional[str] = None
    availability: List[str] = []
