from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel

# e.g. CS2023/014; shared by signup, login and profile lookups
ROLL_NUMBER_PATTERN = r'^[A-Z]{2}\d{4}/\d{3}$'


class SignupRequest(CamelModel):
    roll_number: str = Field(..., pattern=ROLL_NUMBER_PATTERN, description="Institutional roll number, e.g. CS2023/014")
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=8)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class LoginRequest(CamelModel):
    roll_number: str = Field(..., pattern=ROLL_NUMBER_PATTERN)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: str
    roll_number: str
    name: str
    email: Optional[str] = None
    profile_pic_url: Optional[str] = None
    is_verified: bool
    is_admin: bool
    created_at: datetime

    @field_validator('id', mode='before')
    @classmethod
    def serialize_id(cls, v) -> str:
        return str(v)


class SignupResponse(CamelModel):
    message: str
    user: UserResponse


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
