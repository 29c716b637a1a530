"""Profile and verification-request schemas"""
from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.verification_request import VerificationStatus
from app.schemas.auth import UserResponse
from app.schemas.common import CamelModel


class UserUpdate(CamelModel):
    """Only fields that are sent are changed"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    profile_pic_url: Optional[str] = Field(None, max_length=2048)


class VerificationSummary(CamelModel):
    status: VerificationStatus
    note: Optional[str] = None
    created_at: datetime


class UserProfileResponse(UserResponse):
    verification_request: Optional[VerificationSummary] = None


class VerificationRequestResponse(CamelModel):
    id: str
    status: VerificationStatus
    id_image_url: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class VerificationSubmittedResponse(CamelModel):
    message: str
    request: VerificationRequestResponse
