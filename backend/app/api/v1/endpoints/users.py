from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import Optional

from app.models.user import User
from app.modules.auth.dependencies import (
    get_current_user,
    get_user_service,
    get_user_service_with_storage,
)
from app.schemas.user import (
    UserProfileResponse,
    UserUpdate,
    VerificationRequestResponse,
    VerificationSubmittedResponse,
    VerificationSummary,
)
from app.services.user_service import UploadedDocument, UserService

router = APIRouter()


def _profile(user: User, verification_request) -> UserProfileResponse:
    profile = UserProfileResponse.model_validate(user)
    if verification_request is not None:
        profile.verification_request = VerificationSummary.model_validate(verification_request)
    return profile


@router.get("/me", response_model=UserProfileResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Current user's profile and verification status"""
    user, verification_request = await service.get_profile(current_user)
    return _profile(user, verification_request)


@router.put("/me", response_model=UserProfileResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update name, email or profile picture"""
    await service.update_profile(current_user, data)
    user, verification_request = await service.get_profile(current_user)
    return _profile(user, verification_request)


@router.post("/me/verify", response_model=VerificationSubmittedResponse, status_code=status.HTTP_201_CREATED)
async def request_verification(
    id_image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service_with_storage)
):
    """Ask an admin to verify the account, optionally attaching an ID image"""
    document = None
    if id_image is not None and id_image.filename:
        document = UploadedDocument(
            content=await id_image.read(),
            content_type=id_image.content_type or "application/octet-stream",
            filename=id_image.filename,
        )

    request = await service.request_verification(current_user, document)
    return VerificationSubmittedResponse(
        message="Verification request submitted",
        request=VerificationRequestResponse.model_validate(request),
    )
