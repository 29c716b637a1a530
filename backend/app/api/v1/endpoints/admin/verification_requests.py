"""
Admin review of ID-verification requests
"""
from fastapi import APIRouter, Body, Depends
from typing import Optional

from app.models.user import User
from app.modules.auth.dependencies import get_current_admin, get_verification_service
from app.schemas.admin import (
    ApproveVerificationRequest,
    PendingVerificationListResponse,
    RejectVerificationRequest,
    VerificationDecisionResponse,
)
from app.services.verification_service import VerificationService

router = APIRouter()


@router.get("", response_model=PendingVerificationListResponse)
async def list_pending_requests(
    admin: User = Depends(get_current_admin),
    service: VerificationService = Depends(get_verification_service)
):
    """Pending requests, oldest first"""
    return PendingVerificationListResponse(requests=await service.list_pending(admin))


@router.post("/{request_id}/approve", response_model=VerificationDecisionResponse)
async def approve_request(
    request_id: str,
    data: Optional[ApproveVerificationRequest] = Body(None),
    admin: User = Depends(get_current_admin),
    service: VerificationService = Depends(get_verification_service)
):
    """Approve the request and mark the user verified"""
    request = await service.approve(admin, request_id, note=data.note if data else None)
    return VerificationDecisionResponse(
        message="Verification approved",
        id=str(request.id),
        status=request.status,
        note=request.note,
    )


@router.post("/{request_id}/reject", response_model=VerificationDecisionResponse)
async def reject_request(
    request_id: str,
    data: RejectVerificationRequest,
    admin: User = Depends(get_current_admin),
    service: VerificationService = Depends(get_verification_service)
):
    """Reject with a note the user will see"""
    request = await service.reject(admin, request_id, data.note)
    return VerificationDecisionResponse(
        message="Verification rejected",
        id=str(request.id),
        status=request.status,
        note=request.note,
    )
