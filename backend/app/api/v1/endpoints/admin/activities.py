"""
Admin activation of college-funded proposals
"""
from fastapi import APIRouter, Depends

from app.models.user import User
from app.modules.auth.dependencies import get_activity_service, get_current_admin
from app.schemas.activity import ActivityDetailResponse
from app.services.activity_service import ActivityService

router = APIRouter()


@router.post("/{activity_id}/approve", response_model=ActivityDetailResponse)
async def approve_funded_activity(
    activity_id: str,
    admin: User = Depends(get_current_admin),
    service: ActivityService = Depends(get_activity_service)
):
    """Make a pending COLLEGE_FUNDED activity visible in the feed"""
    return ActivityDetailResponse(activity=await service.approve_funded_activity(admin, activity_id))
