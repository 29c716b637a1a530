"""
Activity API Endpoints

Feed, creation and owner/admin edits, plus likes, joins, comments and
reports on a single activity.
"""
from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Dict, Optional

from app.core.config import settings
from app.models.user import User
from app.modules.auth.dependencies import (
    get_activity_service,
    get_current_user,
    get_engagement_service,
    get_optional_user,
)
from app.schemas.activity import (
    ActivityCreatedResponse,
    ActivityDetailResponse,
    ActivityListResponse,
    ActivitySort,
    ActivityUpdate,
)
from app.schemas.common import MessageResponse
from app.schemas.engagement import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    JoinResponse,
    LikeResponse,
    ReportCreate,
    ReportSubmittedResponse,
)
from app.services.activity_service import ActivityService
from app.services.engagement_service import EngagementService

router = APIRouter()


# ==================== FEED & CRUD ====================

@router.get("", response_model=ActivityListResponse)
async def list_activities(
    q: Optional[str] = Query(None, max_length=200, description="Search title and description"),
    genre: Optional[str] = Query(None, description="Genre, or ALL"),
    type: Optional[str] = Query(None, description="Activity type, or ALL"),
    frequency: Optional[str] = Query(None, description="Frequency, or ALL"),
    sort: ActivitySort = Query(ActivitySort.NEWEST),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    service: ActivityService = Depends(get_activity_service)
):
    """Active activities, newest first unless sort=likes"""
    activities, total = await service.list_activities(
        q=q,
        genre=genre,
        activity_type=type,
        frequency=frequency,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return ActivityListResponse(activities=activities, total=total, limit=limit, offset=offset)


@router.post("", response_model=ActivityCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: Dict[str, Any] = Body(...),
    current_user: Optional[User] = Depends(get_optional_user),
    service: ActivityService = Depends(get_activity_service)
):
    """
    Create an activity

    The body's `type` picks the schema (OPEN, COMMUNITY or COLLEGE_FUNDED).
    College-funded proposals start inactive until an admin approves them.
    """
    activity, message = await service.create_activity(current_user, payload)
    return ActivityCreatedResponse(message=message, activity=activity)


@router.get("/{activity_id}", response_model=ActivityDetailResponse)
async def get_activity(
    activity_id: str,
    service: ActivityService = Depends(get_activity_service)
):
    return ActivityDetailResponse(activity=await service.get_activity(activity_id))


@router.put("/{activity_id}", response_model=ActivityDetailResponse)
async def update_activity(
    activity_id: str,
    data: ActivityUpdate,
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service)
):
    """Owner or admin only"""
    activity = await service.update_activity(current_user, activity_id, data)
    return ActivityDetailResponse(activity=activity)


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: str,
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service)
):
    """Owner or admin only; likes, joins, comments and reports go with it"""
    await service.delete_activity(current_user, activity_id)
    return MessageResponse(message="Activity deleted successfully")


# ==================== ENGAGEMENT ====================

@router.post("/{activity_id}/like", response_model=LikeResponse)
async def toggle_like(
    activity_id: str,
    current_user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service)
):
    """Like, or unlike if already liked"""
    return await service.toggle_like(current_user, activity_id)


@router.post("/{activity_id}/join", response_model=JoinResponse)
async def join_activity(
    activity_id: str,
    current_user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service)
):
    return await service.join_activity(current_user, activity_id)


@router.delete("/{activity_id}/join", response_model=JoinResponse)
async def leave_activity(
    activity_id: str,
    current_user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service)
):
    return await service.leave_activity(current_user, activity_id)


@router.get("/{activity_id}/comments", response_model=CommentListResponse)
async def list_comments(
    activity_id: str,
    service: EngagementService = Depends(get_engagement_service)
):
    """Newest first"""
    return CommentListResponse(comments=await service.list_comments(activity_id))


@router.post("/{activity_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    activity_id: str,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service)
):
    return await service.add_comment(current_user, activity_id, data.text)


@router.post("/{activity_id}/report", response_model=ReportSubmittedResponse, status_code=status.HTTP_201_CREATED)
async def report_activity(
    activity_id: str,
    data: ReportCreate,
    current_user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service)
):
    """Flag an activity for moderation; once per user"""
    report = await service.report_activity(current_user, activity_id, data.reason)
    return ReportSubmittedResponse(message="Report submitted successfully", report=report)
