"""
Engagement Service - likes, joins, comments and reports on an activity

Uniqueness of (user, activity) for likes, joins and reports is enforced by
unique indexes; an IntegrityError on insert is the duplicate signal.
"""

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.exceptions import (
    ActivityNotFoundError,
    CapacityReachedError,
    ConflictError,
    JoinRequestNotFoundError,
)
from app.core.logging_config import logger
from app.models.activity import Activity, Comment, JoinRequest, JoinRequestStatus, Like
from app.models.report import Report, ReportStatus
from app.models.user import User
from app.schemas.activity import AuthorSummary
from app.schemas.common import parse_model
from app.schemas.engagement import (
    CommentCreate,
    CommentResponse,
    JoinResponse,
    LikeResponse,
    ReportCreate,
    ReportResponse,
)
from app.services.base import BaseService
from app.utils.sanitize import sanitize_html

ALREADY_JOINED = "You have already requested to join this activity"
ALREADY_REPORTED = "You have already reported this activity"


def _comment_response(comment: Comment, author: User) -> CommentResponse:
    return CommentResponse(
        id=str(comment.id),
        activity_id=str(comment.activity_id),
        text=comment.text,
        created_at=comment.created_at,
        user=AuthorSummary.model_validate(author),
    )


class EngagementService(BaseService):

    async def _get_activity(self, activity_id: str, for_update: bool = False) -> Activity:
        stmt = select(Activity).where(Activity.id == activity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        activity = result.scalar_one_or_none()
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        return activity

    async def count_likes(self, activity_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Like.id)).where(Like.activity_id == activity_id)
        )
        return result.scalar() or 0

    async def count_confirmed_joins(self, activity_id: str) -> int:
        result = await self.db.execute(
            select(func.count(JoinRequest.id)).where(
                JoinRequest.activity_id == activity_id,
                JoinRequest.status == JoinRequestStatus.CONFIRMED,
            )
        )
        return result.scalar() or 0

    # ==================== LIKES ====================

    async def toggle_like(self, user: Optional[User], activity_id: str) -> LikeResponse:
        """Flip the user's like on the activity; returns the new state"""
        user = self.require_user(user)
        await self._get_activity(activity_id)

        removed = await self.db.execute(
            delete(Like).where(Like.user_id == user.id, Like.activity_id == activity_id)
        )
        if removed.rowcount:
            await self.db.commit()
            liked = False
        else:
            self.db.add(Like(user_id=user.id, activity_id=activity_id))
            try:
                await self.db.commit()
            except IntegrityError:
                # A concurrent request from the same user inserted it first
                await self.db.rollback()
            liked = True

        return LikeResponse(
            message="Activity liked" if liked else "Activity unliked",
            liked=liked,
            like_count=await self.count_likes(activity_id),
        )

    # ==================== JOINS ====================

    async def join_activity(self, user: Optional[User], activity_id: str) -> JoinResponse:
        """
        Create a CONFIRMED join request

        The activity row stays locked from the capacity count to the insert,
        so concurrent joins cannot overshoot capacity.
        """
        user = self.require_user(user)
        activity = await self._get_activity(activity_id, for_update=True)

        existing = await self.db.execute(
            select(JoinRequest.id).where(
                JoinRequest.user_id == user.id,
                JoinRequest.activity_id == activity_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            await self.db.rollback()
            raise ConflictError(ALREADY_JOINED, code="ALREADY_JOINED")

        # Rollback expires the instance, so read capacity first
        capacity = activity.capacity
        if capacity is not None:
            if await self.count_confirmed_joins(activity_id) >= capacity:
                await self.db.rollback()
                raise CapacityReachedError(capacity)

        self.db.add(JoinRequest(
            user_id=user.id,
            activity_id=activity_id,
            status=JoinRequestStatus.CONFIRMED,
        ))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(ALREADY_JOINED, code="ALREADY_JOINED")

        logger.info(f"User {user.roll_number} joined activity {activity_id}")
        return JoinResponse(
            message="Successfully joined activity",
            joined=True,
            joined_count=await self.count_confirmed_joins(activity_id),
        )

    async def leave_activity(self, user: Optional[User], activity_id: str) -> JoinResponse:
        user = self.require_user(user)

        result = await self.db.execute(
            select(JoinRequest).where(
                JoinRequest.user_id == user.id,
                JoinRequest.activity_id == activity_id,
            )
        )
        join_request = result.scalar_one_or_none()
        if join_request is None:
            raise JoinRequestNotFoundError(activity_id)

        await self.db.delete(join_request)
        await self.db.commit()

        logger.info(f"User {user.roll_number} left activity {activity_id}")
        return JoinResponse(
            message="Successfully left activity",
            joined=False,
            joined_count=await self.count_confirmed_joins(activity_id),
        )

    # ==================== COMMENTS ====================

    async def add_comment(self, user: Optional[User], activity_id: str, text: str) -> CommentResponse:
        user = self.require_user(user)
        data = parse_model(CommentCreate, {"text": text})
        await self._get_activity(activity_id)

        comment = Comment(
            activity_id=activity_id,
            user_id=user.id,
            text=sanitize_html(data.text),
        )
        self.db.add(comment)
        await self.db.commit()

        return _comment_response(comment, user)

    async def list_comments(self, activity_id: str) -> List[CommentResponse]:
        """Comments on the activity, newest first"""
        await self._get_activity(activity_id)

        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.activity_id == activity_id)
            .order_by(Comment.created_at.desc())
        )
        return [_comment_response(comment, comment.user) for comment in result.scalars().all()]

    # ==================== REPORTS ====================

    async def report_activity(self, user: Optional[User], activity_id: str, reason: str) -> ReportResponse:
        """File a moderation report; one per (reporter, activity)"""
        user = self.require_user(user)
        data = parse_model(ReportCreate, {"reason": reason})
        await self._get_activity(activity_id)

        existing = await self.db.execute(
            select(Report.id).where(
                Report.reporter_id == user.id,
                Report.activity_id == activity_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(ALREADY_REPORTED, code="ALREADY_REPORTED")

        report = Report(
            reporter_id=user.id,
            activity_id=activity_id,
            reason=sanitize_html(data.reason),
            status=ReportStatus.OPEN,
        )
        self.db.add(report)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(ALREADY_REPORTED, code="ALREADY_REPORTED")

        logger.info(f"Activity {activity_id} reported by {user.roll_number}")
        return ReportResponse.model_validate(report)
