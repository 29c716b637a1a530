"""
Activity Service - creation, feed queries and owner/admin mutations

Handles:
- Type dispatch + validation + per-user active-activity cap on create
- Feed listing with text/genre/type/frequency filters and sorting
- Owner/admin update and delete
- Admin activation of college-funded proposals

like/comment/joined counts are never stored; every read counts the
related rows with correlated subqueries.
"""

from sqlalchemy import select, func, delete, or_
from sqlalchemy.orm import selectinload
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type
import enum

from app.core.config import settings
from app.core.exceptions import (
    ActivityNotFoundError,
    AuthorizationError,
    ConflictError,
    InvalidActivityTypeError,
    QuotaExceededError,
    ValidationError,
    VerificationRequiredError,
)
from app.core.logging_config import logger
from app.models.activity import (
    Activity,
    ActivityType,
    Comment,
    Frequency,
    Genre,
    JoinRequest,
    JoinRequestStatus,
    Like,
)
from app.models.report import Report
from app.models.user import User
from app.schemas.activity import (
    ActivityCreate,
    ActivityResponse,
    ActivitySort,
    ActivityUpdate,
    FundedActivityCreate,
    validate_activity_payload,
)
from app.services.base import BaseService
from app.utils.sanitize import sanitize_html, sanitize_payload

FUNDED_CREATED_MESSAGE = "Created. Funding activities are pending admin approval."
CREATED_MESSAGE = "Activity created successfully"

# Feed filters that mean "no filter"
ANY_VALUE = ("", "ALL")


def like_count_column():
    return (
        select(func.count(Like.id))
        .where(Like.activity_id == Activity.id)
        .correlate(Activity)
        .scalar_subquery()
    )


def comment_count_column():
    return (
        select(func.count(Comment.id))
        .where(Comment.activity_id == Activity.id)
        .correlate(Activity)
        .scalar_subquery()
    )


def joined_count_column():
    return (
        select(func.count(JoinRequest.id))
        .where(
            JoinRequest.activity_id == Activity.id,
            JoinRequest.status == JoinRequestStatus.CONFIRMED,
        )
        .correlate(Activity)
        .scalar_subquery()
    )


def parse_enum_filter(enum_cls: Type[enum.Enum], value: Optional[str], field: str) -> Optional[enum.Enum]:
    """None for missing/ALL, the enum member otherwise; unknown values are a field error"""
    if value is None or value.strip().upper() in ANY_VALUE:
        return None
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        raise ValidationError.for_field(field, f"Invalid {field}")


class ActivityService(BaseService):
    """Service for the activity lifecycle"""

    # ==================== READS ====================

    def _select_with_counts(self):
        like_count = like_count_column()
        return select(
            Activity,
            like_count.label("like_count"),
            comment_count_column().label("comment_count"),
            joined_count_column().label("joined_count"),
        ).options(selectinload(Activity.author)), like_count

    async def count_active_for_author(self, author_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Activity.id)).where(
                Activity.author_id == author_id,
                Activity.is_active.is_(True),
            )
        )
        return result.scalar() or 0

    async def get_activity(self, activity_id: str) -> ActivityResponse:
        """Single activity with derived counters and author summary"""
        stmt, _ = self._select_with_counts()
        result = await self.db.execute(stmt.where(Activity.id == activity_id))
        row = result.first()
        if row is None:
            raise ActivityNotFoundError(activity_id)

        activity, like_count, comment_count, joined_count = row
        return ActivityResponse.from_activity(activity, like_count, comment_count, joined_count)

    async def list_activities(
        self,
        q: Optional[str] = None,
        genre: Optional[str] = None,
        activity_type: Optional[str] = None,
        frequency: Optional[str] = None,
        sort: ActivitySort = ActivitySort.NEWEST,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[ActivityResponse], int]:
        """
        Active activities matching the filters

        Args:
            q: Free text matched against title and description
            genre / activity_type / frequency: enum value, or "ALL"/None for any
            sort: newest first (default) or most liked first
            limit / offset: page window

        Returns:
            (page of activities, total matching)
        """
        filters = [Activity.is_active.is_(True)]

        genre_value = parse_enum_filter(Genre, genre, "genre")
        if genre_value is not None:
            filters.append(Activity.genre == genre_value)

        type_value = parse_enum_filter(ActivityType, activity_type, "type")
        if type_value is not None:
            filters.append(Activity.type == type_value)

        frequency_value = parse_enum_filter(Frequency, frequency, "frequency")
        if frequency_value is not None:
            filters.append(Activity.frequency == frequency_value)

        if q and q.strip():
            # Stored text is escaped, so match the escaped form
            term = sanitize_html(q.strip())
            filters.append(or_(
                Activity.title.icontains(term, autoescape=True),
                Activity.description.icontains(term, autoescape=True),
            ))

        total_result = await self.db.execute(
            select(func.count(Activity.id)).where(*filters)
        )
        total = total_result.scalar() or 0

        stmt, like_count = self._select_with_counts()
        stmt = stmt.where(*filters)
        if sort == ActivitySort.LIKES:
            stmt = stmt.order_by(like_count.desc(), Activity.created_at.desc())
        else:
            stmt = stmt.order_by(Activity.created_at.desc())

        result = await self.db.execute(stmt.limit(limit).offset(offset))
        activities = [
            ActivityResponse.from_activity(activity, lc, cc, jc)
            for activity, lc, cc, jc in result.all()
        ]
        return activities, total

    # ==================== CREATE ====================

    async def create_activity(
        self,
        user: Optional[User],
        payload: Mapping[str, Any],
    ) -> Tuple[ActivityResponse, str]:
        """
        Validate and persist a new activity

        Returns:
            (created activity, user-facing message)
        """
        user = self.require_user(user)
        if not user.is_verified:
            raise VerificationRequiredError()

        validation = validate_activity_payload(payload)
        if validation.invalid_type:
            raise InvalidActivityTypeError()
        if not validation.is_valid:
            raise ValidationError(errors=validation.errors)

        data: ActivityCreate = validation.activity

        # Lock the author row so concurrent creates cannot both pass the cap
        await self.db.execute(select(User.id).where(User.id == user.id).with_for_update())
        limit = settings.MAX_ACTIVE_ACTIVITIES_PER_USER
        if await self.count_active_for_author(user.id) >= limit:
            await self.db.rollback()
            raise QuotaExceededError(limit)

        is_funded = isinstance(data, FundedActivityCreate)
        type_payload = sanitize_payload(
            data.type_payload().model_dump(mode="json", by_alias=True, exclude_none=True)
        )

        activity = Activity(
            author_id=user.id,
            title=sanitize_html(data.title),
            description=sanitize_html(data.description),
            type=ActivityType(data.type),
            genre=data.genre,
            frequency=data.frequency,
            location=sanitize_html(data.location),
            start_date=data.start_date,
            end_date=data.end_date,
            capacity=data.capacity,
            is_active=not is_funded,
            funding_goal=data.funding_goal if is_funded else None,
            application_form=type_payload if is_funded else None,
            templates_used=None if is_funded else type_payload,
        )
        activity.author = user
        self.db.add(activity)
        await self.db.commit()

        logger.info(
            f"Activity created: {activity.id} ({activity.type.value}) by {user.roll_number}",
            extra={"event_type": "activity_created", "activity_id": activity.id},
        )

        message = FUNDED_CREATED_MESSAGE if is_funded else CREATED_MESSAGE
        return ActivityResponse.from_activity(activity), message

    # ==================== OWNER / ADMIN MUTATIONS ====================

    async def _get_owned(self, user: User, activity_id: str) -> Activity:
        result = await self.db.execute(select(Activity).where(Activity.id == activity_id))
        activity = result.scalar_one_or_none()
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        if activity.author_id != user.id and not user.is_admin:
            raise AuthorizationError()
        return activity

    async def update_activity(
        self,
        user: Optional[User],
        activity_id: str,
        data: ActivityUpdate,
    ) -> ActivityResponse:
        """Partial update by the author or an admin"""
        user = self.require_user(user)
        activity = await self._get_owned(user, activity_id)

        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)
        for key in ("title", "description"):
            if key in changes and changes[key] is None:
                raise ValidationError.for_field(key, f"{key.capitalize()} cannot be empty")

        start = changes.get("start_date", activity.start_date)
        end = changes.get("end_date", activity.end_date)
        if start is not None and end is not None and end < start:
            raise ValidationError.for_field("endDate", "End date must be after start date")
        if "start_date" in changes and start is None and activity.frequency == Frequency.ONE_OFF:
            raise ValidationError.for_field("startDate", "Start date is required for one-off activities")

        for key, value in changes.items():
            if key in ("title", "description", "location"):
                value = sanitize_html(value)
            setattr(activity, key, value)

        await self.db.commit()
        logger.info(f"Activity updated: {activity_id} by {user.roll_number}")
        return await self.get_activity(activity_id)

    async def delete_activity(self, user: Optional[User], activity_id: str) -> None:
        """Remove the activity and every row that hangs off it"""
        user = self.require_user(user)
        activity = await self._get_owned(user, activity_id)
        by_owner = activity.author_id == user.id

        for model in (Like, Comment, JoinRequest, Report):
            await self.db.execute(delete(model).where(model.activity_id == activity.id))
        await self.db.delete(activity)
        await self.db.commit()

        if not by_owner:
            logger.log_admin_action(user.id, "delete", "activity", activity_id)
        else:
            logger.info(f"Activity deleted: {activity_id} by {user.roll_number}")

    async def approve_funded_activity(self, admin: Optional[User], activity_id: str) -> ActivityResponse:
        """Activate a pending COLLEGE_FUNDED proposal"""
        admin = self.require_admin(admin)

        result = await self.db.execute(
            select(Activity).where(Activity.id == activity_id).with_for_update()
        )
        activity = result.scalar_one_or_none()
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        if activity.type != ActivityType.COLLEGE_FUNDED or activity.is_active:
            await self.db.rollback()
            raise ConflictError(
                "Only pending college-funded activities can be approved",
                code="NOT_PENDING_APPROVAL",
            )

        await self.db.execute(
            select(User.id).where(User.id == activity.author_id).with_for_update()
        )
        limit = settings.MAX_ACTIVE_ACTIVITIES_PER_USER
        if await self.count_active_for_author(activity.author_id) >= limit:
            await self.db.rollback()
            raise QuotaExceededError(limit)

        activity.is_active = True
        await self.db.commit()

        logger.log_admin_action(admin.id, "approve", "activity", activity_id)
        return await self.get_activity(activity_id)
