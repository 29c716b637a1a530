"""
Activity schemas

Creation is validated against one of three shapes selected by the `type`
field. Each shape shares the base fields and adds its own type-specific
payload (templates_used for OPEN/COMMUNITY, application_form for
COLLEGE_FUNDED).
"""
from dataclasses import dataclass, field as dc_field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.models.activity import Activity, ActivityType, Frequency, Genre
from app.schemas.common import CamelModel, collect_errors, to_naive_utc


class Visibility(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class ActivitySort(str, Enum):
    NEWEST = "newest"
    LIKES = "likes"


# ============== Shared base ==============

class ActivityBase(CamelModel):
    """Fields every activity type carries, with identical bounds"""
    title: str = Field(..., min_length=5, max_length=120)
    description: str = Field(..., min_length=15, max_length=2000)
    genre: Genre
    frequency: Frequency
    location: Optional[str] = Field(None, max_length=255)
    # validate_default so the one-off rule runs even when startDate is omitted
    start_date: Optional[datetime] = Field(None, validate_default=True)
    end_date: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)

    @field_validator("start_date")
    @classmethod
    def start_date_required_for_one_off(cls, v: Optional[datetime], info: ValidationInfo):
        if v is None and info.data.get("frequency") == Frequency.ONE_OFF:
            raise ValueError("Start date is required for one-off activities")
        return to_naive_utc(v)

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: Optional[datetime], info: ValidationInfo):
        v = to_naive_utc(v)
        start = info.data.get("start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("End date must be after start date")
        return v


# ============== Type-specific payloads ==============

class OpenTemplate(CamelModel):
    meeting_point_details: Optional[str] = Field(None, max_length=500)
    expected_duration_minutes: Optional[int] = Field(None, ge=1)


class CommunityTemplate(CamelModel):
    community_name: str = Field(..., min_length=3, max_length=50)
    goals: str = Field(..., min_length=10, max_length=2000)
    meeting_frequency: Literal["WEEKLY", "MONTHLY", "ON_DEMAND"]
    first_meet_date: Optional[datetime] = None
    co_organisers: Optional[List[str]] = None
    public_private: Optional[Visibility] = None

    @field_validator("first_meet_date")
    @classmethod
    def normalize_first_meet(cls, v):
        return to_naive_utc(v)


class BudgetItem(CamelModel):
    item: Optional[str] = Field(None, max_length=200)
    cost: Optional[int] = Field(None, ge=0)


class RepresentativeContact(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    roll_number: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)


class FundedApplicationForm(CamelModel):
    budget_breakdown: Optional[List[BudgetItem]] = None
    venue_requirement: Optional[str] = Field(None, max_length=1000)
    expected_attendees: Optional[int] = Field(None, ge=0)
    safety_plan: Optional[str] = Field(None, max_length=2000)
    proposed_dates: Optional[List[datetime]] = None
    representative_contact: Optional[RepresentativeContact] = None

    @field_validator("proposed_dates")
    @classmethod
    def normalize_proposed_dates(cls, v):
        return [to_naive_utc(d) for d in v] if v else v


# ============== Creation shapes ==============

class OpenActivityCreate(ActivityBase, OpenTemplate):
    type: Literal["OPEN"]

    def type_payload(self) -> OpenTemplate:
        return OpenTemplate.model_validate(self.model_dump(include=set(OpenTemplate.model_fields)))


class CommunityActivityCreate(ActivityBase, CommunityTemplate):
    type: Literal["COMMUNITY"]

    def type_payload(self) -> CommunityTemplate:
        return CommunityTemplate.model_validate(self.model_dump(include=set(CommunityTemplate.model_fields)))


class FundedActivityCreate(ActivityBase, FundedApplicationForm):
    type: Literal["COLLEGE_FUNDED"]
    funding_goal: int = Field(..., ge=1)

    def type_payload(self) -> FundedApplicationForm:
        return FundedApplicationForm.model_validate(
            self.model_dump(include=set(FundedApplicationForm.model_fields))
        )


ActivityCreate = Union[OpenActivityCreate, CommunityActivityCreate, FundedActivityCreate]

ACTIVITY_SCHEMAS = {
    ActivityType.OPEN: OpenActivityCreate,
    ActivityType.COMMUNITY: CommunityActivityCreate,
    ActivityType.COLLEGE_FUNDED: FundedActivityCreate,
}


@dataclass
class ActivityValidationResult:
    """Either a normalized creation record or a list of field errors, never both"""
    activity: Optional[ActivityCreate] = None
    errors: List[Dict[str, str]] = dc_field(default_factory=list)
    invalid_type: bool = False

    @property
    def is_valid(self) -> bool:
        return self.activity is not None


def resolve_activity_type(payload: Mapping[str, Any]) -> Optional[ActivityType]:
    """The declared activity type, or None when missing/unknown"""
    raw = payload.get("type") if isinstance(payload, Mapping) else None
    try:
        return ActivityType(raw)
    except ValueError:
        return None


def validate_activity_payload(payload: Mapping[str, Any]) -> ActivityValidationResult:
    """
    Select the schema for payload["type"] and apply it.

    An unknown type is rejected before any schema runs.
    """
    activity_type = resolve_activity_type(payload)
    if activity_type is None:
        return ActivityValidationResult(
            errors=[{"field": "type", "message": "Invalid activity type"}],
            invalid_type=True,
        )

    schema = ACTIVITY_SCHEMAS[activity_type]
    try:
        return ActivityValidationResult(activity=schema.model_validate(payload))
    except PydanticValidationError as exc:
        return ActivityValidationResult(errors=collect_errors(exc))


# ============== Update ==============

class ActivityUpdate(CamelModel):
    """Partial update by owner or admin; only fields that are sent change"""
    title: Optional[str] = Field(None, min_length=5, max_length=120)
    description: Optional[str] = Field(None, min_length=15, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


# ============== Responses ==============

class AuthorSummary(CamelModel):
    id: str
    name: str
    roll_number: str
    is_verified: bool


class ActivityResponse(CamelModel):
    id: str
    title: str
    description: str
    type: ActivityType
    genre: Genre
    frequency: Frequency
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity: Optional[int] = None
    is_active: bool
    funding_goal: Optional[int] = None
    like_count: int = 0
    comment_count: int = 0
    joined_count: int = 0
    author: AuthorSummary
    application_form: Optional[Dict[str, Any]] = None
    templates_used: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_activity(
        cls,
        activity: Activity,
        like_count: int = 0,
        comment_count: int = 0,
        joined_count: int = 0,
    ) -> "ActivityResponse":
        """Build from an Activity whose author relationship is loaded"""
        return cls(
            id=str(activity.id),
            title=activity.title,
            description=activity.description,
            type=activity.type,
            genre=activity.genre,
            frequency=activity.frequency,
            location=activity.location,
            start_date=activity.start_date,
            end_date=activity.end_date,
            capacity=activity.capacity,
            is_active=activity.is_active,
            funding_goal=activity.funding_goal,
            like_count=like_count or 0,
            comment_count=comment_count or 0,
            joined_count=joined_count or 0,
            author=AuthorSummary.model_validate(activity.author),
            application_form=activity.application_form,
            templates_used=activity.templates_used,
            created_at=activity.created_at,
            updated_at=activity.updated_at,
        )


class ActivityCreatedResponse(CamelModel):
    message: str
    activity: ActivityResponse


class ActivityDetailResponse(CamelModel):
    activity: ActivityResponse


class ActivityListResponse(CamelModel):
    activities: List[ActivityResponse]
    total: int
    limit: int
    offset: int
