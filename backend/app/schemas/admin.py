from pydantic import Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from app.models.activity import ActivityType
from app.models.report import ReportStatus
from app.models.verification_request import VerificationStatus
from app.schemas.activity import AuthorSummary
from app.schemas.common import CamelModel


# ==================== Verification Review Schemas ====================

class ApproveVerificationRequest(CamelModel):
    """Approval note is optional"""
    note: Optional[str] = Field(None, max_length=500)


class RejectVerificationRequest(CamelModel):
    """Rejections must tell the user why"""
    note: str = Field(..., min_length=5, max_length=500)

    @field_validator('note')
    @classmethod
    def note_not_blank(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Note must be at least 5 characters")
        return v


class PendingVerificationItem(CamelModel):
    id: str
    status: VerificationStatus
    id_image_url: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    user: AuthorSummary


class PendingVerificationListResponse(CamelModel):
    requests: List[PendingVerificationItem]


class VerificationDecisionResponse(CamelModel):
    message: str
    id: str
    status: VerificationStatus
    note: Optional[str] = None


# ==================== Report Moderation Schemas ====================

class ReportedActivitySummary(CamelModel):
    id: str
    title: str
    type: ActivityType
    author: AuthorSummary


class OpenReportItem(CamelModel):
    id: str
    reason: str
    status: ReportStatus
    created_at: datetime
    reporter: AuthorSummary
    activity: ReportedActivitySummary


class OpenReportListResponse(CamelModel):
    reports: List[OpenReportItem]


class ResolveReportRequest(CamelModel):
    status: Literal["RESOLVED", "DISMISSED"]


class ReportDecisionResponse(CamelModel):
    message: str
    id: str
    status: ReportStatus
    resolved_at: Optional[datetime] = None
