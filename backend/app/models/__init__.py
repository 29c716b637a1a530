# Re-export all models for convenient imports
from app.models.user import User
from app.models.verification_request import VerificationRequest, VerificationStatus
from app.models.activity import (
    Activity,
    ActivityType,
    Genre,
    Frequency,
    Comment,
    Like,
    JoinRequest,
    JoinRequestStatus,
)
from app.models.report import Report, ReportStatus

__all__ = [
    # User
    "User",
    # Verification
    "VerificationRequest",
    "VerificationStatus",
    # Activity
    "Activity",
    "ActivityType",
    "Genre",
    "Frequency",
    "Comment",
    "Like",
    "JoinRequest",
    "JoinRequestStatus",
    # Moderation
    "Report",
    "ReportStatus",
]
