from app.services.user_service import UserService
from app.services.activity_service import ActivityService
from app.services.engagement_service import EngagementService
from app.services.verification_service import VerificationService
from app.services.report_service import ReportService

__all__ = [
    "UserService",
    "ActivityService",
    "EngagementService",
    "VerificationService",
    "ReportService",
]
