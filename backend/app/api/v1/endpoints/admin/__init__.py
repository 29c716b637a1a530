"""
Admin API endpoints: verification review, report moderation and
funded-activity approval. All endpoints require an admin account.
"""
from fastapi import APIRouter

from app.api.v1.endpoints.admin import verification_requests, reports, activities

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

# Include all admin sub-routers
admin_router.include_router(verification_requests.router, prefix="/verification-requests", tags=["Admin Verification"])
admin_router.include_router(reports.router, prefix="/reports", tags=["Admin Reports"])
admin_router.include_router(activities.router, prefix="/activities", tags=["Admin Activities"])
