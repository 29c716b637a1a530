from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AdminRequiredError, AuthenticationError
from app.core.logging_config import logger, set_user_id
from app.core.security import decode_token
from app.core.types import is_valid_uuid
from app.models.user import User
from app.services.activity_service import ActivityService
from app.services.engagement_service import EngagementService
from app.services.report_service import ReportService
from app.services.user_service import UserService
from app.services.verification_service import VerificationService
from app.utils.storage_client import StorageClient, get_storage_client

security = HTTPBearer(auto_error=False)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Session cookie first, then an Authorization: Bearer header"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def get_optional_user(
    token: Optional[str] = Depends(get_token),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Resolve the caller to a User row, or None when no token was sent.

    Flags like is_verified / is_admin are read from the database, never
    from the token, so approvals take effect without a new login.
    """
    if not token:
        return None

    # A stale or forged token is treated as anonymous; endpoints that need
    # a user reject None with 401
    try:
        payload = decode_token(token)
    except AuthenticationError as e:
        logger.debug(f"Ignoring unusable token: {e.message}")
        return None

    user_id = payload.get("sub")
    if not user_id or not is_valid_uuid(user_id):
        return None

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if user is not None:
        set_user_id(str(user.id))
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """Get current authenticated user"""
    if user is None:
        raise AuthenticationError()
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise AdminRequiredError()
    return current_user


# ==================== Service Dependencies ====================

def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_user_service_with_storage(
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
) -> UserService:
    """For verification uploads; builds the storage client on first use"""
    return UserService(db, storage=storage)


def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_engagement_service(db: AsyncSession = Depends(get_db)) -> EngagementService:
    return EngagementService(db)


def get_verification_service(db: AsyncSession = Depends(get_db)) -> VerificationService:
    return VerificationService(db)


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(db)
