from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AdminRequiredError, AuthenticationError
from app.models.user import User


class BaseService:
    """Services are built per request around the request's session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def require_user(user: Optional[User]) -> User:
        if user is None:
            raise AuthenticationError()
        return user

    @staticmethod
    def require_admin(user: Optional[User]) -> User:
        user = BaseService.require_user(user)
        if not user.is_admin:
            raise AdminRequiredError()
        return user
