"""
User Service - accounts, profiles and verification requests

Handles:
- Signup / credential check by roll number
- Profile reads and partial updates
- Filing (or re-filing after rejection) an ID-verification request,
  with the ID document handed to object storage
"""

from dataclasses import dataclass
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from typing import Optional, Tuple
import asyncio
import functools
import mimetypes
import uuid

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidCredentialsError, ValidationError
from app.core.logging_config import logger
from app.core.security import create_user_token, get_password_hash, verify_password
from app.models.user import User
from app.models.verification_request import VerificationRequest, VerificationStatus
from app.schemas.auth import SignupRequest
from app.schemas.user import UserUpdate
from app.services.base import BaseService
from app.utils.sanitize import sanitize_html
from app.utils.storage_client import StorageClient

SIGNUP_MESSAGE = "User created successfully. Upload your ID to get verified."
DUPLICATE_ROLL_NUMBER = "User with this roll number already exists"


@dataclass
class UploadedDocument:
    """An uploaded file, already read into memory"""
    content: bytes
    content_type: str
    filename: Optional[str] = None


class UserService(BaseService):

    def __init__(self, db, storage: Optional[StorageClient] = None):
        super().__init__(db)
        self.storage = storage

    # ==================== ACCOUNTS ====================

    async def get_by_roll_number(self, roll_number: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.roll_number == roll_number))
        return result.scalar_one_or_none()

    async def signup(self, data: SignupRequest) -> User:
        """Create an unverified account; the roll number must be unused"""
        if await self.get_by_roll_number(data.roll_number):
            logger.log_auth_event("signup", False, roll_number=data.roll_number, reason="duplicate")
            raise ConflictError(DUPLICATE_ROLL_NUMBER, code="USER_EXISTS")

        user = User(
            roll_number=data.roll_number,
            name=sanitize_html(data.name),
            password_hash=get_password_hash(data.password),
            is_verified=False,
            is_admin=False,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(DUPLICATE_ROLL_NUMBER, code="USER_EXISTS")

        logger.log_auth_event("signup", True, roll_number=user.roll_number, account_id=user.id)
        return user

    async def authenticate(self, roll_number: str, password: str) -> Tuple[User, str]:
        """
        Check credentials

        Returns:
            (user, access token)

        Raises:
            InvalidCredentialsError for an unknown roll number or wrong password
        """
        user = await self.get_by_roll_number(roll_number)
        if user is None or not verify_password(password, user.password_hash):
            logger.log_auth_event("login", False, roll_number=roll_number, reason="invalid credentials")
            raise InvalidCredentialsError()

        logger.log_auth_event("login", True, roll_number=roll_number, account_id=user.id)
        return user, create_user_token(user)

    # ==================== PROFILE ====================

    async def get_profile(self, user: Optional[User]) -> Tuple[User, Optional[VerificationRequest]]:
        user = self.require_user(user)
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.verification_request))
            .where(User.id == user.id)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one()
        return user, user.verification_request

    async def update_profile(self, user: Optional[User], data: UserUpdate) -> User:
        """Only the fields present in the request change"""
        user = self.require_user(user)

        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            raise ValidationError.for_field("name", "Name cannot be empty")

        for key, value in changes.items():
            setattr(user, key, sanitize_html(str(value)) if value is not None else None)

        await self.db.commit()
        return user

    # ==================== VERIFICATION ====================

    def _check_document(self, document: UploadedDocument) -> None:
        if document.content_type not in settings.VERIFICATION_ALLOWED_CONTENT_TYPES:
            raise ValidationError.for_field("idImage", "ID image must be a JPEG, PNG or PDF file")
        if not document.content:
            raise ValidationError.for_field("idImage", "ID image is empty")
        if len(document.content) > settings.VERIFICATION_MAX_UPLOAD_SIZE:
            limit_mb = settings.VERIFICATION_MAX_UPLOAD_SIZE // (1024 * 1024)
            raise ValidationError.for_field("idImage", f"ID image must be at most {limit_mb}MB")

    async def _store_document(self, user: User, document: UploadedDocument) -> Tuple[str, str]:
        """Upload the document; returns (object key, URL)"""
        extension = mimetypes.guess_extension(document.content_type) or ""
        object_name = f"verification/{user.id}/{uuid.uuid4().hex}{extension}"

        loop = asyncio.get_event_loop()
        url = await loop.run_in_executor(
            None,
            functools.partial(
                self.storage.upload_bytes,
                document.content,
                object_name,
                content_type=document.content_type,
            ),
        )
        return object_name, url

    async def _discard_document(self, object_name: str) -> None:
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, self.storage.delete_file, object_name)

    async def request_verification(
        self,
        user: Optional[User],
        document: Optional[UploadedDocument] = None,
    ) -> VerificationRequest:
        """
        File a verification request, or re-file one that was rejected

        Raises:
            ConflictError when a request is pending or the user is verified
        """
        user = self.require_user(user)

        result = await self.db.execute(
            select(VerificationRequest).where(VerificationRequest.user_id == user.id)
        )
        request = result.scalar_one_or_none()

        if request is not None and request.status == VerificationStatus.PENDING:
            raise ConflictError("Verification request already pending", code="VERIFICATION_PENDING")
        if user.is_verified or (request is not None and request.status == VerificationStatus.APPROVED):
            raise ConflictError("User is already verified", code="ALREADY_VERIFIED")

        id_image_url = None
        object_name = None
        if document is not None:
            self._check_document(document)
            if self.storage is None:
                raise RuntimeError("No storage client configured for verification uploads")
            object_name, id_image_url = await self._store_document(user, document)

        if request is None:
            request = VerificationRequest(
                user_id=user.id,
                id_image_url=id_image_url,
                status=VerificationStatus.PENDING,
            )
            self.db.add(request)
        else:
            request.status = VerificationStatus.PENDING
            request.admin_id = None
            request.note = None
            if id_image_url is not None:
                request.id_image_url = id_image_url

        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent first request for the same user
            await self.db.rollback()
            if object_name is not None:
                await self._discard_document(object_name)
            raise ConflictError("Verification request already pending", code="VERIFICATION_PENDING")

        logger.info(f"Verification requested by {user.roll_number}",
                    extra={"event_type": "verification_requested", "account_id": user.id})
        return request
