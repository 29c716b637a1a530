"""
Verification Service - admin review of ID-verification requests

PENDING -> APPROVED (flips User.is_verified) or REJECTED (note required).
Approval writes the request and the user in one transaction.
"""

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.exceptions import AlreadyProcessedError, VerificationRequestNotFoundError
from app.core.logging_config import logger
from app.models.user import User
from app.models.verification_request import VerificationRequest, VerificationStatus
from app.schemas.admin import PendingVerificationItem, RejectVerificationRequest
from app.schemas.activity import AuthorSummary
from app.schemas.common import parse_model
from app.services.base import BaseService
from app.utils.sanitize import sanitize_html


class VerificationService(BaseService):

    async def list_pending(self, admin: Optional[User]) -> List[PendingVerificationItem]:
        """PENDING requests, oldest first"""
        self.require_admin(admin)

        result = await self.db.execute(
            select(VerificationRequest)
            .options(selectinload(VerificationRequest.user))
            .where(VerificationRequest.status == VerificationStatus.PENDING)
            .order_by(VerificationRequest.created_at.asc())
        )
        return [
            PendingVerificationItem(
                id=str(request.id),
                status=request.status,
                id_image_url=request.id_image_url,
                note=request.note,
                created_at=request.created_at,
                user=AuthorSummary.model_validate(request.user),
            )
            for request in result.scalars().all()
        ]

    async def _get_pending_for_update(self, request_id: str) -> VerificationRequest:
        result = await self.db.execute(
            select(VerificationRequest)
            .where(VerificationRequest.id == request_id)
            .with_for_update()
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise VerificationRequestNotFoundError(request_id)
        if request.status != VerificationStatus.PENDING:
            await self.db.rollback()
            raise AlreadyProcessedError()
        return request

    async def approve(
        self,
        admin: Optional[User],
        request_id: str,
        note: Optional[str] = None,
    ) -> VerificationRequest:
        """Mark the request APPROVED and the user verified, both or neither"""
        admin = self.require_admin(admin)
        request = await self._get_pending_for_update(request_id)

        result = await self.db.execute(
            select(User).where(User.id == request.user_id).with_for_update()
        )
        user = result.scalar_one()

        request.status = VerificationStatus.APPROVED
        request.admin_id = admin.id
        request.note = sanitize_html(note) if note else None
        user.is_verified = True

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.log_error_with_context(e, context="approve_verification", request_id=request_id)
            raise

        logger.log_admin_action(admin.id, "approve", "verification_request", request_id,
                                target_user=user.roll_number)
        return request

    async def reject(self, admin: Optional[User], request_id: str, note: str) -> VerificationRequest:
        admin = self.require_admin(admin)
        data = parse_model(RejectVerificationRequest, {"note": note})
        request = await self._get_pending_for_update(request_id)

        request.status = VerificationStatus.REJECTED
        request.admin_id = admin.id
        request.note = sanitize_html(data.note)
        await self.db.commit()

        logger.log_admin_action(admin.id, "reject", "verification_request", request_id)
        return request
