"""
Report Service - admin moderation queue for reported activities
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.exceptions import AlreadyProcessedError, ReportNotFoundError, ValidationError
from app.core.logging_config import logger
from app.models.activity import Activity
from app.models.report import Report, ReportStatus
from app.models.user import User
from app.schemas.activity import AuthorSummary
from app.schemas.admin import OpenReportItem, ReportedActivitySummary
from app.services.base import BaseService


class ReportService(BaseService):
    """Service for listing and resolving reports"""

    async def list_open(self, admin: Optional[User]) -> List[OpenReportItem]:
        """OPEN reports, newest first, with reporter and activity summaries"""
        self.require_admin(admin)

        result = await self.db.execute(
            select(Report)
            .options(
                selectinload(Report.reporter),
                selectinload(Report.activity).selectinload(Activity.author),
            )
            .where(Report.status == ReportStatus.OPEN)
            .order_by(Report.created_at.desc())
        )
        return [
            OpenReportItem(
                id=str(report.id),
                reason=report.reason,
                status=report.status,
                created_at=report.created_at,
                reporter=AuthorSummary.model_validate(report.reporter),
                activity=ReportedActivitySummary(
                    id=str(report.activity.id),
                    title=report.activity.title,
                    type=report.activity.type,
                    author=AuthorSummary.model_validate(report.activity.author),
                ),
            )
            for report in result.scalars().all()
        ]

    async def resolve(self, admin: Optional[User], report_id: str, status: ReportStatus) -> Report:
        """Close an OPEN report as RESOLVED or DISMISSED"""
        admin = self.require_admin(admin)
        status = ReportStatus(status)
        if status == ReportStatus.OPEN:
            raise ValidationError.for_field("status", "A report can only be resolved or dismissed")

        result = await self.db.execute(
            select(Report).where(Report.id == report_id).with_for_update()
        )
        report = result.scalar_one_or_none()
        if report is None:
            raise ReportNotFoundError(report_id)
        if report.status != ReportStatus.OPEN:
            await self.db.rollback()
            raise AlreadyProcessedError("Report")

        report.status = status
        report.resolved_by = admin.id
        report.resolved_at = datetime.utcnow()
        await self.db.commit()

        logger.log_admin_action(admin.id, status.value.lower(), "report", report_id)
        return report
