"""
Admin moderation of reported activities
"""
from fastapi import APIRouter, Depends

from app.models.report import ReportStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin, get_report_service
from app.schemas.admin import OpenReportListResponse, ReportDecisionResponse, ResolveReportRequest
from app.services.report_service import ReportService

router = APIRouter()


@router.get("", response_model=OpenReportListResponse)
async def list_open_reports(
    admin: User = Depends(get_current_admin),
    service: ReportService = Depends(get_report_service)
):
    """Open reports, newest first"""
    return OpenReportListResponse(reports=await service.list_open(admin))


@router.post("/{report_id}/resolve", response_model=ReportDecisionResponse)
async def resolve_report(
    report_id: str,
    data: ResolveReportRequest,
    admin: User = Depends(get_current_admin),
    service: ReportService = Depends(get_report_service)
):
    report = await service.resolve(admin, report_id, ReportStatus(data.status))
    return ReportDecisionResponse(
        message=f"Report {report.status.value.lower()}",
        id=str(report.id),
        status=report.status,
        resolved_at=report.resolved_at,
    )
