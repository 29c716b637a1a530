from sqlalchemy import Column, DateTime, Enum as SQLEnum, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ReportStatus(str, enum.Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"    # Admin acted on it
    DISMISSED = "DISMISSED"  # Admin found nothing wrong


class Report(Base):
    """A user flagging an activity for moderation; one per (reporter, activity)"""
    __tablename__ = "reports"

    __table_args__ = (
        Index('ix_reports_reporter_activity', 'reporter_id', 'activity_id', unique=True),
        Index('ix_reports_status_created', 'status', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    reporter_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_id = Column(GUID, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(SQLEnum(ReportStatus), default=ReportStatus.OPEN, nullable=False)

    resolved_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reporter = relationship("User", foreign_keys=[reporter_id])
    activity = relationship("Activity", back_populates="reports")

    def __repr__(self):
        return f"<Report {self.reporter_id} -> {self.activity_id} {self.status}>"
