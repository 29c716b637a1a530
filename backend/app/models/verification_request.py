from sqlalchemy import Column, DateTime, Enum as SQLEnum, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class VerificationStatus(str, enum.Enum):
    """PENDING -> APPROVED | REJECTED; a rejected user may ask again (back to PENDING)"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VerificationRequest(Base):
    """A user's single ID-verification ticket, reviewed by an admin"""
    __tablename__ = "verification_requests"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    admin_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    id_image_url = Column(Text, nullable=True)  # URL returned by object storage, never raw bytes
    status = Column(SQLEnum(VerificationStatus), default=VerificationStatus.PENDING, nullable=False, index=True)
    note = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="verification_request", foreign_keys=[user_id])
    admin = relationship("User", foreign_keys=[admin_id])

    def __repr__(self):
        return f"<VerificationRequest {self.user_id} {self.status}>"
