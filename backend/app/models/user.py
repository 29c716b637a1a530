from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class User(Base):
    """Student account, identified by institutional roll number"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    roll_number = Column(String(20), unique=True, index=True, nullable=False)  # e.g. CS2023/014
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    profile_pic_url = Column(Text, nullable=True)

    is_verified = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    verification_request = relationship(
        "VerificationRequest",
        back_populates="user",
        uselist=False,
        foreign_keys="VerificationRequest.user_id",
        passive_deletes=True,
    )
    activities = relationship("Activity", back_populates="author", passive_deletes=True)

    def __repr__(self):
        return f"<User {self.roll_number}>"
