"""Activity board models: activities and the rows that hang off them"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Text, ForeignKey, JSON, Boolean, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ActivityType(str, enum.Enum):
    OPEN = "OPEN"                      # One-off or recurring open event
    COMMUNITY = "COMMUNITY"            # Ongoing club/community
    COLLEGE_FUNDED = "COLLEGE_FUNDED"  # Funding proposal, needs admin approval


class Genre(str, enum.Enum):
    TECH = "TECH"
    ART = "ART"
    MUSIC = "MUSIC"
    DANCE = "DANCE"
    SPORTS = "SPORTS"
    OTHER = "OTHER"


class Frequency(str, enum.Enum):
    ONE_OFF = "ONE_OFF"
    WEEKLY = "WEEKLY"
    FORTNIGHTLY = "FORTNIGHTLY"
    MONTHLY = "MONTHLY"
    ON_DEMAND = "ON_DEMAND"


class JoinRequestStatus(str, enum.Enum):
    """Joins are auto-confirmed; there is no organiser approval step"""
    CONFIRMED = "CONFIRMED"


class Activity(Base):
    """
    A postable item: open event, community or college-funded proposal.

    like/comment/joined counts are not stored here; they are counted from
    the related rows whenever an activity is read.
    """
    __tablename__ = "activities"

    __table_args__ = (
        Index('ix_activities_author_active', 'author_id', 'is_active'),
        Index('ix_activities_active_created', 'is_active', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(SQLEnum(ActivityType), nullable=False, index=True)
    genre = Column(SQLEnum(Genre), nullable=False, index=True)
    frequency = Column(SQLEnum(Frequency), nullable=False)
    location = Column(String(255), nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    capacity = Column(Integer, nullable=True)  # None = unlimited

    is_active = Column(Boolean, default=True, nullable=False)

    # Type-specific payload: application_form for COLLEGE_FUNDED,
    # templates_used for OPEN / COMMUNITY
    funding_goal = Column(Integer, nullable=True)
    application_form = Column(JSON, nullable=True)
    templates_used = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    author = relationship("User", back_populates="activities")
    comments = relationship("Comment", back_populates="activity", passive_deletes=True)
    likes = relationship("Like", back_populates="activity", passive_deletes=True)
    join_requests = relationship("JoinRequest", back_populates="activity", passive_deletes=True)
    reports = relationship("Report", back_populates="activity", passive_deletes=True)

    def __repr__(self):
        return f"<Activity {self.title} ({self.type})>"


class Comment(Base):
    __tablename__ = "comments"

    __table_args__ = (
        Index('ix_comments_activity_created', 'activity_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    activity_id = Column(GUID, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    activity = relationship("Activity", back_populates="comments")
    user = relationship("User")

    def __repr__(self):
        return f"<Comment {self.user_id} on {self.activity_id}>"


class Like(Base):
    """Presence of the (user, activity) row means 'liked'"""
    __tablename__ = "likes"

    __table_args__ = (
        Index('ix_likes_user_activity', 'user_id', 'activity_id', unique=True),
        Index('ix_likes_activity_id', 'activity_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_id = Column(GUID, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    activity = relationship("Activity", back_populates="likes")

    def __repr__(self):
        return f"<Like {self.user_id} -> {self.activity_id}>"


class JoinRequest(Base):
    __tablename__ = "join_requests"

    __table_args__ = (
        Index('ix_join_requests_user_activity', 'user_id', 'activity_id', unique=True),
        Index('ix_join_requests_activity_status', 'activity_id', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_id = Column(GUID, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    status = Column(SQLEnum(JoinRequestStatus), default=JoinRequestStatus.CONFIRMED, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    activity = relationship("Activity", back_populates="join_requests")

    def __repr__(self):
        return f"<JoinRequest {self.user_id} -> {self.activity_id} {self.status}>"
