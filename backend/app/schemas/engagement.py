"""Likes, joins, comments and reports"""
from pydantic import Field
from typing import List
from datetime import datetime

from app.models.report import ReportStatus
from app.schemas.activity import AuthorSummary
from app.schemas.common import CamelModel


class CommentCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(CamelModel):
    id: str
    activity_id: str
    text: str
    created_at: datetime
    user: AuthorSummary


class CommentListResponse(CamelModel):
    comments: List[CommentResponse]


class ReportCreate(CamelModel):
    reason: str = Field(..., min_length=10, max_length=300)


class ReportResponse(CamelModel):
    id: str
    activity_id: str
    reason: str
    status: ReportStatus
    created_at: datetime


class ReportSubmittedResponse(CamelModel):
    message: str
    report: ReportResponse


class LikeResponse(CamelModel):
    message: str
    liked: bool
    like_count: int


class JoinResponse(CamelModel):
    message: str
    joined: bool
    joined_count: int
