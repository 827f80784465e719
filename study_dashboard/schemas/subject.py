"""Pydantic schemas for subjects."""
from datetime import datetime

from pydantic import Field

from study_dashboard.schemas.base import CamelSchema

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class SubjectCreateSchema(CamelSchema):
    name: str = Field(min_length=2, max_length=255)
    color: str = Field(pattern=HEX_COLOR)


class SubjectUpdateSchema(CamelSchema):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    color: str | None = Field(default=None, pattern=HEX_COLOR)


class SubjectOutSchema(CamelSchema):
    id: int
    user_id: int | None = None
    name: str
    color: str
    created_at: datetime


class SubjectProgressSchema(SubjectOutSchema):
    """Subject enriched with topic progress and session totals."""

    completed_topics: int = 0
    total_topics: int = 0
    progress: int = 0
    session_count: int = 0
    total_study_time: str = "0h 0m"
    last_studied: datetime | None = None
