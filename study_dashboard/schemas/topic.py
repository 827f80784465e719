"""Pydantic schemas for topics and the topic join rows."""
from datetime import datetime

from pydantic import Field

from study_dashboard.schemas.base import CamelSchema


class TopicCreateSchema(CamelSchema):
    subject_id: int
    name: str = Field(min_length=2, max_length=255)
    description: str | None = None


class TopicOutSchema(CamelSchema):
    id: int
    subject_id: int
    name: str
    description: str | None = None
    is_completed: bool
    completed_at: datetime | None = None
    created_at: datetime


class TopicLinkSchema(CamelSchema):
    topic_id: int


class SessionTopicOutSchema(CamelSchema):
    id: int
    session_id: int
    topic_id: int
    is_completed: bool
    completed_at: datetime | None = None
    created_at: datetime
    topic: TopicOutSchema | None = None


class ExamTopicOutSchema(CamelSchema):
    id: int
    exam_id: int
    topic_id: int
    created_at: datetime
    topic: TopicOutSchema | None = None
