"""Pydantic schemas for exams."""
from datetime import datetime

from pydantic import Field, field_validator

from study_dashboard.schemas.base import CamelSchema, parse_timestamp
from study_dashboard.schemas.subject import SubjectOutSchema
from study_dashboard.schemas.topic import ExamTopicOutSchema


class ExamCreateSchema(CamelSchema):
    subject_id: int
    title: str = Field(min_length=2, max_length=255)
    date: datetime
    location: str | None = ""
    notes: str | None = ""

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, value):
        return parse_timestamp(value)


class ExamOutSchema(CamelSchema):
    id: int
    user_id: int | None = None
    subject_id: int
    title: str
    date: datetime
    location: str | None = None
    notes: str | None = None
    created_at: datetime
    subject: SubjectOutSchema | None = None


class ExamWithProgressSchema(ExamOutSchema):
    progress: int = 0


class ExamDetailSchema(ExamWithProgressSchema):
    exam_topics: list[ExamTopicOutSchema] = []
