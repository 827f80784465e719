"""Pydantic schemas for study sessions."""
from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator

from study_dashboard.schemas.base import CamelSchema, parse_timestamp
from study_dashboard.schemas.subject import SubjectOutSchema
from study_dashboard.schemas.topic import SessionTopicOutSchema

SessionStatus = Literal["upcoming", "ongoing", "completed"]


class SessionCreateSchema(CamelSchema):
    subject_id: int
    topic: str = Field(min_length=2, max_length=255)
    date: date
    start_time: datetime
    end_time: datetime
    # the dashboard form posts this as "duration"
    duration_hours: float = Field(
        gt=0,
        validation_alias=AliasChoices("durationHours", "duration_hours", "duration"),
    )
    notes: str | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _timestamps(cls, value):
        return parse_timestamp(value)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_time < self.start_time:
            raise ValueError("End time must not be before start time")
        return self


class SessionOutSchema(CamelSchema):
    id: int
    user_id: int | None = None
    subject_id: int
    topic: str
    date: date
    start_time: datetime
    end_time: datetime
    duration_hours: float
    notes: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    subject: SubjectOutSchema | None = None


class SessionWithStatusSchema(SessionOutSchema):
    status: SessionStatus


class TodaySessionSchema(SessionWithStatusSchema):
    total_topics_count: int = 0
    completed_topics_count: int = 0


class SessionDetailSchema(SessionOutSchema):
    session_topics: list[SessionTopicOutSchema] = []
