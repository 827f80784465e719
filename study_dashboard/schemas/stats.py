"""Pydantic schemas for progress and study statistics."""
from pydantic import BaseModel

from study_dashboard.schemas.base import CamelSchema
from study_dashboard.schemas.subject import SubjectProgressSchema


class SubjectTopicProgressSchema(CamelSchema):
    completed_topics: int
    total_topics: int
    progress: int


class TotalProgressSchema(CamelSchema):
    completed_topics: int = 0
    total_topics: int = 0
    percentage: int = 0


class ProgressOutSchema(CamelSchema):
    subjects: list[SubjectProgressSchema] = []
    total_progress: TotalProgressSchema = TotalProgressSchema()


class StatsOutSchema(CamelSchema):
    total_study_time: str = "0h 0m"
    topics_completed: int = 0
    sessions_completed: int = 0
    avg_session_length: str = "0h 0m"
    study_time_change: int = 0
    topics_completed_change: int = 0
    sessions_completed_change: int = 0
    avg_session_length_change: int = 0


class WeekSchema(CamelSchema):
    week_index: int
    subject_hours: dict[str, float] = {}


class WeeklyStatsOutSchema(CamelSchema):
    weekly_data: list[WeekSchema]


class MessageSchema(BaseModel):
    message: str
