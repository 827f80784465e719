from study_dashboard.schemas.exam import ExamCreateSchema, ExamOutSchema, ExamWithProgressSchema
from study_dashboard.schemas.session import SessionCreateSchema, SessionOutSchema, SessionWithStatusSchema
from study_dashboard.schemas.stats import ProgressOutSchema, StatsOutSchema, WeeklyStatsOutSchema
from study_dashboard.schemas.subject import SubjectCreateSchema, SubjectOutSchema, SubjectProgressSchema
from study_dashboard.schemas.topic import TopicCreateSchema, TopicOutSchema
from study_dashboard.schemas.user import UserCreateSchema, UserLoginSchema, UserOutSchema

__all__ = [
    "ExamCreateSchema",
    "ExamOutSchema",
    "ExamWithProgressSchema",
    "ProgressOutSchema",
    "SessionCreateSchema",
    "SessionOutSchema",
    "SessionWithStatusSchema",
    "StatsOutSchema",
    "SubjectCreateSchema",
    "SubjectOutSchema",
    "SubjectProgressSchema",
    "TopicCreateSchema",
    "TopicOutSchema",
    "UserCreateSchema",
    "UserLoginSchema",
    "UserOutSchema",
    "WeeklyStatsOutSchema",
]
