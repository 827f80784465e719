"""SQLAlchemy declarative base and model imports for Alembic."""
from study_dashboard.db.session import Base

# Import all models so Alembic can see them
from study_dashboard.models.exam import Exam  # noqa: F401
from study_dashboard.models.links import ExamTopic, SessionTopic  # noqa: F401
from study_dashboard.models.stats import StudyStats  # noqa: F401
from study_dashboard.models.study_session import StudySession  # noqa: F401
from study_dashboard.models.subject import Subject  # noqa: F401
from study_dashboard.models.topic import Topic  # noqa: F401
from study_dashboard.models.user import User  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Subject",
    "Topic",
    "StudySession",
    "SessionTopic",
    "Exam",
    "ExamTopic",
    "StudyStats",
]
