from study_dashboard.models.user import User
from study_dashboard.models.subject import Subject
from study_dashboard.models.topic import Topic
from study_dashboard.models.study_session import StudySession
from study_dashboard.models.exam import Exam
from study_dashboard.models.links import ExamTopic, SessionTopic
from study_dashboard.models.stats import StudyStats

__all__ = ["User", "Subject", "Topic", "StudySession", "SessionTopic", "Exam", "ExamTopic", "StudyStats"]
