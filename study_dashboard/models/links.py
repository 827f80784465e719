"""Join tables linking sessions and exams to topics.

Exam progress is computed per subject and does not read exam_topics.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import Base


class SessionTopic(Base):
    __tablename__ = "session_topics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False, index=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    session = relationship("StudySession", back_populates="session_topics")
    topic = relationship("Topic")


class ExamTopic(Base):
    __tablename__ = "exam_topics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    exam = relationship("Exam", back_populates="exam_topics")
    topic = relationship("Topic")
