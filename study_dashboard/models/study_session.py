"""StudySession model: a scheduled block of study time for one subject.

Status (upcoming / ongoing / completed) is derived at read time in
services.aggregation and never stored.
"""
from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import Base


class StudySession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    topic = Column(String(255), nullable=False)  # free-text label, not a Topic row
    date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_hours = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    subject = relationship("Subject", back_populates="sessions")
    session_topics = relationship("SessionTopic", back_populates="session", order_by="SessionTopic.id")
