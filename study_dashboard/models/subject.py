"""Subject model: top-level study category owning topics, sessions and exams."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import Base


class Subject(Base):
    __tablename__ = "subjects"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_subjects_user_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    # nullable for rows created before auth existed
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    color = Column(String(16), nullable=False)  # hex, e.g. #4285F4
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # children are removed by services.cascade, not by ORM cascades
    user = relationship("User", back_populates="subjects")
    topics = relationship("Topic", back_populates="subject", order_by="Topic.name")
    sessions = relationship("StudySession", back_populates="subject")
    exams = relationship("Exam", back_populates="subject")
