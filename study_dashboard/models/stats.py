"""StudyStats model: one row of running totals per user."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import Base


class StudyStats(Base):
    __tablename__ = "study_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    # counters only ever grow by deltas applied at completion time
    total_study_time = Column(Integer, nullable=False, default=0)  # minutes
    topics_completed = Column(Integer, nullable=False, default=0)
    sessions_completed = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="stats")
