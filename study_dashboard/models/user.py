"""User model: owner of subjects, sessions, exams and stats."""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    subjects = relationship("Subject", back_populates="user")
    stats = relationship("StudyStats", back_populates="user", uselist=False)
