"""Ordered child-row deletes run before removing a parent row.

Each step deletes rows of ``model`` whose ``column`` points either straight at
the parent id, or (when ``via`` is set) at any row of ``via`` whose
``via_column`` points at the parent id. Steps run in list order, so children
always go before the rows they reference.
"""
import logging
from typing import NamedTuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from study_dashboard.models import Exam, ExamTopic, SessionTopic, StudySession, Topic

logger = logging.getLogger(__name__)


class CascadeStep(NamedTuple):
    model: type
    column: str
    via: type | None = None
    via_column: str | None = None


SUBJECT_CASCADE = (
    CascadeStep(ExamTopic, "exam_id", Exam, "subject_id"),
    CascadeStep(Exam, "subject_id"),
    CascadeStep(SessionTopic, "session_id", StudySession, "subject_id"),
    CascadeStep(StudySession, "subject_id"),
    # join rows from other subjects' sessions/exams that point at these topics
    CascadeStep(SessionTopic, "topic_id", Topic, "subject_id"),
    CascadeStep(ExamTopic, "topic_id", Topic, "subject_id"),
    CascadeStep(Topic, "subject_id"),
)

SESSION_CASCADE = (CascadeStep(SessionTopic, "session_id"),)

EXAM_CASCADE = (CascadeStep(ExamTopic, "exam_id"),)

TOPIC_CASCADE = (
    CascadeStep(SessionTopic, "topic_id"),
    CascadeStep(ExamTopic, "topic_id"),
)


def cascade_statement(step: CascadeStep, parent_id: int):
    target = getattr(step.model, step.column)
    if step.via is None:
        return delete(step.model).where(target == parent_id)
    parents = select(step.via.id).where(getattr(step.via, step.via_column) == parent_id)
    return delete(step.model).where(target.in_(parents))


async def run_cascade(db: AsyncSession, steps, parent_id: int) -> None:
    """Issue the cascade deletes; the caller owns the transaction."""
    for step in steps:
        result = await db.execute(
            cascade_statement(step, parent_id),
            execution_options={"synchronize_session": False},
        )
        if result.rowcount:
            logger.debug("Cascade removed %s row(s) from %s", result.rowcount, step.model.__tablename__)
