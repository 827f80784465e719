"""Exam access layer."""
import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import atomic
from study_dashboard.models import Exam, ExamTopic
from study_dashboard.schemas.exam import ExamCreateSchema
from study_dashboard.services.cascade import EXAM_CASCADE, run_cascade

logger = logging.getLogger(__name__)


def _with_subject():
    return (
        select(Exam)
        .options(selectinload(Exam.subject))
        .execution_options(populate_existing=True)
    )


async def list_exams(db: AsyncSession, user_id: int | None) -> list[Exam]:
    if user_id is None:
        return []
    result = await db.execute(
        _with_subject().where(Exam.user_id == user_id).order_by(Exam.date.asc())
    )
    return list(result.scalars().all())


async def list_upcoming_exams(
    db: AsyncSession,
    user_id: int | None,
    limit: int = 5,
    now: datetime | None = None,
) -> list[Exam]:
    """Exams dated from the start of today onward, soonest first."""
    if user_id is None:
        return []
    start_of_day = (now or utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
    result = await db.execute(
        _with_subject()
        .where(Exam.user_id == user_id, Exam.date >= start_of_day)
        .order_by(Exam.date.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_exam(db: AsyncSession, exam_id: int, user_id: int | None = None) -> Exam | None:
    stmt = (
        _with_subject()
        .options(selectinload(Exam.exam_topics).selectinload(ExamTopic.topic))
        .where(Exam.id == exam_id)
    )
    if user_id is not None:
        stmt = stmt.where(Exam.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_exam(db: AsyncSession, user_id: int | None, data: ExamCreateSchema) -> Exam:
    exam = Exam(
        user_id=user_id,
        subject_id=data.subject_id,
        title=data.title.strip(),
        date=data.date,
        location=data.location or "",
        notes=data.notes or "",
    )
    db.add(exam)
    await db.commit()
    logger.info("Created exam %s for user %s", exam.id, user_id)
    return await get_exam(db, exam.id)


async def delete_exam(db: AsyncSession, exam_id: int, user_id: int | None = None) -> Exam | None:
    exam = await get_exam(db, exam_id, user_id)
    if exam is None:
        return None
    async with atomic(db):
        await run_cascade(db, EXAM_CASCADE, exam.id)
        await db.execute(
            delete(Exam).where(Exam.id == exam.id),
            execution_options={"synchronize_session": False},
        )
    logger.info("Deleted exam %s", exam.id)
    return exam


async def link_exam_topic(db: AsyncSession, exam_id: int, topic_id: int) -> ExamTopic:
    link = ExamTopic(exam_id=exam_id, topic_id=topic_id)
    db.add(link)
    await db.commit()
    result = await db.execute(
        select(ExamTopic)
        .options(selectinload(ExamTopic.topic))
        .where(ExamTopic.id == link.id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
