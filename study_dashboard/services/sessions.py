"""Study-session access layer: listing, completion with stats, cascade delete."""
import logging
from datetime import date

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_dashboard.core.clock import today, utcnow
from study_dashboard.db.session import atomic
from study_dashboard.models import SessionTopic, StudySession
from study_dashboard.schemas.session import SessionCreateSchema
from study_dashboard.services.aggregation import duration_minutes
from study_dashboard.services.cascade import SESSION_CASCADE, run_cascade
from study_dashboard.services.study_stats import bump_stats

logger = logging.getLogger(__name__)


def _with_subject():
    # AsyncSession cannot lazy-load, so every read pulls the subject up front
    return (
        select(StudySession)
        .options(selectinload(StudySession.subject))
        .execution_options(populate_existing=True)
    )


def _with_topics(stmt):
    return stmt.options(selectinload(StudySession.session_topics).selectinload(SessionTopic.topic))


async def list_sessions(db: AsyncSession, user_id: int | None) -> list[StudySession]:
    if user_id is None:
        return []
    result = await db.execute(
        _with_subject()
        .where(StudySession.user_id == user_id)
        .order_by(StudySession.date.desc(), StudySession.start_time.desc())
    )
    return list(result.scalars().all())


async def list_sessions_between(
    db: AsyncSession,
    user_id: int | None,
    start: date,
    end: date,
) -> list[StudySession]:
    """Sessions dated in [start, end)."""
    if user_id is None:
        return []
    result = await db.execute(
        _with_subject()
        .where(
            StudySession.user_id == user_id,
            StudySession.date >= start,
            StudySession.date < end,
        )
        .order_by(StudySession.date.asc(), StudySession.start_time.asc())
    )
    return list(result.scalars().all())


async def list_today_sessions(
    db: AsyncSession,
    user_id: int | None,
    day: date | None = None,
) -> list[StudySession]:
    if user_id is None:
        return []
    day = day or today()
    result = await db.execute(
        _with_topics(_with_subject())
        .where(StudySession.user_id == user_id, StudySession.date == day)
        .order_by(StudySession.start_time.asc())
    )
    return list(result.scalars().all())


async def get_session(db: AsyncSession, session_id: int, user_id: int | None = None) -> StudySession | None:
    stmt = _with_topics(_with_subject()).where(StudySession.id == session_id)
    if user_id is not None:
        stmt = stmt.where(StudySession.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_session(db: AsyncSession, user_id: int | None, data: SessionCreateSchema) -> StudySession:
    session = StudySession(
        user_id=user_id,
        subject_id=data.subject_id,
        topic=data.topic.strip(),
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        duration_hours=data.duration_hours,
        notes=data.notes,
    )
    db.add(session)
    await db.commit()
    logger.info("Created session %s for user %s", session.id, user_id)
    return await get_session(db, session.id)


async def complete_session(db: AsyncSession, session_id: int, user_id: int | None = None) -> StudySession | None:
    """Stamp completedAt and add the session to the owner's stats atomically.

    Only the first completion counts: the update is conditional on
    ``completed_at IS NULL`` so a repeated or concurrent call bumps nothing.
    """
    session = await get_session(db, session_id, user_id)
    if session is None:
        return None
    owner_id = session.user_id if session.user_id is not None else user_id
    async with atomic(db):
        result = await db.execute(
            update(StudySession)
            .where(StudySession.id == session.id, StudySession.completed_at.is_(None))
            .values(completed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount and owner_id is not None:
            await bump_stats(
                db,
                owner_id,
                minutes=duration_minutes(session.duration_hours),
                sessions=1,
            )
    if result.rowcount:
        logger.info("Completed session %s (%.2fh)", session.id, session.duration_hours)
    else:
        logger.info("Session %s was already completed", session.id)
    return await get_session(db, session.id)


async def delete_session(db: AsyncSession, session_id: int, user_id: int | None = None) -> StudySession | None:
    session = await get_session(db, session_id, user_id)
    if session is None:
        return None
    async with atomic(db):
        await run_cascade(db, SESSION_CASCADE, session.id)
        await db.execute(
            delete(StudySession).where(StudySession.id == session.id),
            execution_options={"synchronize_session": False},
        )
    logger.info("Deleted session %s", session.id)
    return session


async def link_session_topic(db: AsyncSession, session_id: int, topic_id: int) -> SessionTopic:
    link = SessionTopic(session_id=session_id, topic_id=topic_id, is_completed=False)
    db.add(link)
    await db.commit()
    return await get_session_topic(db, link.id)


async def get_session_topic(db: AsyncSession, link_id: int) -> SessionTopic | None:
    result = await db.execute(
        select(SessionTopic)
        .options(selectinload(SessionTopic.topic))
        .where(SessionTopic.id == link_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def complete_session_topic(db: AsyncSession, link_id: int) -> SessionTopic | None:
    link = await get_session_topic(db, link_id)
    if link is None:
        return None
    if not link.is_completed:
        link.is_completed = True
        link.completed_at = utcnow()
        await db.commit()
    return await get_session_topic(db, link.id)
