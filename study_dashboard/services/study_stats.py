"""Per-user StudyStats row: lazy creation and additive counter updates."""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from study_dashboard.core.clock import utcnow
from study_dashboard.models import StudyStats


async def get_stats(db: AsyncSession, user_id: int | None) -> StudyStats | None:
    if user_id is None:
        return None
    result = await db.execute(
        select(StudyStats)
        .where(StudyStats.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def ensure_stats(db: AsyncSession, user_id: int) -> StudyStats:
    """Return the user's row, adding (and flushing) a zeroed one if absent."""
    stats = await get_stats(db, user_id)
    if stats is None:
        stats = StudyStats(
            user_id=user_id,
            total_study_time=0,
            topics_completed=0,
            sessions_completed=0,
            last_updated=utcnow(),
        )
        db.add(stats)
        await db.flush()
    return stats


async def get_or_create_stats(db: AsyncSession, user_id: int) -> StudyStats:
    stats = await get_stats(db, user_id)
    if stats is None:
        stats = await ensure_stats(db, user_id)
        await db.commit()
        await db.refresh(stats)
    return stats


async def bump_stats(
    db: AsyncSession,
    user_id: int,
    *,
    minutes: int = 0,
    topics: int = 0,
    sessions: int = 0,
) -> None:
    """Add deltas in SQL; the caller owns the transaction."""
    await ensure_stats(db, user_id)
    await db.execute(
        update(StudyStats)
        .where(StudyStats.user_id == user_id)
        .values(
            total_study_time=StudyStats.total_study_time + minutes,
            topics_completed=StudyStats.topics_completed + topics,
            sessions_completed=StudyStats.sessions_completed + sessions,
            last_updated=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
