"""Topic access layer. Topics are owned through their subject."""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from study_dashboard.core.clock import utcnow
from study_dashboard.db.session import atomic
from study_dashboard.models import Subject, Topic
from study_dashboard.schemas.topic import TopicCreateSchema
from study_dashboard.services.cascade import TOPIC_CASCADE, run_cascade
from study_dashboard.services.study_stats import bump_stats

logger = logging.getLogger(__name__)


async def list_topics(db: AsyncSession, subject_id: int) -> list[Topic]:
    result = await db.execute(
        select(Topic).where(Topic.subject_id == subject_id).order_by(Topic.name.asc())
    )
    return list(result.scalars().all())


async def get_topic(db: AsyncSession, topic_id: int, user_id: int | None = None) -> Topic | None:
    stmt = (
        select(Topic)
        .options(joinedload(Topic.subject))
        .where(Topic.id == topic_id)
        .execution_options(populate_existing=True)
    )
    if user_id is not None:
        stmt = stmt.where(Topic.subject.has(Subject.user_id == user_id))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_topic(db: AsyncSession, data: TopicCreateSchema) -> Topic:
    topic = Topic(
        subject_id=data.subject_id,
        name=data.name.strip(),
        description=data.description,
        is_completed=False,
    )
    db.add(topic)
    await db.commit()
    await db.refresh(topic)
    logger.info("Created topic %s in subject %s", topic.id, topic.subject_id)
    return topic


async def complete_topic(db: AsyncSession, topic_id: int, user_id: int | None = None) -> Topic | None:
    """Mark a topic done and count it in the owner's stats, in one transaction.

    Completing an already completed topic leaves both the row and the stats as
    they are.
    """
    topic = await get_topic(db, topic_id, user_id)
    if topic is None:
        return None
    owner_id = topic.subject.user_id if topic.subject.user_id is not None else user_id
    async with atomic(db):
        result = await db.execute(
            update(Topic)
            .where(Topic.id == topic.id, Topic.is_completed == False)  # noqa: E712
            .values(is_completed=True, completed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount and owner_id is not None:
            await bump_stats(db, owner_id, topics=1)
    if result.rowcount:
        logger.info("Completed topic %s", topic.id)
    return await get_topic(db, topic.id)


async def delete_topic(db: AsyncSession, topic_id: int, user_id: int | None = None) -> Topic | None:
    topic = await get_topic(db, topic_id, user_id)
    if topic is None:
        return None
    async with atomic(db):
        await run_cascade(db, TOPIC_CASCADE, topic.id)
        await db.execute(
            delete(Topic).where(Topic.id == topic.id),
            execution_options={"synchronize_session": False},
        )
    logger.info("Deleted topic %s", topic.id)
    return topic
