"""Subject access layer: CRUD scoped by owner, cascade delete."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from study_dashboard.core.errors import ConflictError
from study_dashboard.db.session import atomic
from study_dashboard.models import Subject
from study_dashboard.schemas.subject import SubjectCreateSchema, SubjectUpdateSchema
from study_dashboard.services.cascade import SUBJECT_CASCADE, run_cascade

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A subject with this name already exists"


def _is_duplicate_name(exc: IntegrityError) -> bool:
    text = str(exc.orig)
    return "uq_subjects_user_name" in text or "subjects.user_id, subjects.name" in text


async def list_subjects(db: AsyncSession, user_id: int | None) -> list[Subject]:
    if user_id is None:
        return []
    result = await db.execute(
        select(Subject).where(Subject.user_id == user_id).order_by(Subject.name.asc())
    )
    return list(result.scalars().all())


async def get_subject(db: AsyncSession, subject_id: int, user_id: int | None = None) -> Subject | None:
    """Fetch one subject; with ``user_id`` another owner's row counts as missing."""
    stmt = select(Subject).where(Subject.id == subject_id).execution_options(populate_existing=True)
    if user_id is not None:
        stmt = stmt.where(Subject.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


@asynccontextmanager
async def _unique_name(db: AsyncSession) -> AsyncIterator[None]:
    """Apply the block's writes in a savepoint, then commit.

    A duplicate name rolls back only the savepoint, so objects the caller
    already holds stay loaded and the session stays usable.
    """
    try:
        async with db.begin_nested():
            yield
            await db.flush()
    except IntegrityError as exc:
        if _is_duplicate_name(exc):
            raise ConflictError(DUPLICATE_NAME, field="name") from exc
        raise
    await db.commit()


async def insert_subject(db: AsyncSession, user_id: int | None, data: SubjectCreateSchema) -> Subject:
    async with _unique_name(db):
        subject = Subject(user_id=user_id, name=data.name.strip(), color=data.color)
        db.add(subject)
    await db.refresh(subject)
    logger.info("Created subject %s for user %s", subject.id, user_id)
    return subject


async def update_subject(
    db: AsyncSession,
    subject_id: int,
    user_id: int | None,
    data: SubjectUpdateSchema,
) -> Subject | None:
    subject = await get_subject(db, subject_id, user_id)
    if subject is None:
        return None
    async with _unique_name(db):
        if data.name is not None:
            subject.name = data.name.strip()
        if data.color is not None:
            subject.color = data.color
    await db.refresh(subject)
    return subject


async def delete_subject(db: AsyncSession, subject_id: int, user_id: int | None = None) -> Subject | None:
    """Remove a subject with its exams, sessions, topics and join rows, all or nothing."""
    subject = await get_subject(db, subject_id, user_id)
    if subject is None:
        return None
    async with atomic(db):
        await run_cascade(db, SUBJECT_CASCADE, subject.id)
        await db.execute(
            delete(Subject).where(Subject.id == subject.id),
            execution_options={"synchronize_session": False},
        )
    logger.info("Deleted subject %s", subject.id)
    return subject
