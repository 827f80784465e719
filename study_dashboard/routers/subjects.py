"""Subject routes."""
from fastapi import APIRouter

from study_dashboard.core.errors import NotFoundError
from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.subject import SubjectCreateSchema, SubjectOutSchema, SubjectUpdateSchema
from study_dashboard.schemas.topic import TopicOutSchema
from study_dashboard.services import subjects as subject_store
from study_dashboard.services import topics as topic_store

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


@router.get("", response_model=list[SubjectOutSchema])
async def list_subjects(db: DbSession, user: CurrentUser):
    return await subject_store.list_subjects(db, user.id)


@router.get("/{subject_id}", response_model=SubjectOutSchema)
async def get_subject(subject_id: int, db: DbSession, user: CurrentUser):
    subject = await subject_store.get_subject(db, subject_id, user.id)
    if subject is None:
        raise NotFoundError("Subject")
    return subject


@router.post("", response_model=SubjectOutSchema, status_code=201)
async def create_subject(body: SubjectCreateSchema, db: DbSession, user: CurrentUser):
    """Create a subject; 409 if the caller already has one with this name."""
    return await subject_store.insert_subject(db, user.id, body)


@router.patch("/{subject_id}", response_model=SubjectOutSchema)
async def update_subject(subject_id: int, body: SubjectUpdateSchema, db: DbSession, user: CurrentUser):
    subject = await subject_store.update_subject(db, subject_id, user.id, body)
    if subject is None:
        raise NotFoundError("Subject")
    return subject


@router.delete("/{subject_id}", response_model=SubjectOutSchema)
async def delete_subject(subject_id: int, db: DbSession, user: CurrentUser):
    """Delete a subject together with its topics, sessions and exams."""
    subject = await subject_store.delete_subject(db, subject_id, user.id)
    if subject is None:
        raise NotFoundError("Subject")
    return subject


@router.get("/{subject_id}/topics", response_model=list[TopicOutSchema])
async def list_subject_topics(subject_id: int, db: DbSession, user: CurrentUser):
    if await subject_store.get_subject(db, subject_id, user.id) is None:
        raise NotFoundError("Subject")
    return await topic_store.list_topics(db, subject_id)
