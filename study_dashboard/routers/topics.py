"""Topic routes."""
from fastapi import APIRouter

from study_dashboard.core.errors import NotFoundError, ValidationError
from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.stats import MessageSchema
from study_dashboard.schemas.topic import TopicCreateSchema, TopicOutSchema
from study_dashboard.services import subjects as subject_store
from study_dashboard.services import topics as topic_store

router = APIRouter(prefix="/api/topics", tags=["topics"])


@router.post("", response_model=TopicOutSchema, status_code=201)
async def create_topic(body: TopicCreateSchema, db: DbSession, user: CurrentUser):
    if await subject_store.get_subject(db, body.subject_id, user.id) is None:
        raise ValidationError.for_field("subjectId", "Subject does not exist")
    return await topic_store.insert_topic(db, body)


@router.post("/{topic_id}/complete", response_model=TopicOutSchema)
async def complete_topic(topic_id: int, db: DbSession, user: CurrentUser):
    """Mark a topic completed and count it in the caller's stats."""
    topic = await topic_store.complete_topic(db, topic_id, user.id)
    if topic is None:
        raise NotFoundError("Topic")
    return topic


@router.delete("/{topic_id}", response_model=MessageSchema)
async def delete_topic(topic_id: int, db: DbSession, user: CurrentUser):
    if await topic_store.delete_topic(db, topic_id, user.id) is None:
        raise NotFoundError("Topic")
    return MessageSchema(message="Topic deleted successfully")
