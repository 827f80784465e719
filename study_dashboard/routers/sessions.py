"""Study-session routes. Static paths are declared before /{session_id}."""
from fastapi import APIRouter

from study_dashboard.core.errors import NotFoundError, ValidationError
from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.session import (
    SessionCreateSchema,
    SessionDetailSchema,
    SessionOutSchema,
    SessionWithStatusSchema,
    TodaySessionSchema,
)
from study_dashboard.schemas.stats import MessageSchema
from study_dashboard.schemas.topic import SessionTopicOutSchema, TopicLinkSchema
from study_dashboard.services import aggregation
from study_dashboard.services import sessions as session_store
from study_dashboard.services import subjects as subject_store
from study_dashboard.services import topics as topic_store

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

ALL = "all"


def _subject_filter(subject: str | None) -> int | None:
    if not subject or subject == ALL:
        return None
    try:
        return int(subject)
    except ValueError:
        raise ValidationError.for_field("subject", "Subject filter must be an id or 'all'") from None


def _status_filter(status: str | None) -> str | None:
    if not status or status == ALL:
        return None
    if status not in aggregation.SESSION_STATUSES:
        raise ValidationError.for_field(
            "status", f"Status must be one of: {', '.join(aggregation.SESSION_STATUSES)}, all"
        )
    return status


@router.get("", response_model=list[SessionWithStatusSchema])
async def list_sessions(
    db: DbSession,
    user: CurrentUser,
    subject: str | None = None,
    status: str | None = None,
):
    """List sessions with derived status, optionally filtered by subject id and status."""
    sessions = await session_store.list_sessions(db, user.id)
    return aggregation.filter_sessions(
        sessions,
        subject_id=_subject_filter(subject),
        status=_status_filter(status),
    )


@router.get("/all", response_model=list[SessionOutSchema])
async def list_all_sessions(db: DbSession, user: CurrentUser):
    return await session_store.list_sessions(db, user.id)


@router.get("/today", response_model=list[TodaySessionSchema])
async def list_today_sessions(db: DbSession, user: CurrentUser):
    """Today's sessions with their linked-topic counts."""
    sessions = await session_store.list_today_sessions(db, user.id)
    return [aggregation.today_session(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionDetailSchema)
async def get_session(session_id: int, db: DbSession, user: CurrentUser):
    session = await session_store.get_session(db, session_id, user.id)
    if session is None:
        raise NotFoundError("Session")
    return session


@router.post("", response_model=SessionOutSchema, status_code=201)
async def create_session(body: SessionCreateSchema, db: DbSession, user: CurrentUser):
    if await subject_store.get_subject(db, body.subject_id, user.id) is None:
        raise ValidationError.for_field("subjectId", "Subject does not exist")
    return await session_store.insert_session(db, user.id, body)


@router.post("/{session_id}/start", response_model=SessionOutSchema)
async def start_session(session_id: int, db: DbSession, user: CurrentUser):
    # starting keeps no state; status derives from the clock
    session = await session_store.get_session(db, session_id, user.id)
    if session is None:
        raise NotFoundError("Session")
    return session


@router.post("/{session_id}/complete", response_model=SessionOutSchema)
async def complete_session(session_id: int, db: DbSession, user: CurrentUser):
    """Mark the session completed and add its duration to the caller's stats."""
    session = await session_store.complete_session(db, session_id, user.id)
    if session is None:
        raise NotFoundError("Session")
    return session


@router.post("/{session_id}/topics", response_model=SessionTopicOutSchema, status_code=201)
async def link_topic(session_id: int, body: TopicLinkSchema, db: DbSession, user: CurrentUser):
    if await session_store.get_session(db, session_id, user.id) is None:
        raise NotFoundError("Session")
    if await topic_store.get_topic(db, body.topic_id, user.id) is None:
        raise ValidationError.for_field("topicId", "Topic does not exist")
    return await session_store.link_session_topic(db, session_id, body.topic_id)


@router.post("/{session_id}/topics/{link_id}/complete", response_model=SessionTopicOutSchema)
async def complete_linked_topic(session_id: int, link_id: int, db: DbSession, user: CurrentUser):
    session = await session_store.get_session(db, session_id, user.id)
    if session is None or link_id not in {link.id for link in session.session_topics}:
        raise NotFoundError("Session topic")
    return await session_store.complete_session_topic(db, link_id)


@router.delete("/{session_id}", response_model=MessageSchema)
async def delete_session(session_id: int, db: DbSession, user: CurrentUser):
    if await session_store.delete_session(db, session_id, user.id) is None:
        raise NotFoundError("Session")
    return MessageSchema(message="Session deleted successfully")
