"""Exam routes. Listings carry progress borrowed from each exam's subject."""
from fastapi import APIRouter

from study_dashboard.core.config import get_settings
from study_dashboard.core.errors import NotFoundError, ValidationError
from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.exam import ExamCreateSchema, ExamDetailSchema, ExamOutSchema, ExamWithProgressSchema
from study_dashboard.schemas.stats import MessageSchema
from study_dashboard.schemas.topic import ExamTopicOutSchema, TopicLinkSchema
from study_dashboard.services import aggregation
from study_dashboard.services import exams as exam_store
from study_dashboard.services import subjects as subject_store
from study_dashboard.services import topics as topic_store

router = APIRouter(prefix="/api/exams", tags=["exams"])
settings = get_settings()


@router.get("", response_model=list[ExamWithProgressSchema])
async def list_exams(db: DbSession, user: CurrentUser):
    exams = await exam_store.list_exams(db, user.id)
    return await aggregation.exams_with_progress(db, exams)


@router.get("/upcoming", response_model=list[ExamWithProgressSchema])
async def list_upcoming_exams(db: DbSession, user: CurrentUser):
    exams = await exam_store.list_upcoming_exams(db, user.id, limit=settings.upcoming_exam_limit)
    return await aggregation.exams_with_progress(db, exams)


@router.get("/{exam_id}", response_model=ExamDetailSchema)
async def get_exam(exam_id: int, db: DbSession, user: CurrentUser):
    """One exam with its linked topics and its subject's progress."""
    exam = await exam_store.get_exam(db, exam_id, user.id)
    if exam is None:
        raise NotFoundError("Exam")
    detail = ExamDetailSchema.model_validate(exam)
    return detail.model_copy(update={"progress": await aggregation.exam_progress(db, exam)})


@router.post("", response_model=ExamOutSchema, status_code=201)
async def create_exam(body: ExamCreateSchema, db: DbSession, user: CurrentUser):
    """Create an exam; the date must parse as an ISO date or timestamp."""
    if await subject_store.get_subject(db, body.subject_id, user.id) is None:
        raise ValidationError.for_field("subjectId", "Subject does not exist")
    return await exam_store.insert_exam(db, user.id, body)


@router.post("/{exam_id}/topics", response_model=ExamTopicOutSchema, status_code=201)
async def link_topic(exam_id: int, body: TopicLinkSchema, db: DbSession, user: CurrentUser):
    if await exam_store.get_exam(db, exam_id, user.id) is None:
        raise NotFoundError("Exam")
    if await topic_store.get_topic(db, body.topic_id, user.id) is None:
        raise ValidationError.for_field("topicId", "Topic does not exist")
    return await exam_store.link_exam_topic(db, exam_id, body.topic_id)


@router.delete("/{exam_id}", response_model=MessageSchema)
async def delete_exam(exam_id: int, db: DbSession, user: CurrentUser):
    if await exam_store.delete_exam(db, exam_id, user.id) is None:
        raise NotFoundError("Exam")
    return MessageSchema(message="Exam deleted successfully")
