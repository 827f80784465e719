"""Read-only progress and statistics derived from stored rows.

Nothing here writes to the database. Progress is always topic-weighted and
computed per subject; exam progress borrows its subject's figure. Anonymous
callers (``user_id=None``) get zeroed defaults rather than errors.
"""
import math
from collections import defaultdict
from datetime import datetime, timedelta

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from study_dashboard.core.clock import utcnow
from study_dashboard.models import Exam, StudySession, StudyStats, Subject, Topic
from study_dashboard.schemas.exam import ExamOutSchema, ExamWithProgressSchema
from study_dashboard.schemas.session import (
    SessionOutSchema,
    SessionWithStatusSchema,
    TodaySessionSchema,
)
from study_dashboard.schemas.stats import (
    ProgressOutSchema,
    StatsOutSchema,
    SubjectTopicProgressSchema,
    TotalProgressSchema,
    WeeklyStatsOutSchema,
    WeekSchema,
)
from study_dashboard.schemas.subject import SubjectOutSchema, SubjectProgressSchema
from study_dashboard.services.subjects import list_subjects

WEEKS_IN_ROLLUP = 4

STATUS_COMPLETED = "completed"
STATUS_ONGOING = "ongoing"
STATUS_UPCOMING = "upcoming"
SESSION_STATUSES = (STATUS_UPCOMING, STATUS_ONGOING, STATUS_COMPLETED)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(done: int, total: int) -> int:
    """Whole-number percentage; 0 when there is nothing to count."""
    if not total:
        return 0
    return round_half_up(100 * done / total)


def duration_minutes(hours: float) -> int:
    return round_half_up((hours or 0) * 60)


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(int(minutes or 0), 60)
    return f"{hours}h {mins}m"


def format_hours(hours: float) -> str:
    return format_minutes(duration_minutes(hours))


# ---------- session status ----------

def session_status(session, now: datetime | None = None) -> str:
    if session.completed_at is not None:
        return STATUS_COMPLETED
    now = now or utcnow()
    if session.start_time <= now <= session.end_time:
        return STATUS_ONGOING
    return STATUS_UPCOMING


def with_status(session, now: datetime | None = None) -> SessionWithStatusSchema:
    data = SessionOutSchema.model_validate(session).model_dump()
    return SessionWithStatusSchema.model_validate({**data, "status": session_status(session, now)})


def filter_sessions(
    sessions,
    subject_id: int | None = None,
    status: str | None = None,
    now: datetime | None = None,
) -> list[SessionWithStatusSchema]:
    """Attach status to each session, then keep those matching the filters."""
    now = now or utcnow()
    annotated = [
        with_status(s, now)
        for s in sessions
        if subject_id is None or s.subject_id == subject_id
    ]
    if status:
        annotated = [s for s in annotated if s.status == status]
    return annotated


def today_session(session, now: datetime | None = None) -> TodaySessionSchema:
    """Session with counts of its linked topics; a completed session counts all of them."""
    links = list(session.session_topics)
    total = len(links)
    if session.completed_at is not None:
        completed = total
    else:
        completed = sum(1 for link in links if link.is_completed)
    data = with_status(session, now).model_dump()
    return TodaySessionSchema.model_validate(
        {**data, "total_topics_count": total, "completed_topics_count": completed}
    )


# ---------- topic progress ----------

async def _topic_counts(db: AsyncSession, subject_ids) -> dict[int, tuple[int, int]]:
    """subject_id -> (completed, total)"""
    if not subject_ids:
        return {}
    result = await db.execute(
        select(
            Topic.subject_id,
            func.sum(case((Topic.is_completed == True, 1), else_=0)),  # noqa: E712
            func.count(Topic.id),
        )
        .where(Topic.subject_id.in_(subject_ids))
        .group_by(Topic.subject_id)
    )
    return {sid: (int(done or 0), int(total or 0)) for sid, done, total in result.all()}


async def subject_progress(db: AsyncSession, subject_id: int) -> SubjectTopicProgressSchema:
    done, total = (await _topic_counts(db, [subject_id])).get(subject_id, (0, 0))
    return SubjectTopicProgressSchema(
        completed_topics=done,
        total_topics=total,
        progress=percentage(done, total),
    )


async def _session_totals(db: AsyncSession, subject_ids) -> dict[int, tuple[int, float]]:
    """subject_id -> (session count, summed duration hours)"""
    if not subject_ids:
        return {}
    result = await db.execute(
        select(
            StudySession.subject_id,
            func.count(StudySession.id),
            func.sum(StudySession.duration_hours),
        )
        .where(StudySession.subject_id.in_(subject_ids))
        .group_by(StudySession.subject_id)
    )
    return {sid: (int(count or 0), float(hours or 0)) for sid, count, hours in result.all()}


async def _last_studied(db: AsyncSession, subject_ids) -> dict[int, datetime]:
    """subject_id -> latest start time among completed sessions"""
    if not subject_ids:
        return {}
    result = await db.execute(
        select(StudySession.subject_id, func.max(StudySession.start_time))
        .where(
            StudySession.subject_id.in_(subject_ids),
            StudySession.completed_at.is_not(None),
        )
        .group_by(StudySession.subject_id)
    )
    return {sid: last for sid, last in result.all() if last is not None}


async def enrich_subjects(db: AsyncSession, subjects) -> list[SubjectProgressSchema]:
    ids = [s.id for s in subjects]
    topic_counts = await _topic_counts(db, ids)
    session_totals = await _session_totals(db, ids)
    last_studied = await _last_studied(db, ids)

    enriched = []
    for subject in subjects:
        done, total = topic_counts.get(subject.id, (0, 0))
        count, hours = session_totals.get(subject.id, (0, 0.0))
        base = SubjectOutSchema.model_validate(subject).model_dump()
        enriched.append(SubjectProgressSchema.model_validate({
            **base,
            "completed_topics": done,
            "total_topics": total,
            "progress": percentage(done, total),
            "session_count": count,
            "total_study_time": format_hours(hours),
            "last_studied": last_studied.get(subject.id),
        }))
    return enriched


async def overall_progress(db: AsyncSession, user_id: int | None) -> ProgressOutSchema:
    """Per-subject progress plus a topic-weighted total across all subjects."""
    if user_id is None:
        return ProgressOutSchema()
    subjects = await enrich_subjects(db, await list_subjects(db, user_id))
    done = sum(s.completed_topics for s in subjects)
    total = sum(s.total_topics for s in subjects)
    return ProgressOutSchema(
        subjects=subjects,
        total_progress=TotalProgressSchema(
            completed_topics=done,
            total_topics=total,
            percentage=percentage(done, total),
        ),
    )


async def exam_progress(db: AsyncSession, exam: Exam) -> int:
    return (await subject_progress(db, exam.subject_id)).progress


async def exams_with_progress(db: AsyncSession, exams) -> list[ExamWithProgressSchema]:
    counts = await _topic_counts(db, sorted({e.subject_id for e in exams}))
    out = []
    for exam in exams:
        done, total = counts.get(exam.subject_id, (0, 0))
        data = ExamOutSchema.model_validate(exam).model_dump()
        out.append(ExamWithProgressSchema.model_validate({**data, "progress": percentage(done, total)}))
    return out


# ---------- study stats ----------

def stats_snapshot(stats: StudyStats | None) -> StatsOutSchema:
    if stats is None:
        return StatsOutSchema()
    sessions = stats.sessions_completed or 0
    avg_minutes = round_half_up(stats.total_study_time / sessions) if sessions else 0
    # no history is kept, so week-over-week changes are reported as 0
    return StatsOutSchema(
        total_study_time=format_minutes(stats.total_study_time),
        topics_completed=stats.topics_completed,
        sessions_completed=sessions,
        avg_session_length=format_minutes(avg_minutes),
    )


async def weekly_rollup(
    db: AsyncSession,
    user_id: int | None,
    now: datetime | None = None,
) -> WeeklyStatsOutSchema:
    """Hours per subject name for the last four 7-day windows, oldest first.

    weekIndex 0 is the most recent window. Window i holds sessions dated d with
    today - 7*(i+1) < d <= today - 7*i. Empty windows are kept.
    """
    day = (now or utcnow()).date()
    buckets: list[dict[str, float]] = [defaultdict(float) for _ in range(WEEKS_IN_ROLLUP)]

    if user_id is not None:
        window_start = day - timedelta(days=7 * WEEKS_IN_ROLLUP)
        result = await db.execute(
            select(StudySession.date, StudySession.duration_hours, Subject.name)
            .join(Subject, StudySession.subject_id == Subject.id)
            .where(
                StudySession.user_id == user_id,
                StudySession.date > window_start,
                StudySession.date <= day,
            )
        )
        for session_date, hours, subject_name in result.all():
            index = (day - session_date).days // 7
            buckets[index][subject_name] += hours or 0

    weeks = [
        WeekSchema(week_index=i, subject_hours=dict(buckets[i]))
        for i in reversed(range(WEEKS_IN_ROLLUP))
    ]
    return WeeklyStatsOutSchema(weekly_data=weeks)
