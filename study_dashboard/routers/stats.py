"""Progress and statistics routes (read-only aggregation)."""
from fastapi import APIRouter

from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.stats import ProgressOutSchema, StatsOutSchema, WeeklyStatsOutSchema
from study_dashboard.services import aggregation
from study_dashboard.services.study_stats import get_or_create_stats

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/progress", response_model=ProgressOutSchema)
async def get_progress(db: DbSession, user: CurrentUser):
    """Per-subject topic progress and a topic-weighted total."""
    return await aggregation.overall_progress(db, user.id)


@router.get("/stats", response_model=StatsOutSchema)
async def get_stats(db: DbSession, user: CurrentUser):
    """Running totals; the stats row is created on first read."""
    stats = await get_or_create_stats(db, user.id)
    return aggregation.stats_snapshot(stats)


@router.get("/stats/weekly", response_model=WeeklyStatsOutSchema)
async def get_weekly_stats(db: DbSession, user: CurrentUser):
    return await aggregation.weekly_rollup(db, user.id)
