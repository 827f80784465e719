"""Study Dashboard - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from study_dashboard.core.config import get_settings
from study_dashboard.core.errors import register_exception_handlers
from study_dashboard.core.logging_config import configure_logging, install_access_log
from study_dashboard.db.base import Base
from study_dashboard.db.session import engine
from study_dashboard.routers import auth, exams, sessions, stats, subjects, topics

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    # Alembic owns migrations; create_all only fills in a fresh database
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Study planning dashboard: subjects, topics, sessions, exams and progress",
    lifespan=lifespan,
)

register_exception_handlers(app)
install_access_log(app)

app.include_router(auth.router)
app.include_router(subjects.router)
app.include_router(topics.router)
app.include_router(sessions.router)
app.include_router(exams.router)
app.include_router(stats.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
