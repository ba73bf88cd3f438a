"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.config import get_settings
from langschool.core.database import close_engine, get_db_session
from langschool.core.metrics import build_metrics_response, instrument_http_request
from langschool.modules.audit.router import router as audit_router
from langschool.modules.courses.router import router as courses_router
from langschool.modules.enrollments.router import router as enrollments_router
from langschool.modules.gallery.router import router as gallery_router
from langschool.modules.reports.router import router as reports_router
from langschool.modules.scheduling.router import router as scheduling_router
from langschool.modules.timetable.router import router as timetable_router
from langschool.modules.users.router import router as users_router
from langschool.shared.exceptions import register_exception_handlers
from langschool.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info(
        "Starting %s (strict transitions: %s, payment required for activation: %s)",
        settings.app_name,
        settings.enrollment_strict_transitions,
        settings.enrollment_require_payment_for_activation,
    )

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(courses_router, prefix=settings.api_prefix)
app.include_router(scheduling_router, prefix=settings.api_prefix)
app.include_router(timetable_router, prefix=settings.api_prefix)
app.include_router(enrollments_router, prefix=settings.api_prefix)
app.include_router(gallery_router, prefix=settings.api_prefix)
app.include_router(reports_router, prefix=settings.api_prefix)
app.include_router(audit_router, prefix=settings.api_prefix)


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness check; never touches the database."""
    return {"status": "ok"}


async def _schema_revision(session: AsyncSession) -> str | None:
    """Return the applied alembic revision, or None when the database is unusable."""
    try:
        return await session.scalar(text("SELECT version_num FROM alembic_version"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database readiness check failed")
        return None


@app.get("/ready")
async def readiness_check(session: AsyncSession = Depends(get_db_session)) -> dict[str, str]:
    """Ready once the database answers and carries a migrated schema."""
    revision = await _schema_revision(session)
    if revision is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "schema_revision": revision,
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
