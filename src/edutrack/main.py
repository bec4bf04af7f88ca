# src/edutrack/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from sqlalchemy.exc import IntegrityError
from starlette.responses import JSONResponse

from edutrack.api.routers import (
    auth,
    calendar,
    classes,
    events,
    grades,
    grading,
    health,
    leaderboard,
    messages,
    point_rules,
    point_suggestions,
    point_transactions,
    reports,
    resources,
    students,
    subjects,
    teachers,
    users,
)
from edutrack.app_logger import setup_logging
from edutrack.core.config import settings
from edutrack.db.session import create_all, get_engine
from edutrack.services.errors import EduTrackError

# If you might be on Postgres/asyncpg, these imports let us detect specific violation types
try:
    from asyncpg.exceptions import (
        CheckViolationError,
        ForeignKeyViolationError,
        NotNullViolationError,
        UniqueViolationError,
    )
    _HAS_ASYNCPG = True
except ImportError:  # pragma: no cover
    _HAS_ASYNCPG = False


setup_logging(settings.LOG_LEVEL)
log = logging.getLogger("edutrack.main")

ROUTERS = (
    health.router,
    auth.router,
    users.router,
    students.router,
    teachers.router,
    subjects.router,
    classes.router,
    grades.router,
    point_transactions.router,
    point_rules.router,
    point_suggestions.router,
    messages.router,
    events.router,
    calendar.router,
    resources.router,
    leaderboard.router,
    reports.router,
    grading.router,
)


def generate_unique_id(route: APIRoute) -> str:
    methods = "_".join(sorted((route.methods or []), key=str.lower)).lower()
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").replace("-", "_").strip("_")
    tag = (route.tags[0] if route.tags else "default").lower().replace(" ", "_")
    return f"{tag}__{methods}__{path}"


def _integrity_status(exc: IntegrityError) -> tuple[int, str]:
    """
    Map DB integrity errors to clear 4xx responses instead of 500.
    - Unique constraint -> 409 Conflict
    - Not-null / FK / Check -> 422 Unprocessable Entity (validation-like)
    - Otherwise -> 400 Bad Request
    """
    orig = getattr(exc, "orig", None)

    # asyncpg-specific (PostgreSQL) precise mapping
    if _HAS_ASYNCPG and orig is not None:
        cause = getattr(orig, "__cause__", None) or orig
        if isinstance(cause, UniqueViolationError):
            return 409, "Unique constraint violation"
        if isinstance(cause, ForeignKeyViolationError):
            return 422, "Foreign key constraint failed"
        if isinstance(cause, NotNullViolationError):
            return 422, "Missing required field (NOT NULL violation)"
        if isinstance(cause, CheckViolationError):
            return 422, "Check constraint failed"

    # Generic string heuristics (works across DBs/drivers)
    low = str(orig or exc).lower()
    if "unique constraint" in low or "duplicate key" in low:
        return 409, "Unique constraint violation"
    if "foreign key" in low:
        return 422, "Foreign key constraint failed"
    if "not null" in low or "null value in column" in low:
        return 422, "Missing required field (NOT NULL violation)"
    if "check constraint" in low:
        return 422, "Check constraint failed"
    return 400, "Integrity error"


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------------- STARTUP ----------------
        if settings.AUTO_CREATE_TABLES:
            await create_all()
            logging.getLogger("startup").info("tables ensured on %s", get_engine().url.render_as_string())
        Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        logging.getLogger("startup").info(
            "mounted routes: %s",
            sorted(r.path for r in app.routes if isinstance(r, APIRoute)),
        )

        yield

        # ---------------- SHUTDOWN ----------------
        await get_engine().dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        generate_unique_id_function=generate_unique_id,
        lifespan=lifespan,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in settings.cors_origins],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(EduTrackError)
    async def edutrack_error_handler(request: Request, exc: EduTrackError):
        level = logging.WARNING if exc.status_code >= 500 else logging.INFO
        log.log(level, "%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(exc.to_dict()),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        status_code, detail = _integrity_status(exc)
        message = str(getattr(exc, "orig", None) or exc)
        # Log once with context; don't leak sensitive values
        log.warning(
            "IntegrityError on %s %s -> %s: %s",
            request.method, request.url.path, status_code, message
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": {"error": "integrity_error", "reason": detail}},
        )

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()
