"""Main FastAPI application for the study planner backend."""
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from study_planner.api.routes.admin import router as admin_router
from study_planner.api.routes.ai import router as ai_router
from study_planner.api.routes.auth import router as auth_router
from study_planner.api.routes.countdown import router as countdown_router
from study_planner.api.routes.pomodoro import router as pomodoro_router
from study_planner.api.routes.preference import router as preference_router
from study_planner.api.routes.review import router as review_router
from study_planner.api.routes.stats import router as stats_router
from study_planner.api.routes.subject import router as subject_router
from study_planner.api.routes.task import router as task_router
from study_planner.core.config import settings
from study_planner.core.errors import PlannerError
from study_planner.core.logging import configure_logging
from study_planner.core.middleware import RequestIDMiddleware
from study_planner.db.deps import get_db
from study_planner.db.session import SessionLocal
from study_planner.observability.client import init_opik
from study_planner.observability.tracing import trace
from study_planner.services.user_service import ensure_bootstrap_admin

configure_logging(log_level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(subject_router)
app.include_router(task_router)
app.include_router(countdown_router)
app.include_router(pomodoro_router)
app.include_router(review_router)
app.include_router(preference_router)
app.include_router(stats_router)
app.include_router(ai_router)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Render domain errors as {"detail": message} with the error's status."""
    if exc.status_code >= 500:
        logger.warning("Request failed with %s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.on_event("startup")
def bootstrap_admin() -> None:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.bootstrap_admin_username and settings.bootstrap_admin_password):
        return
    db = SessionLocal()
    try:
        ensure_bootstrap_admin(db, settings.bootstrap_admin_username, settings.bootstrap_admin_password)
    finally:
        db.close()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}


@app.get("/health/db", tags=["health"], summary="Database connectivity probe")
def health_db(request: Request, db: Session = Depends(get_db)) -> dict[str, str]:
    with trace("http.health_db", metadata={"route": "/health/db"}, request_id=request.state.request_id):
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "reachable"}
