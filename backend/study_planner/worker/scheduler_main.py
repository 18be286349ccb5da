"""Dedicated APScheduler worker process."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from study_planner.core.config import settings
from study_planner.core.logging import configure_logging
from study_planner.db.session import SessionLocal
from study_planner.observability.metrics import log_metric
from study_planner.services.session_store import purge_expired_sessions

logger = logging.getLogger(__name__)

SESSION_PURGE_JOB_ID = "session_purge_job"


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled:
        register_jobs(scheduler)
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running jobs once on startup")
            run_session_purge_job()
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler) -> None:
    scheduler.add_job(
        run_session_purge_job,
        trigger="interval",
        minutes=settings.session_purge_minutes,
        id=SESSION_PURGE_JOB_ID,
        replace_existing=True,
    )
    logger.info(
        "Registered scheduler jobs (session purge every %s min, %s)",
        settings.session_purge_minutes,
        settings.scheduler_timezone,
    )


def run_session_purge_job() -> int:
    """Delete expired sessions; failures are logged and the job keeps its schedule."""
    session = SessionLocal()
    try:
        purged = purge_expired_sessions(session)
        logger.info("Session purge job complete: purged=%s", purged)
        log_metric("sessions.purged", purged)
        return purged
    except Exception:
        session.rollback()
        logger.exception("Session purge job failed")
        return 0
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
