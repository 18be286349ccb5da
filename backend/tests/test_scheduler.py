from __future__ import annotations

from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from study_planner.db.models.user import User
from study_planner.db.models.user_session import UserSession
from study_planner.services.session_store import SESSION_TTL, create_session
from study_planner.worker import scheduler_main


def test_register_jobs_adds_session_purge() -> None:
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler_main.register_jobs(scheduler)

    assert scheduler.get_job(scheduler_main.SESSION_PURGE_JOB_ID) is not None


def test_purge_job_deletes_expired_sessions(session_factory, monkeypatch) -> None:
    db = session_factory()
    try:
        user = User(username="sleepy", password_hash="x", display_name="sleepy", role="user")
        db.add(user)
        db.commit()
        long_ago = datetime.now(timezone.utc) - SESSION_TTL - timedelta(days=1)
        create_session(db, user.id, now=long_ago)
        live = create_session(db, user.id)
    finally:
        db.close()

    monkeypatch.setattr(scheduler_main, "SessionLocal", session_factory)

    assert scheduler_main.run_session_purge_job() == 1

    db = session_factory()
    try:
        assert [row.session_token for row in db.query(UserSession).all()] == [live]
    finally:
        db.close()


def test_purge_job_survives_database_errors(monkeypatch) -> None:
    class _BrokenSession:
        def query(self, *args, **kwargs):
            raise RuntimeError("database unavailable")

        def rollback(self) -> None:
            pass

        def close(self) -> None:
            pass

    monkeypatch.setattr(scheduler_main, "SessionLocal", _BrokenSession)

    assert scheduler_main.run_session_purge_job() == 0
