"""Process-wide engine and session factory."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from study_planner.core.config import settings

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_lock = Lock()


def get_engine() -> Engine:
    """Return the shared engine, creating it on first use."""
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    with _lock:
        if _engine is None:
            if not settings.database_url:
                raise RuntimeError("DATABASE_URL is not configured")
            engine_kwargs = {"pool_pre_ping": True, "future": True}
            if not settings.database_url.startswith("sqlite"):
                engine_kwargs["pool_size"] = settings.db_pool_size
            _engine = create_engine(settings.database_url, **engine_kwargs)
            _session_factory = sessionmaker(bind=_engine, autoflush=False, autocommit=False, future=True)
            logger.info("Database engine created (dialect=%s)", _engine.dialect.name)
    return _engine


def get_sessionmaker() -> sessionmaker:
    """Return the session factory bound to the shared engine."""
    get_engine()
    if _session_factory is None:  # pragma: no cover - guarded by get_engine
        raise RuntimeError("Session factory failed to initialize")
    return _session_factory


def SessionLocal() -> Session:
    """Open a new ORM session against the shared engine."""
    return get_sessionmaker()()
