"""FastAPI dependencies for database access."""
from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from study_planner.db.session import SessionLocal


def get_db() -> Iterator[Session]:
    """Yield a request-scoped session, rolling back on errors."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
